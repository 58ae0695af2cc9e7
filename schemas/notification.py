# schemas/notification.py
"""
Notification kinds, context and gateway results.
"""
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .ledger import LeaseChargeSnapshot


class NotificationKind(str, Enum):
     """What a scheduled notification is about."""
     RENT_DUE_SOON = "rent_due_soon"
     RENT_DUE_TODAY = "rent_due_today"
     RENT_LATE = "rent_late"
     LEASE_EXPIRING = "lease_expiring"


def expiry_marker_kind(horizon_days: int) -> str:
     """Dedup marker kind for a lease-expiry horizon, e.g. 'lease_expiring_30'."""
     return f"{NotificationKind.LEASE_EXPIRING.value}_{horizon_days}"


class NotificationContext(BaseModel):
     """Everything a template needs to render one notification."""
     lease_id: int
     property_name: str = ""
     unit_number: Optional[str] = None
     tenant_name: str = "Tenant"

     # Rent notices
     payment_id: Optional[int] = None
     amount_due: int = Field(default=0, description="Outstanding amount in cents")
     late_fee: int = Field(default=0, description="Assessed late fee in cents")
     due_date: Optional[date] = None
     charges: List[LeaseChargeSnapshot] = Field(default_factory=list)

     # Lease expiry notices
     end_date: Optional[date] = None
     days_until_expiry: Optional[int] = None


class SendResult(BaseModel):
     """Outcome of a gateway send. Failures are values, never exceptions."""
     success: bool
     channel: str = "email"
     message_id: Optional[str] = None
     error: Optional[str] = None

     @classmethod
     def ok(cls, channel: str = "email", message_id: Optional[str] = None) -> "SendResult":
          return cls(success=True, channel=channel, message_id=message_id)

     @classmethod
     def failed(cls, error: str, channel: str = "email") -> "SendResult":
          return cls(success=False, channel=channel, error=error)
