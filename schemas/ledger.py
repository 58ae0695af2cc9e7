# schemas/ledger.py
"""
Pydantic snapshots of ledger entities.

The scheduler never holds ORM objects across calls: the ledger store reads
rows inside a short session and hands back these immutable snapshots, which
the evaluator, dispatcher and watcher work on.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.lease import LeaseStatus
from models.rent_payment import PaymentStatus


class Recipient(BaseModel):
     """Someone who can receive a notification."""
     name: str = "Tenant"
     email: Optional[str] = None
     phone: Optional[str] = None
     role: str = Field(default="tenant", description="tenant, owner or manager")

     model_config = ConfigDict(frozen=True)


class LeaseSnapshot(BaseModel):
     """Active lease with the policy and contacts the scheduler needs."""
     id: int
     status: LeaseStatus
     tenant_id: int
     property_unit_id: Optional[int] = None
     start_date: date
     end_date: date
     monthly_rent: int = Field(..., description="Monthly rent in cents")
     late_fee_amount: Optional[int] = Field(None, description="Flat late fee in cents")
     late_fee_grace_days: Optional[int] = Field(None, description="Days after due date before a payment is late")

     property_name: str = ""
     unit_number: Optional[str] = None
     tenant: Recipient = Field(default_factory=Recipient)
     managers: List[Recipient] = Field(default_factory=list)

     model_config = ConfigDict(frozen=True)


class RentPaymentSnapshot(BaseModel):
     """One billing-period ledger entry, as read at the start of its evaluation."""
     id: int
     lease_id: int
     period_start: date
     period_end: date
     due_date: Optional[date] = None
     amount_due: int
     amount_paid: int = 0
     late_fee: int = 0
     status: PaymentStatus = PaymentStatus.UPCOMING
     paid_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True, frozen=True)


class LeaseChargeSnapshot(BaseModel):
     """Recurring charge on a lease (read-only)."""
     id: int
     lease_id: int
     category: str
     name: str
     amount_type: str = "fixed"
     fixed_amount: Optional[int] = None
     estimated_amount: Optional[int] = None

     model_config = ConfigDict(from_attributes=True, frozen=True)

     @property
     def monthly_amount(self) -> int:
          """Fixed amount for fixed charges, estimate for variable ones."""
          if self.amount_type == "fixed":
               return self.fixed_amount or 0
          return self.estimated_amount or 0


class PaymentEvaluation(BaseModel):
     """Result of evaluating one rent payment on a given day."""
     payment_id: int
     previous_status: PaymentStatus
     status: PaymentStatus
     previous_late_fee: int = 0
     late_fee: int = 0

     @property
     def changed(self) -> bool:
          return self.status != self.previous_status or self.late_fee != self.previous_late_fee

     @property
     def fee_assessed(self) -> bool:
          return self.late_fee != self.previous_late_fee

     @classmethod
     def unchanged(cls, payment: RentPaymentSnapshot) -> "PaymentEvaluation":
          return cls(
               payment_id=payment.id,
               previous_status=payment.status,
               status=payment.status,
               previous_late_fee=payment.late_fee,
               late_fee=payment.late_fee,
          )
