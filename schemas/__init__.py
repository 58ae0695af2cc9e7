# schemas/__init__.py
from .ledger import (
     Recipient,
     LeaseSnapshot,
     RentPaymentSnapshot,
     LeaseChargeSnapshot,
     PaymentEvaluation,
)
from .notification import (
     NotificationKind,
     NotificationContext,
     SendResult,
     expiry_marker_kind,
)
from .scheduler import DispatchOutcome, LeaseTickResult, TickReport

__all__ = [
     "Recipient",
     "LeaseSnapshot",
     "RentPaymentSnapshot",
     "LeaseChargeSnapshot",
     "PaymentEvaluation",
     "NotificationKind",
     "NotificationContext",
     "SendResult",
     "expiry_marker_kind",
     "DispatchOutcome",
     "LeaseTickResult",
     "TickReport",
]
