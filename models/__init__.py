# models/__init__.py
from .base import Base
from .user import User
from .tenant import Tenant
from .property_owner import PropertyOwner
from .property import Property
from .property_unit import PropertyUnit
from .lease import Lease, LeaseStatus
from .rent_payment import RentPayment, PaymentStatus, PaymentMethod, OPEN_PAYMENT_STATUSES
from .lease_charge import LeaseCharge, ChargeCategory, ChargeAmountType
from .notification_record import NotificationRecord

__all__ = [
     "Base",
     "User",
     "Tenant",
     "PropertyOwner",
     "Property",
     "PropertyUnit",
     "Lease",
     "LeaseStatus",
     "RentPayment",
     "PaymentStatus",
     "PaymentMethod",
     "OPEN_PAYMENT_STATUSES",
     "LeaseCharge",
     "ChargeCategory",
     "ChargeAmountType",
     "NotificationRecord",
]
