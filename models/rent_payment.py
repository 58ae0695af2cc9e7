# models/rent_payment.py
import enum
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class PaymentStatus(str, enum.Enum):
     """Enumeration for rent payment status."""
     UPCOMING = "upcoming"
     DUE = "due"
     PARTIAL = "partial"
     PAID = "paid"
     LATE = "late"
     WAIVED = "waived"


# Statuses the scheduler still evaluates. PAID and WAIVED are terminal.
OPEN_PAYMENT_STATUSES = (
     PaymentStatus.UPCOMING,
     PaymentStatus.DUE,
     PaymentStatus.PARTIAL,
     PaymentStatus.LATE,
)


class PaymentMethod(str, enum.Enum):
     CASH = "cash"
     CHECK = "check"
     ACH = "ach"
     CARD = "card"
     OTHER = "other"


class RentPayment(Base):
     """
     RentPayment model - one ledger entry per billing period per lease.

     amount_paid / paid_at are written by payment recording; status and
     late_fee are written by the scheduler's status evaluator.
     All amounts are in cents.
     """
     __tablename__ = "rent_payments"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     # Payment period
     period_start = Column(Date, nullable=False)
     period_end = Column(Date, nullable=False)
     due_date = Column(Date, nullable=True, index=True)

     # Amounts
     amount_due = Column(Integer, nullable=False)
     amount_paid = Column(Integer, default=0, nullable=False)
     late_fee = Column(Integer, default=0, nullable=False)

     status = Column(
          Enum(PaymentStatus, name="rent_payment_status", values_callable=lambda e: [m.value for m in e]),
          default=PaymentStatus.UPCOMING,
          nullable=False,
          index=True
     )

     # Payment details
     paid_at = Column(DateTime, nullable=True)
     payment_method = Column(
          Enum(PaymentMethod, name="payment_method", values_callable=lambda e: [m.value for m in e]),
          nullable=True
     )
     payment_reference = Column(String(255), nullable=True)  # Check number, transaction ID, etc.
     notes = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     lease = relationship("Lease", back_populates="rent_payments")

     def __repr__(self):
          return f"<RentPayment(id={self.id}, amount_due={self.amount_due}, status='{self.status.value}', due_date={self.due_date})>"

     @property
     def balance(self) -> int:
          """Outstanding amount including any assessed late fee (never negative)."""
          return max(0, self.amount_due + (self.late_fee or 0) - (self.amount_paid or 0))
