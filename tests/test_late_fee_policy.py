# tests/test_late_fee_policy.py
from datetime import date

from models import LeaseStatus, PaymentStatus
from schemas.ledger import LeaseSnapshot, RentPaymentSnapshot
from services.late_fee_policy import compute_late_fee


def make_lease(late_fee_amount):
     return LeaseSnapshot(
          id=1,
          status=LeaseStatus.ACTIVE,
          tenant_id=1,
          start_date=date(2025, 4, 1),
          end_date=date(2026, 12, 31),
          monthly_rent=150000,
          late_fee_amount=late_fee_amount,
          late_fee_grace_days=5,
     )


PAYMENT = RentPaymentSnapshot(
     id=10,
     lease_id=1,
     period_start=date(2026, 3, 1),
     period_end=date(2026, 3, 31),
     due_date=date(2026, 3, 1),
     amount_due=150000,
     status=PaymentStatus.DUE,
)


class TestComputeLateFee:
     """Flat fee from the lease, no proration or cap."""

     def test_flat_fee(self):
          assert compute_late_fee(make_lease(5000), PAYMENT) == 5000

     def test_no_fee_configured(self):
          assert compute_late_fee(make_lease(None), PAYMENT) == 0

     def test_zero_fee(self):
          assert compute_late_fee(make_lease(0), PAYMENT) == 0

     def test_negative_fee_is_ignored(self):
          assert compute_late_fee(make_lease(-100), PAYMENT) == 0

     def test_fee_not_capped_by_rent(self):
          assert compute_late_fee(make_lease(200000), PAYMENT) == 200000
