# services/late_fee_policy.py
"""
Late fee policy.

A flat fee taken from the lease, assessed once when a payment first goes
late. No proration by days late and no cap. The evaluator only calls this
while the payment's stored late fee is still zero.
"""
from schemas.ledger import LeaseSnapshot, RentPaymentSnapshot


def compute_late_fee(lease: LeaseSnapshot, payment: RentPaymentSnapshot) -> int:
     """
     Fee (in cents) to assess on a payment that has passed its grace period.

     Args:
          lease: Owning lease; late_fee_amount is the flat fee
          payment: The late payment (unused by the flat policy)

     Returns:
          int: Fee in cents, 0 if the lease has no fee configured
     """
     if not lease.late_fee_amount or lease.late_fee_amount < 0:
          return 0
     return int(lease.late_fee_amount)
