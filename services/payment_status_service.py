# services/payment_status_service.py
"""
Payment Status Evaluator - rent payment lifecycle.

Given a rent payment, its lease's late-fee policy and today's date, derive
the status the payment should have and whether a late fee is owed:

1. amount_paid >= amount_due + late_fee          -> PAID (terminal)
2. 0 < amount_paid < amount_due, grace not passed -> PARTIAL
3. otherwise, by date:
     today < due_date                             -> UPCOMING
     due_date <= today < due_date + grace_days    -> DUE
     today >= due_date + grace_days               -> LATE (+ fee if none yet)

PAID and WAIVED records are never touched, and a status never moves back
along upcoming -> due -> partial -> late. Evaluation is pure: persisting the
result is the caller's job.
"""
import logging
from datetime import date, timedelta
from typing import Callable, Optional

from models.rent_payment import PaymentStatus
from schemas.ledger import LeaseSnapshot, PaymentEvaluation, RentPaymentSnapshot
from services.errors import LedgerDataError
from services.late_fee_policy import compute_late_fee

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.WAIVED})

# Forward order of the non-terminal statuses. A record may only move right.
STATUS_ORDER = (
     PaymentStatus.UPCOMING,
     PaymentStatus.DUE,
     PaymentStatus.PARTIAL,
     PaymentStatus.LATE,
)

LateFeePolicy = Callable[[LeaseSnapshot, RentPaymentSnapshot], int]


def status_for_date(due_date: date, grace_days: int, today: date) -> PaymentStatus:
     """Timeline status of an unpaid payment on a given day."""
     if today < due_date:
          return PaymentStatus.UPCOMING
     if today < due_date + timedelta(days=grace_days):
          return PaymentStatus.DUE
     return PaymentStatus.LATE


def never_regress(current: PaymentStatus, computed: PaymentStatus) -> PaymentStatus:
     """Keep the current status when the computed one would be a step backwards."""
     if computed == PaymentStatus.PAID or current not in STATUS_ORDER:
          return computed
     if STATUS_ORDER.index(computed) < STATUS_ORDER.index(current):
          return current
     return computed


class PaymentStatusEvaluator:
     """Derives rent payment status and late fee for a given day."""

     def __init__(self, late_fee_policy: Optional[LateFeePolicy] = None):
          self._late_fee_policy = late_fee_policy or compute_late_fee

     def evaluate(
          self,
          payment: RentPaymentSnapshot,
          lease: LeaseSnapshot,
          today: date
     ) -> PaymentEvaluation:
          """
          Evaluate one rent payment.

          Args:
               payment: Payment as currently stored
               lease: Owning lease (grace period and late fee policy)
               today: Calendar day of the evaluation

          Returns:
               PaymentEvaluation with the target status and late fee

          Raises:
               LedgerDataError: If the payment has no due date or the lease has
                    no grace period configured
          """
          if payment.status in TERMINAL_STATUSES:
               logger.debug(f"[Evaluator] Payment {payment.id} is {payment.status.value}; leaving as is")
               return PaymentEvaluation.unchanged(payment)

          if payment.due_date is None:
               raise LedgerDataError("rent payment", payment.id, "missing due date")
          if lease.late_fee_grace_days is None or lease.late_fee_grace_days < 0:
               raise LedgerDataError("lease", lease.id, "missing late fee grace period")

          late_fee = payment.late_fee or 0
          amount_paid = payment.amount_paid or 0

          if amount_paid >= payment.amount_due + late_fee:
               status = PaymentStatus.PAID
          else:
               grace_breached = today >= payment.due_date + timedelta(days=lease.late_fee_grace_days)
               if 0 < amount_paid < payment.amount_due and not grace_breached:
                    status = PaymentStatus.PARTIAL
               else:
                    status = status_for_date(payment.due_date, lease.late_fee_grace_days, today)
               status = never_regress(payment.status, status)

               # One-time assessment: a fee already on the record is never re-added.
               if status == PaymentStatus.LATE and late_fee == 0:
                    late_fee = self._late_fee_policy(lease, payment)

          evaluation = PaymentEvaluation(
               payment_id=payment.id,
               previous_status=payment.status,
               status=status,
               previous_late_fee=payment.late_fee or 0,
               late_fee=late_fee,
          )
          if evaluation.changed:
               logger.debug(
                    f"[Evaluator] Payment {payment.id}: {payment.status.value} -> {status.value}, "
                    f"late_fee {evaluation.previous_late_fee} -> {late_fee}"
               )
          return evaluation
