# services/reminder_dispatcher.py
"""
Reminder Dispatcher - rent reminders and late notices.

For one (already evaluated) rent payment decides which notices are due
today and sends each at most once:

- rent_due_soon   today == due_date - days_before_due
- rent_due_today  today == due_date
- rent_late       first tick the payment is LATE

Every send claims its (payment_id, kind, due_date) marker first. A failed
send releases the marker so the next tick can retry.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from models.rent_payment import PaymentStatus
from schemas.ledger import LeaseChargeSnapshot, LeaseSnapshot, RentPaymentSnapshot
from schemas.notification import NotificationContext, NotificationKind, SendResult
from schemas.scheduler import DispatchOutcome
from services.ledger_store import LedgerStore
from services.notification_gateway import NotificationGateway

logger = logging.getLogger(__name__)

REMINDER_STATUSES = frozenset({PaymentStatus.UPCOMING, PaymentStatus.DUE, PaymentStatus.LATE})


class ReminderDispatcher:
     """Sends rent reminders for a payment through the notification gateway."""

     def __init__(self, store: LedgerStore, gateway: NotificationGateway, days_before_due: int = 3):
          self.store = store
          self.gateway = gateway
          self.days_before_due = days_before_due

     def kinds_due(self, payment: RentPaymentSnapshot, today: date) -> List[NotificationKind]:
          """Notification kinds this payment qualifies for today."""
          if payment.status not in REMINDER_STATUSES or payment.due_date is None:
               return []

          kinds = []
          if today == payment.due_date - timedelta(days=self.days_before_due):
               kinds.append(NotificationKind.RENT_DUE_SOON)
          if today == payment.due_date:
               kinds.append(NotificationKind.RENT_DUE_TODAY)
          # With no grace period a payment is already late on its due date.
          if payment.status == PaymentStatus.LATE:
               kinds.append(NotificationKind.RENT_LATE)
          return kinds

     def dispatch(self, payment: RentPaymentSnapshot, lease: LeaseSnapshot, today: date) -> DispatchOutcome:
          """
          Send whatever notices the payment is due for today.

          Args:
               payment: Payment as persisted after evaluation
               lease: Owning lease (recipient and rendering details)
               today: Calendar day of the tick

          Returns:
               DispatchOutcome with sent / failed / skipped counts
          """
          outcome = DispatchOutcome()
          kinds = self.kinds_due(payment, today)
          if not kinds:
               return outcome

          charges: Optional[List[LeaseChargeSnapshot]] = None
          for kind in kinds:
               if not self.store.mark_notified(payment.id, kind.value, payment.due_date):
                    logger.debug(f"[Reminders] {kind.value} for payment {payment.id} already sent")
                    outcome.skipped += 1
                    continue

               if charges is None:
                    charges = self.store.list_lease_charges(lease.id)
               context = self.build_context(payment, lease, charges)

               try:
                    result = self.gateway.send_reminder(lease.tenant, kind, context)
               except Exception as e:
                    # Gateways must not raise; treat one that does as a failed send.
                    logger.exception(f"[Reminders] Gateway raised for payment {payment.id}")
                    result = SendResult.failed(str(e))

               if result.success:
                    logger.info(f"[Reminders] Sent {kind.value} for payment {payment.id} (lease {lease.id})")
                    outcome.sent += 1
               else:
                    logger.warning(f"[Reminders] {kind.value} for payment {payment.id} failed: {result.error}")
                    self.store.release_notified(payment.id, kind.value, payment.due_date)
                    outcome.failed += 1
          return outcome

     @staticmethod
     def build_context(
          payment: RentPaymentSnapshot,
          lease: LeaseSnapshot,
          charges: List[LeaseChargeSnapshot]
     ) -> NotificationContext:
          outstanding = payment.amount_due + payment.late_fee - payment.amount_paid
          return NotificationContext(
               lease_id=lease.id,
               property_name=lease.property_name,
               unit_number=lease.unit_number,
               tenant_name=lease.tenant.name,
               payment_id=payment.id,
               amount_due=max(outstanding, 0),
               late_fee=payment.late_fee,
               due_date=payment.due_date,
               charges=charges,
          )
