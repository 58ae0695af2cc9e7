# tests/test_reminder_dispatcher.py
"""
Reminder dispatch: which notices fire on which day, and at most once.
"""
from datetime import timedelta

import pytest

from models import PaymentStatus
from schemas.notification import NotificationKind, SendResult
from services.reminder_dispatcher import ReminderDispatcher

from conftest import DUE


@pytest.fixture
def dispatcher(store, gateway):
     return ReminderDispatcher(store, gateway, days_before_due=3)


def snapshots(store, lease_id):
     (lease,) = [lease for lease in store.list_active_leases() if lease.id == lease_id]
     return lease, store.list_open_rent_payments(lease_id)


class TestKindsDue:
     def test_schedule(self, store, seed, dispatcher):
          lease_id = seed.lease()
          seed.payment(lease_id)
          _, (payment,) = snapshots(store, lease_id)

          assert dispatcher.kinds_due(payment, DUE - timedelta(days=3)) == [NotificationKind.RENT_DUE_SOON]
          assert dispatcher.kinds_due(payment, DUE - timedelta(days=2)) == []
          due = payment.model_copy(update={"status": PaymentStatus.DUE})
          assert dispatcher.kinds_due(due, DUE) == [NotificationKind.RENT_DUE_TODAY]
          assert dispatcher.kinds_due(due, DUE + timedelta(days=1)) == []
          late = payment.model_copy(update={"status": PaymentStatus.LATE})
          assert dispatcher.kinds_due(late, DUE + timedelta(days=9)) == [NotificationKind.RENT_LATE]

     def test_late_on_due_date_also_gets_due_today(self, store, seed, dispatcher):
          lease_id = seed.lease(late_fee_grace_days=0)
          seed.payment(lease_id, status=PaymentStatus.LATE, late_fee=5000)
          _, (payment,) = snapshots(store, lease_id)

          assert dispatcher.kinds_due(payment, DUE) == [NotificationKind.RENT_DUE_TODAY, NotificationKind.RENT_LATE]

     def test_partial_and_terminal_get_nothing(self, store, seed, dispatcher):
          lease_id = seed.lease()
          seed.payment(lease_id)
          _, (payment,) = snapshots(store, lease_id)
          for status in (PaymentStatus.PARTIAL, PaymentStatus.PAID, PaymentStatus.WAIVED):
               assert dispatcher.kinds_due(payment.model_copy(update={"status": status}), DUE) == []


class TestDispatch:
     def test_due_today_sent_once(self, store, seed, gateway, dispatcher):
          lease_id = seed.lease()
          payment_id = seed.payment(lease_id, status=PaymentStatus.DUE)
          lease, (payment,) = snapshots(store, lease_id)

          first = dispatcher.dispatch(payment, lease, DUE)
          second = dispatcher.dispatch(payment, lease, DUE)

          assert (first.sent, first.skipped) == (1, 0)
          assert (second.sent, second.skipped) == (0, 1)
          assert gateway.kinds() == [NotificationKind.RENT_DUE_TODAY]
          assert seed.markers() == [(str(payment_id), "rent_due_today", DUE)]

     def test_reminder_goes_to_tenant_with_context(self, store, seed, gateway, dispatcher):
          lease_id = seed.lease()
          seed.charge(lease_id, "Water & Trash", 4500)
          seed.payment(lease_id, status=PaymentStatus.LATE, late_fee=5000, amount_paid=20000)
          lease, (payment,) = snapshots(store, lease_id)

          dispatcher.dispatch(payment, lease, DUE + timedelta(days=6))

          ((recipient, kind, context),) = gateway.sent
          assert recipient == lease.tenant
          assert kind == NotificationKind.RENT_LATE
          assert context.amount_due == 150000 + 5000 - 20000
          assert context.late_fee == 5000
          assert context.due_date == DUE
          assert [c.name for c in context.charges] == ["Water & Trash"]

     def test_late_notice_fires_once_across_days(self, store, seed, gateway, dispatcher):
          lease_id = seed.lease()
          seed.payment(lease_id, status=PaymentStatus.LATE, late_fee=5000)
          lease, (payment,) = snapshots(store, lease_id)

          dispatcher.dispatch(payment, lease, DUE + timedelta(days=6))
          dispatcher.dispatch(payment, lease, DUE + timedelta(days=7))

          assert gateway.kinds() == [NotificationKind.RENT_LATE]

     def test_failed_send_releases_marker_for_retry(self, store, seed, gateway, dispatcher):
          lease_id = seed.lease()
          seed.payment(lease_id, status=PaymentStatus.DUE)
          lease, (payment,) = snapshots(store, lease_id)

          gateway.fail_all = True
          outcome = dispatcher.dispatch(payment, lease, DUE)
          assert outcome.failed == 1
          assert seed.markers() == []

          gateway.fail_all = False
          outcome = dispatcher.dispatch(payment, lease, DUE)
          assert outcome.sent == 1
          assert len(seed.markers()) == 1

     def test_raising_gateway_counts_as_failure(self, store, seed):
          class ExplodingGateway:
               def send_reminder(self, recipient, kind, context):
                    raise RuntimeError("boom")

          lease_id = seed.lease()
          seed.payment(lease_id, status=PaymentStatus.DUE)
          lease, (payment,) = snapshots(store, lease_id)

          dispatcher = ReminderDispatcher(store, ExplodingGateway())
          outcome = dispatcher.dispatch(payment, lease, DUE)
          assert outcome.failed == 1
          assert seed.markers() == []

     def test_nothing_due_touches_nothing(self, store, seed, gateway, dispatcher):
          lease_id = seed.lease()
          seed.payment(lease_id)
          lease, (payment,) = snapshots(store, lease_id)
          outcome = dispatcher.dispatch(payment, lease, DUE - timedelta(days=10))
          assert (outcome.sent, outcome.failed, outcome.skipped) == (0, 0, 0)
          assert gateway.sent == []
          assert seed.markers() == []


class TestSendResult:
     def test_failed_result_carries_error(self):
          result = SendResult.failed("nope")
          assert not result.success
          assert result.error == "nope"
