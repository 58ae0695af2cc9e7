# tests/test_ledger_store.py
"""
SqlLedgerStore against a real (SQLite) database.
"""
from datetime import date
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from models import LeaseStatus, PaymentStatus
from services.errors import LedgerUnavailableError
from services.ledger_store import SqlLedgerStore

from conftest import DUE


class TestListActiveLeases:
     def test_only_active_leases(self, store, seed):
          active = seed.lease()
          seed.lease(status=LeaseStatus.EXPIRED)
          seed.lease(status=LeaseStatus.DRAFT)
          leases = store.list_active_leases()
          assert [lease.id for lease in leases] == [active]

     def test_snapshot_carries_policy_and_contacts(self, store, seed):
          lease_id = seed.lease(late_fee_amount=5000, late_fee_grace_days=5)
          (lease,) = store.list_active_leases()
          assert lease.id == lease_id
          assert lease.monthly_rent == 150000
          assert lease.late_fee_amount == 5000
          assert lease.late_fee_grace_days == 5
          assert lease.property_name.startswith("Maple Court")
          assert lease.unit_number
          assert lease.tenant.name == "Jamie Rivera"
          assert lease.tenant.role == "tenant"
          assert {m.role for m in lease.managers} == {"owner", "manager"}

     def test_tenant_without_name_falls_back(self, store, seed):
          seed.lease(tenant_first_name=None)
          (lease,) = store.list_active_leases()
          assert lease.tenant.name == "Tenant"

     def test_unreadable_lease_is_skipped(self, store, seed, monkeypatch):
          broken = seed.lease()
          healthy = seed.lease()
          original = SqlLedgerStore._lease_snapshot

          def snapshot(lease):
               if lease.id == broken:
                    raise ValueError("monthly_rent must be an integer")
               return original(lease)

          monkeypatch.setattr(store, "_lease_snapshot", snapshot)

          assert [lease.id for lease in store.list_active_leases()] == [healthy]

     def test_store_failure_is_unavailable_error(self):
          session = MagicMock()
          session.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
          store = SqlLedgerStore(lambda: session)
          with pytest.raises(LedgerUnavailableError):
               store.list_active_leases()
          session.rollback.assert_called_once()
          session.close.assert_called_once()


class TestOpenPayments:
     def test_excludes_terminal_and_orders_by_due_date(self, store, seed):
          lease_id = seed.lease()
          later = seed.payment(lease_id, due_date=date(2026, 4, 1))
          earlier = seed.payment(lease_id, due_date=DUE, status=PaymentStatus.DUE)
          seed.payment(lease_id, due_date=date(2026, 2, 1), status=PaymentStatus.PAID)
          seed.payment(lease_id, due_date=date(2026, 1, 1), status=PaymentStatus.WAIVED)
          partial = seed.payment(lease_id, due_date=date(2026, 2, 15), amount_paid=100, status=PaymentStatus.PARTIAL)

          payments = store.list_open_rent_payments(lease_id)
          assert [p.id for p in payments] == [partial, earlier, later]

     def test_other_leases_not_included(self, store, seed):
          first = seed.lease()
          second = seed.lease()
          seed.payment(second)
          assert store.list_open_rent_payments(first) == []


class TestUpdatePaymentStatus:
     def test_writes_status_and_fee(self, store, seed):
          payment_id = seed.payment(seed.lease(), status=PaymentStatus.DUE)
          assert store.update_payment_status(payment_id, PaymentStatus.LATE, 5000) is True
          stored = seed.get_payment(payment_id)
          assert stored.status == PaymentStatus.LATE
          assert stored.late_fee == 5000

     def test_never_overwrites_waived(self, store, seed):
          payment_id = seed.payment(seed.lease(), status=PaymentStatus.WAIVED)
          assert store.update_payment_status(payment_id, PaymentStatus.LATE, 5000) is False
          assert seed.get_payment(payment_id).status == PaymentStatus.WAIVED

     def test_guard_on_amount_paid(self, store, seed):
          payment_id = seed.payment(seed.lease(), status=PaymentStatus.DUE)
          seed.record_payment(payment_id, 150000)
          applied = store.update_payment_status(payment_id, PaymentStatus.LATE, 5000, expected_amount_paid=0)
          assert applied is False
          stored = seed.get_payment(payment_id)
          assert stored.status == PaymentStatus.DUE
          assert stored.late_fee == 0

     def test_unknown_payment(self, store):
          assert store.update_payment_status(9999, PaymentStatus.DUE, 0) is False


class TestNotificationMarkers:
     def test_first_claim_wins(self, store):
          assert store.mark_notified(10, "rent_late", DUE) is True
          assert store.mark_notified(10, "rent_late", DUE) is False

     def test_marker_is_keyed_on_all_three_parts(self, store):
          assert store.mark_notified(10, "rent_late", DUE) is True
          assert store.mark_notified(11, "rent_late", DUE) is True
          assert store.mark_notified(10, "rent_due_today", DUE) is True
          assert store.mark_notified(10, "rent_late", date(2026, 4, 1)) is True

     def test_release_allows_reclaim(self, store, seed):
          store.mark_notified(10, "rent_late", DUE)
          store.release_notified(10, "rent_late", DUE)
          assert seed.markers() == []
          assert store.mark_notified(10, "rent_late", DUE) is True


class TestLeaseCharges:
     def test_active_charges_only(self, store, seed):
          lease_id = seed.lease()
          seed.charge(lease_id, "Water & Trash", 4500)
          seed.charge(lease_id, "Electricity", 6000, variable=True)
          seed.charge(lease_id, "Old parking", 2500, active=False)

          charges = store.list_lease_charges(lease_id)
          assert [c.name for c in charges] == ["Water & Trash", "Electricity"]
          assert [c.monthly_amount for c in charges] == [4500, 6000]
          assert charges[1].amount_type == "variable"
