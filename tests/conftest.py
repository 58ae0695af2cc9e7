# tests/conftest.py
"""
Shared fixtures: a throwaway SQLite ledger, a seeding helper, a recording
notification gateway and a fixed clock.
"""
import os
import threading
from datetime import date, datetime
from typing import List, Optional, Set

# database.py builds its engine at import time; never point it at MS SQL here.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, select, update
from sqlalchemy.orm import sessionmaker

from config import SchedulerSettings
from models import (
     Base,
     ChargeAmountType,
     ChargeCategory,
     Lease,
     LeaseCharge,
     LeaseStatus,
     NotificationRecord,
     PaymentStatus,
     Property,
     PropertyOwner,
     PropertyUnit,
     RentPayment,
     Tenant,
     User,
)
from schemas.ledger import Recipient
from schemas.notification import NotificationContext, NotificationKind, SendResult
from services.clock import FixedClock
from services.ledger_store import SqlLedgerStore
from services.notification_gateway import NotificationGateway

DUE = date(2026, 3, 1)


class RecordingGateway(NotificationGateway):
     """Gateway double that records every send and fails on request."""

     def __init__(self):
          self.sent = []
          self.fail_emails: Set[str] = set()
          self.fail_all = False
          self._lock = threading.Lock()

     def send_reminder(self, recipient: Recipient, kind: NotificationKind, context: NotificationContext) -> SendResult:
          with self._lock:
               self.sent.append((recipient, kind, context))
          if self.fail_all or recipient.email in self.fail_emails:
               return SendResult.failed("mailbox unavailable")
          return SendResult.ok(message_id=f"msg-{len(self.sent)}")

     def kinds(self) -> List[NotificationKind]:
          return [kind for _, kind, _ in self.sent]

     def clear(self) -> None:
          with self._lock:
               self.sent.clear()


class LedgerSeeder:
     """Creates leases, payments and charges directly through the ORM."""

     def __init__(self, session_factory):
          self.session_factory = session_factory
          self._counter = 0

     def _next(self) -> int:
          self._counter += 1
          return self._counter

     def lease(
          self,
          monthly_rent: int = 150000,
          late_fee_amount: Optional[int] = 5000,
          late_fee_grace_days: Optional[int] = 5,
          start_date: date = date(2025, 4, 1),
          end_date: date = date(2026, 12, 31),
          status: LeaseStatus = LeaseStatus.ACTIVE,
          tenant_first_name: Optional[str] = "Jamie",
          tenant_email: Optional[str] = None,
          with_manager: bool = True,
     ) -> int:
          n = self._next()
          with self.session_factory() as db:
               owner_user = User(
                    email=f"owner{n}@example.com", first_name="Olivia", last_name="Owner", role="owner"
               )
               tenant_user = User(
                    email=f"tenant-user{n}@example.com", first_name="T", last_name="User", role="tenant"
               )
               db.add_all([owner_user, tenant_user])
               db.flush()

               owner = PropertyOwner(user_id=owner_user.id)
               db.add(owner)
               db.flush()

               manager_id = None
               if with_manager:
                    manager = User(
                         email=f"manager{n}@example.com", first_name="Max", last_name="Manager", role="manager"
                    )
                    db.add(manager)
                    db.flush()
                    manager_id = manager.id

               prop = Property(property_name=f"Maple Court {n}", registered_owner=owner.owner_id, manager_user_id=manager_id)
               db.add(prop)
               db.flush()
               unit = PropertyUnit(property_id=prop.id, unit_number=f"{n}A", status="occupied")
               tenant = Tenant(
                    user_id=tenant_user.id,
                    first_name=tenant_first_name,
                    last_name="Rivera" if tenant_first_name else None,
                    email=tenant_email or f"tenant{n}@example.com",
                    status="approved",
               )
               db.add_all([unit, tenant])
               db.flush()

               lease = Lease(
                    property_id=prop.id,
                    property_unit_id=unit.id,
                    tenant_id=tenant.tenant_id,
                    status=status,
                    monthly_rent=monthly_rent,
                    late_fee_amount=late_fee_amount,
                    late_fee_grace_days=late_fee_grace_days,
                    start_date=start_date,
                    end_date=end_date,
               )
               db.add(lease)
               db.flush()
               if late_fee_grace_days is None:
                    # The column default would otherwise fill in 5.
                    db.execute(update(Lease).where(Lease.id == lease.id).values(late_fee_grace_days=None))
               db.commit()
               return lease.id

     def payment(
          self,
          lease_id: int,
          due_date: Optional[date] = DUE,
          amount_due: int = 150000,
          amount_paid: int = 0,
          late_fee: int = 0,
          status: PaymentStatus = PaymentStatus.UPCOMING,
     ) -> int:
          period_start = due_date or DUE
          with self.session_factory() as db:
               payment = RentPayment(
                    lease_id=lease_id,
                    period_start=period_start,
                    period_end=date(period_start.year, period_start.month, 28),
                    due_date=due_date,
                    amount_due=amount_due,
                    amount_paid=amount_paid,
                    late_fee=late_fee,
                    status=status,
               )
               db.add(payment)
               db.commit()
               return payment.id

     def charge(self, lease_id: int, name: str, amount: int, variable: bool = False, active: bool = True) -> int:
          with self.session_factory() as db:
               charge = LeaseCharge(
                    lease_id=lease_id,
                    category=ChargeCategory.WATER_TRASH if not variable else ChargeCategory.ELECTRICITY,
                    name=name,
                    amount_type=ChargeAmountType.VARIABLE if variable else ChargeAmountType.FIXED,
                    fixed_amount=None if variable else amount,
                    estimated_amount=amount if variable else None,
                    is_active=active,
               )
               db.add(charge)
               db.commit()
               return charge.id

     def get_payment(self, payment_id: int) -> RentPayment:
          with self.session_factory() as db:
               return db.get(RentPayment, payment_id)

     def record_payment(self, payment_id: int, amount_paid: int) -> None:
          with self.session_factory() as db:
               payment = db.get(RentPayment, payment_id)
               payment.amount_paid = amount_paid
               db.commit()

     def set_payment_status(self, payment_id: int, status: PaymentStatus) -> None:
          with self.session_factory() as db:
               payment = db.get(RentPayment, payment_id)
               payment.status = status
               db.commit()

     def markers(self):
          with self.session_factory() as db:
               rows = db.scalars(select(NotificationRecord).order_by(NotificationRecord.id)).all()
               return [(row.entity_id, row.kind, row.day) for row in rows]


@pytest.fixture
def engine(tmp_path):
     engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
     Base.metadata.create_all(engine)
     yield engine
     engine.dispose()


@pytest.fixture
def session_factory(engine):
     return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
     return SqlLedgerStore(session_factory)


@pytest.fixture
def seed(session_factory):
     return LedgerSeeder(session_factory)


@pytest.fixture
def gateway():
     return RecordingGateway()


@pytest.fixture
def clock():
     return FixedClock(datetime(2026, 3, 1, 8, 0))


@pytest.fixture
def settings():
     return SchedulerSettings(timezone="UTC", max_workers=1)
