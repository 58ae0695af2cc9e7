# services/ledger_store.py
"""
Rent Ledger Store - the scheduler's only way to read and write the ledger.

LedgerStore is the interface the scheduler core depends on.
SqlLedgerStore implements it over the SQLAlchemy models:

- Every call opens its own short session, so one store can be shared by
  the scheduler's worker threads.
- Reads return pydantic snapshots, never live ORM objects.
- Notification markers rely on the unique (entity_id, kind, day) constraint
  for atomic check-then-fire.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from typing import Generator, List, Optional

from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, sessionmaker

from models import (
     Lease,
     LeaseCharge,
     LeaseStatus,
     NotificationRecord,
     OPEN_PAYMENT_STATUSES,
     PaymentStatus,
     Property,
     PropertyOwner,
     RentPayment,
)
from schemas.ledger import (
     LeaseChargeSnapshot,
     LeaseSnapshot,
     Recipient,
     RentPaymentSnapshot,
)
from services.errors import LedgerUnavailableError

logger = logging.getLogger(__name__)


class LedgerStore(ABC):
     """Persistence interface consumed by the scheduler core."""

     @abstractmethod
     def list_active_leases(self) -> List[LeaseSnapshot]:
          """
          All leases with status ACTIVE.

          Raises:
               LedgerUnavailableError: If the store cannot be read at all
          """

     @abstractmethod
     def list_open_rent_payments(self, lease_id: int) -> List[RentPaymentSnapshot]:
          """Payments of a lease that are neither PAID nor WAIVED, oldest due first."""

     @abstractmethod
     def update_payment_status(
          self,
          payment_id: int,
          status: PaymentStatus,
          late_fee: int,
          expected_amount_paid: Optional[int] = None
     ) -> bool:
          """
          Persist an evaluated status and late fee.

          Returns False (and writes nothing) when the record has meanwhile become
          PAID/WAIVED, or when expected_amount_paid no longer matches.
          """

     @abstractmethod
     def mark_notified(self, entity_id, kind: str, day: date) -> bool:
          """Claim a (entity, kind, day) marker. False if it already exists."""

     @abstractmethod
     def release_notified(self, entity_id, kind: str, day: date) -> None:
          """Drop a marker whose notification could not be delivered."""

     @abstractmethod
     def list_lease_charges(self, lease_id: int) -> List[LeaseChargeSnapshot]:
          """Active recurring charges on a lease."""


class SqlLedgerStore(LedgerStore):
     """LedgerStore backed by the SQLAlchemy models."""

     def __init__(self, session_factory: sessionmaker):
          self._session_factory = session_factory

     @contextmanager
     def _session(self) -> Generator[Session, None, None]:
          session = self._session_factory()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     # =========================================================================
     # READS
     # =========================================================================

     def list_active_leases(self) -> List[LeaseSnapshot]:
          try:
               with self._session() as db:
                    leases = (
                         db.query(Lease)
                         .options(
                              joinedload(Lease.tenant),
                              joinedload(Lease.property_unit),
                              joinedload(Lease.property).joinedload(Property.manager),
                              joinedload(Lease.property).joinedload(Property.owner).joinedload(PropertyOwner.user),
                         )
                         .filter(Lease.status == LeaseStatus.ACTIVE)
                         .order_by(Lease.id)
                         .all()
                    )
                    snapshots = []
                    for lease in leases:
                         try:
                              snapshots.append(self._lease_snapshot(lease))
                         except (ValueError, TypeError, AttributeError) as e:
                              logger.warning(f"[Ledger] Skipping lease {lease.id}, unreadable row: {e}")
                    return snapshots
          except SQLAlchemyError as e:
               raise LedgerUnavailableError(f"Could not list active leases: {e}") from e

     def list_open_rent_payments(self, lease_id: int) -> List[RentPaymentSnapshot]:
          with self._session() as db:
               payments = (
                    db.query(RentPayment)
                    .filter(
                         RentPayment.lease_id == lease_id,
                         RentPayment.status.in_(OPEN_PAYMENT_STATUSES)
                    )
                    .order_by(RentPayment.due_date, RentPayment.id)
                    .all()
               )
               return [RentPaymentSnapshot.model_validate(payment) for payment in payments]

     def list_lease_charges(self, lease_id: int) -> List[LeaseChargeSnapshot]:
          with self._session() as db:
               charges = (
                    db.query(LeaseCharge)
                    .filter(LeaseCharge.lease_id == lease_id, LeaseCharge.is_active.is_(True))
                    .order_by(LeaseCharge.id)
                    .all()
               )
               return [
                    LeaseChargeSnapshot(
                         id=charge.id,
                         lease_id=charge.lease_id,
                         category=charge.category.value,
                         name=charge.name,
                         amount_type=charge.amount_type.value,
                         fixed_amount=charge.fixed_amount,
                         estimated_amount=charge.estimated_amount,
                    )
                    for charge in charges
               ]

     # =========================================================================
     # WRITES
     # =========================================================================

     def update_payment_status(
          self,
          payment_id: int,
          status: PaymentStatus,
          late_fee: int,
          expected_amount_paid: Optional[int] = None
     ) -> bool:
          stmt = (
               update(RentPayment)
               .where(
                    RentPayment.id == payment_id,
                    RentPayment.status.notin_([PaymentStatus.PAID, PaymentStatus.WAIVED])
               )
               .values(status=status, late_fee=late_fee, updated_at=func.now())
               .execution_options(synchronize_session=False)
          )
          if expected_amount_paid is not None:
               # A payment recorded mid-tick invalidates this evaluation.
               stmt = stmt.where(RentPayment.amount_paid == expected_amount_paid)

          with self._session() as db:
               result = db.execute(stmt)
               return result.rowcount == 1

     def mark_notified(self, entity_id, kind: str, day: date) -> bool:
          try:
               with self._session() as db:
                    db.add(NotificationRecord(entity_id=str(entity_id), kind=kind, day=day))
                    db.flush()
               return True
          except IntegrityError:
               logger.debug(f"[Ledger] Marker already present: {entity_id}/{kind}/{day}")
               return False

     def release_notified(self, entity_id, kind: str, day: date) -> None:
          with self._session() as db:
               db.execute(
                    delete(NotificationRecord).where(
                         NotificationRecord.entity_id == str(entity_id),
                         NotificationRecord.kind == kind,
                         NotificationRecord.day == day,
                    )
               )

     # =========================================================================
     # SNAPSHOTS
     # =========================================================================

     @staticmethod
     def _lease_snapshot(lease: Lease) -> LeaseSnapshot:
          tenant = lease.tenant
          tenant_recipient = Recipient(
               name=tenant.display_name if tenant else "Tenant",
               email=tenant.email if tenant else None,
               phone=tenant.contact_number if tenant else None,
               role="tenant",
          )

          managers: List[Recipient] = []
          prop = lease.property
          if prop is not None:
               if prop.owner is not None and prop.owner.user is not None:
                    owner = prop.owner.user
                    managers.append(Recipient(name=owner.full_name, email=owner.email, phone=owner.phone, role="owner"))
               manager = prop.manager
               if manager is not None and all(m.email != manager.email for m in managers):
                    managers.append(Recipient(name=manager.full_name, email=manager.email, phone=manager.phone, role="manager"))

          return LeaseSnapshot(
               id=lease.id,
               status=lease.status,
               tenant_id=lease.tenant_id,
               property_unit_id=lease.property_unit_id,
               start_date=lease.start_date,
               end_date=lease.end_date,
               monthly_rent=lease.monthly_rent,
               late_fee_amount=lease.late_fee_amount,
               late_fee_grace_days=lease.late_fee_grace_days,
               property_name=prop.property_name if prop else "",
               unit_number=lease.property_unit.unit_number if lease.property_unit else None,
               tenant=tenant_recipient,
               managers=managers,
          )
