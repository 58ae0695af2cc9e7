# services/lease_expiry_watcher.py
"""
Lease Expiry Watcher - warns tenant and landlord before a lease ends.

A notice goes out on the day the lease is exactly N days from its end date,
for each configured horizon N (30, 14 and 7 by default).
"""
import logging
from datetime import date
from typing import Iterable, List, Optional

from schemas.ledger import LeaseSnapshot, Recipient
from schemas.notification import NotificationContext, NotificationKind, SendResult, expiry_marker_kind
from schemas.scheduler import DispatchOutcome
from services.clock import days_between
from services.ledger_store import LedgerStore
from services.notification_gateway import NotificationGateway

logger = logging.getLogger(__name__)

DEFAULT_HORIZONS = (30, 14, 7)


class LeaseExpiryWatcher:
     def __init__(
          self,
          store: LedgerStore,
          gateway: NotificationGateway,
          horizons: Iterable[int] = DEFAULT_HORIZONS
     ):
          self.store = store
          self.gateway = gateway
          self.horizons = tuple(sorted(set(horizons), reverse=True))

     def horizon_for(self, lease: LeaseSnapshot, today: date) -> Optional[int]:
          """The horizon hit today, or None."""
          remaining = days_between(today, lease.end_date)
          return remaining if remaining in self.horizons else None

     @staticmethod
     def recipients(lease: LeaseSnapshot) -> List[Recipient]:
          return [lease.tenant, *lease.managers]

     def watch(self, lease: LeaseSnapshot, today: date) -> DispatchOutcome:
          """
          Send the expiry notice for a lease if one of the horizons is hit today.

          The (lease_id, lease_expiring_<h>, end_date) marker covers all
          recipients. It is released only when nobody could be reached, so a
          partial delivery is never repeated.
          """
          outcome = DispatchOutcome()
          horizon = self.horizon_for(lease, today)
          if horizon is None:
               return outcome

          kind = expiry_marker_kind(horizon)
          if not self.store.mark_notified(lease.id, kind, lease.end_date):
               logger.debug(f"[Expiry] {kind} for lease {lease.id} already sent")
               outcome.skipped += 1
               return outcome

          context = NotificationContext(
               lease_id=lease.id,
               property_name=lease.property_name,
               unit_number=lease.unit_number,
               tenant_name=lease.tenant.name,
               end_date=lease.end_date,
               days_until_expiry=horizon,
          )
          for recipient in self.recipients(lease):
               try:
                    result = self.gateway.send_reminder(recipient, NotificationKind.LEASE_EXPIRING, context)
               except Exception as e:
                    logger.exception(f"[Expiry] Gateway raised for lease {lease.id}")
                    result = SendResult.failed(str(e))

               if result.success:
                    outcome.sent += 1
               else:
                    logger.warning(f"[Expiry] Notice for lease {lease.id} to {recipient.role} failed: {result.error}")
                    outcome.failed += 1

          if outcome.sent == 0:
               self.store.release_notified(lease.id, kind, lease.end_date)
          else:
               logger.info(f"[Expiry] Lease {lease.id} expires in {horizon} days; notified {outcome.sent} recipient(s)")
          return outcome
