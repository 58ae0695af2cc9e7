# schemas/scheduler.py
"""
Per-tick bookkeeping for the job scheduler.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class DispatchOutcome(BaseModel):
     """Counts from one dispatcher or watcher call."""
     sent: int = 0
     failed: int = 0
     skipped: int = 0


class LeaseTickResult(BaseModel):
     """Work done for a single lease during a tick."""
     lease_id: int
     payments_evaluated: int = 0
     payments_updated: int = 0
     payments_skipped: int = 0
     reminders_sent: int = 0
     reminders_failed: int = 0
     expiry_notices_sent: int = 0
     expiry_notices_failed: int = 0
     errors: int = 0
     cancelled: bool = False


class TickReport(BaseModel):
     """Summary of one full pass over all active leases."""
     today: date
     started_at: datetime
     finished_at: Optional[datetime] = None
     aborted: bool = False
     leases_seen: int = 0
     leases_cancelled: int = 0
     payments_evaluated: int = 0
     payments_updated: int = 0
     payments_skipped: int = 0
     reminders_sent: int = 0
     reminders_failed: int = 0
     expiry_notices_sent: int = 0
     expiry_notices_failed: int = 0
     entity_errors: int = 0

     def absorb(self, result: LeaseTickResult) -> None:
          """Fold one lease's result into the tick totals."""
          if result.cancelled:
               self.leases_cancelled += 1
          self.payments_evaluated += result.payments_evaluated
          self.payments_updated += result.payments_updated
          self.payments_skipped += result.payments_skipped
          self.reminders_sent += result.reminders_sent
          self.reminders_failed += result.reminders_failed
          self.expiry_notices_sent += result.expiry_notices_sent
          self.expiry_notices_failed += result.expiry_notices_failed
          self.entity_errors += result.errors
