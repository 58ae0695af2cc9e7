# services/job_scheduler.py
"""
Job Scheduler - the daily rent ledger pass.

One tick:
1. Fetch active leases (a failure here aborts the tick)
2. For each lease, fetch its open payments
3. Evaluate each payment, persist the result, then dispatch its reminders
4. Run the lease expiry watcher

Leases fan out over a bounded thread pool; a lease's payments are handled in
order inside its task. Any failure is contained to the lease or payment it
happened on and reported in the TickReport.

Daily mode hands the tick to an APScheduler cron job at
SCHEDULER_RUN_HOUR:SCHEDULER_RUN_MINUTE in SCHEDULER_TIMEZONE.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.exc import SQLAlchemyError

from config import SchedulerSettings, get_scheduler_settings
from schemas.ledger import LeaseSnapshot, RentPaymentSnapshot
from schemas.scheduler import LeaseTickResult, TickReport
from services.clock import Clock
from services.errors import LedgerDataError, LedgerUnavailableError
from services.lease_expiry_watcher import LeaseExpiryWatcher
from services.ledger_store import LedgerStore
from services.notification_gateway import NotificationGateway
from services.payment_status_service import TERMINAL_STATUSES, PaymentStatusEvaluator
from services.reminder_dispatcher import ReminderDispatcher

logger = logging.getLogger(__name__)

DAILY_JOB_ID = "rent-ledger-daily"
STARTUP_JOB_ID = "rent-ledger-startup"
# Runs missed by up to this many seconds still fire once.
MISFIRE_GRACE_SECONDS = 3600


class JobScheduler:
     """
     Runs ticks over all active leases, once or daily at the configured time.

     Usage:
          scheduler = JobScheduler(store, gateway, SystemClock("America/Denver"))
          report = scheduler.run_once()
     """

     def __init__(
          self,
          store: LedgerStore,
          gateway: NotificationGateway,
          clock: Clock,
          settings: Optional[SchedulerSettings] = None,
          evaluator: Optional[PaymentStatusEvaluator] = None,
          dispatcher: Optional[ReminderDispatcher] = None,
          watcher: Optional[LeaseExpiryWatcher] = None,
     ):
          self.store = store
          self.gateway = gateway
          self.clock = clock
          self.settings = settings or get_scheduler_settings()
          self.evaluator = evaluator or PaymentStatusEvaluator()
          self.dispatcher = dispatcher or ReminderDispatcher(
               store, gateway, days_before_due=self.settings.reminder_days_before_due
          )
          self.watcher = watcher or LeaseExpiryWatcher(store, gateway, horizons=self.settings.expiry_horizons)

          self._stop = threading.Event()
          self._tick_lock = threading.Lock()
          self._cron: Optional[BackgroundScheduler] = None
          self.tick_completed = threading.Event()
          self.last_report: Optional[TickReport] = None

     # =========================================================================
     # TICK
     # =========================================================================

     def run_tick(self) -> TickReport:
          """Run one full pass. Never raises for per-entity or store failures."""
          with self._tick_lock:
               today = self.clock.today()
               report = TickReport(today=today, started_at=self.clock.now())
               logger.info(f"[Scheduler] Tick started for {today.isoformat()}")

               try:
                    leases = self.store.list_active_leases()
               except LedgerUnavailableError as e:
                    logger.error(f"[Scheduler] Tick aborted, ledger unavailable: {e}")
                    report.aborted = True
                    return self._finish(report)
               except Exception:
                    logger.exception("[Scheduler] Tick aborted, could not list active leases")
                    report.aborted = True
                    return self._finish(report)

               report.leases_seen = len(leases)
               for result in self._process_leases(leases, today):
                    report.absorb(result)
               return self._finish(report)

     def run_once(self) -> TickReport:
          """Single-pass mode: one tick with all work joined before returning."""
          return self.run_tick()

     def _finish(self, report: TickReport) -> TickReport:
          report.finished_at = self.clock.now()
          self.last_report = report
          self.tick_completed.set()
          logger.info(
               f"[Scheduler] Tick {report.today.isoformat()} done: "
               f"aborted={report.aborted} leases={report.leases_seen} "
               f"cancelled={report.leases_cancelled} evaluated={report.payments_evaluated} "
               f"updated={report.payments_updated} skipped={report.payments_skipped} "
               f"reminders={report.reminders_sent}/{report.reminders_failed} "
               f"expiry={report.expiry_notices_sent}/{report.expiry_notices_failed} "
               f"errors={report.entity_errors}"
          )
          return report

     def _process_leases(self, leases: List[LeaseSnapshot], today: date) -> List[LeaseTickResult]:
          if self.settings.max_workers == 1 or len(leases) <= 1:
               return [self._process_lease_safely(lease, today) for lease in leases]

          with ThreadPoolExecutor(
               max_workers=self.settings.max_workers,
               thread_name_prefix="rent-ledger"
          ) as pool:
               return list(pool.map(lambda lease: self._process_lease_safely(lease, today), leases))

     def _process_lease_safely(self, lease: LeaseSnapshot, today: date) -> LeaseTickResult:
          result = LeaseTickResult(lease_id=lease.id)
          if self._stop.is_set():
               result.cancelled = True
               return result
          try:
               self._process_lease(lease, today, result)
          except Exception:
               logger.exception(f"[Scheduler] Unexpected failure on lease {lease.id}")
               result.errors += 1
          return result

     def _process_lease(self, lease: LeaseSnapshot, today: date, result: LeaseTickResult) -> None:
          try:
               payments = self.store.list_open_rent_payments(lease.id)
          except SQLAlchemyError as e:
               logger.error(f"[Scheduler] Could not load payments for lease {lease.id}: {e}")
               result.errors += 1
               payments = []

          for payment in payments:
               self._process_payment(payment, lease, today, result)

          try:
               outcome = self.watcher.watch(lease, today)
          except SQLAlchemyError as e:
               logger.error(f"[Scheduler] Expiry check failed for lease {lease.id}: {e}")
               result.errors += 1
          else:
               result.expiry_notices_sent += outcome.sent
               result.expiry_notices_failed += outcome.failed

     def _process_payment(
          self,
          payment: RentPaymentSnapshot,
          lease: LeaseSnapshot,
          today: date,
          result: LeaseTickResult
     ) -> None:
          result.payments_evaluated += 1
          try:
               evaluation = self.evaluator.evaluate(payment, lease, today)
          except LedgerDataError as e:
               logger.warning(f"[Scheduler] Skipping payment {payment.id}: {e}")
               result.payments_skipped += 1
               return

          current = payment
          if evaluation.changed:
               try:
                    applied = self.store.update_payment_status(
                         payment.id,
                         evaluation.status,
                         evaluation.late_fee,
                         expected_amount_paid=payment.amount_paid,
                    )
               except SQLAlchemyError as e:
                    logger.error(f"[Scheduler] Could not update payment {payment.id}: {e}")
                    result.errors += 1
                    return
               if not applied:
                    logger.info(f"[Scheduler] Payment {payment.id} changed during the tick; left for the next one")
                    result.payments_skipped += 1
                    return
               result.payments_updated += 1
               current = payment.model_copy(update={
                    "status": evaluation.status,
                    "late_fee": evaluation.late_fee,
               })

          if current.status in TERMINAL_STATUSES:
               return

          try:
               outcome = self.dispatcher.dispatch(current, lease, today)
          except SQLAlchemyError as e:
               logger.error(f"[Scheduler] Reminder dispatch failed for payment {payment.id}: {e}")
               result.errors += 1
               return
          result.reminders_sent += outcome.sent
          result.reminders_failed += outcome.failed

     # =========================================================================
     # DAILY LOOP
     # =========================================================================

     def build_trigger(self) -> CronTrigger:
          """Cron trigger for the configured run time in the scheduler zone."""
          return CronTrigger(
               hour=self.settings.run_hour,
               minute=self.settings.run_minute,
               timezone=ZoneInfo(self.settings.timezone),
          )

     def next_run_at(self, now: datetime) -> datetime:
          """First configured run time strictly after now, in the scheduler zone."""
          trigger = self.build_trigger()
          fire_time = trigger.get_next_fire_time(None, now)
          if fire_time <= now:
               fire_time = trigger.get_next_fire_time(fire_time, fire_time + timedelta(seconds=1))
          return fire_time

     def scheduled_tick(self) -> None:
          """Job body for the cron scheduler; a failed tick never kills the daemon."""
          if self._stop.is_set():
               return
          try:
               self.run_tick()
          except Exception:
               logger.exception("[Scheduler] Scheduled tick failed")

     def start(self, run_immediately: bool = False) -> BackgroundScheduler:
          """Start the cron scheduler on its own threads and return it."""
          if self._cron is not None and self._cron.running:
               return self._cron
          self._stop.clear()
          self._cron = BackgroundScheduler(timezone=ZoneInfo(self.settings.timezone))
          self._cron.add_job(
               self.scheduled_tick,
               self.build_trigger(),
               id=DAILY_JOB_ID,
               max_instances=1,
               coalesce=True,
               misfire_grace_time=MISFIRE_GRACE_SECONDS,
          )
          if run_immediately:
               # No trigger: APScheduler runs the job once, right away.
               self._cron.add_job(self.scheduled_tick, id=STARTUP_JOB_ID)
          self._cron.start()
          logger.info(
               f"[Scheduler] Started: daily at {self.settings.run_hour:02d}:{self.settings.run_minute:02d} "
               f"{self.settings.timezone}, next run at {self._cron.get_job(DAILY_JOB_ID).next_run_time}"
          )
          return self._cron

     def run_forever(self, run_immediately: bool = False) -> bool:
          """
          Tick daily until stop is requested. Blocks the calling thread.

          Returns:
               bool: True if the in-flight tick finished within SCHEDULER_SHUTDOWN_TIMEOUT
          """
          self.start(run_immediately=run_immediately)
          self._stop.wait()
          return self.stop()

     def request_stop(self) -> None:
          """No new ticks; leases not yet started in the current tick are cancelled."""
          self._stop.set()

     @property
     def stopping(self) -> bool:
          return self._stop.is_set()

     def stop(self, timeout: Optional[float] = None) -> bool:
          """
          Request stop, shut the cron scheduler down and wait for the in-flight tick.

          Args:
               timeout: Seconds to wait; defaults to settings.shutdown_timeout

          Returns:
               bool: True if no tick was still running when the timeout elapsed
          """
          self.request_stop()
          if self._cron is not None and self._cron.running:
               self._cron.shutdown(wait=False)
          wait = timeout if timeout is not None else self.settings.shutdown_timeout
          # A running tick holds the lock until it has finished its report.
          if not self._tick_lock.acquire(timeout=wait):
               logger.warning("[Scheduler] In-flight tick did not finish before the shutdown timeout")
               return False
          self._tick_lock.release()
          logger.info("[Scheduler] Stopped")
          return True
