# services/__init__.py
from .errors import LedgerError, LedgerDataError, LedgerUnavailableError
from .clock import Clock, SystemClock, FixedClock, days_between, start_of_day
from .late_fee_policy import compute_late_fee
from .payment_status_service import PaymentStatusEvaluator, never_regress, status_for_date
from .ledger_store import LedgerStore, SqlLedgerStore
from .notification_gateway import NotificationGateway, BrevoNotificationGateway
from .reminder_dispatcher import ReminderDispatcher
from .lease_expiry_watcher import LeaseExpiryWatcher
from .job_scheduler import JobScheduler

__all__ = [
     "LedgerError",
     "LedgerDataError",
     "LedgerUnavailableError",
     "Clock",
     "SystemClock",
     "FixedClock",
     "days_between",
     "start_of_day",
     "compute_late_fee",
     "PaymentStatusEvaluator",
     "never_regress",
     "status_for_date",
     "LedgerStore",
     "SqlLedgerStore",
     "NotificationGateway",
     "BrevoNotificationGateway",
     "ReminderDispatcher",
     "LeaseExpiryWatcher",
     "JobScheduler",
]
