# scheduler.py
"""
Rent ledger scheduler entry point.

Usage:
     rent-scheduler run            # daily at SCHEDULER_RUN_HOUR:SCHEDULER_RUN_MINUTE
     rent-scheduler run --once     # one tick, then exit (also -o)
     python -m scheduler run --once
     rent-scheduler init-db        # create missing tables (development)
     rent-scheduler check-db
"""
import argparse
import logging
import signal
import sys
from typing import List, Optional

import config
from config import SchedulerSettings, get_scheduler_settings
from services.clock import Clock, SystemClock
from services.job_scheduler import JobScheduler
from services.ledger_store import SqlLedgerStore
from services.notification_gateway import BrevoNotificationGateway

logger = logging.getLogger("scheduler")


def configure_logging(level: Optional[str] = None) -> None:
     logging.basicConfig(
          level=getattr(logging, (level or config.LOG_LEVEL), logging.INFO),
          format="%(asctime)s %(levelname)s %(name)s %(message)s",
     )


def build_scheduler(
     settings: Optional[SchedulerSettings] = None,
     clock: Optional[Clock] = None,
) -> JobScheduler:
     """Wire the scheduler to the configured database and Brevo."""
     # Imported here so parsing --help never opens a database engine.
     from database import SessionLocal

     settings = settings or get_scheduler_settings()
     return JobScheduler(
          store=SqlLedgerStore(SessionLocal),
          gateway=BrevoNotificationGateway(),
          clock=clock or SystemClock(settings.timezone),
          settings=settings,
     )


def install_signal_handlers(scheduler: JobScheduler) -> None:
     def _handle(signum, frame):
          logger.info(f"[Scheduler] Received signal {signum}; shutting down")
          scheduler.request_stop()

     signal.signal(signal.SIGINT, _handle)
     signal.signal(signal.SIGTERM, _handle)


def build_parser() -> argparse.ArgumentParser:
     parser = argparse.ArgumentParser(
          prog="rent-scheduler",
          description="Rent ledger status, late fee and reminder scheduler",
     )
     subparsers = parser.add_subparsers(dest="command", required=True)
     run_parser = subparsers.add_parser("run", help="Run the scheduler")
     run_parser.add_argument("-o", "--once", action="store_true", help="Run a single tick and exit")
     run_parser.add_argument(
          "--run-immediately",
          action="store_true",
          help="In daemon mode, tick once at startup before waiting for the daily run time",
     )
     subparsers.add_parser("init-db", help="Create missing tables (development; use Alembic in production)")
     subparsers.add_parser("check-db", help="Exit 0 if the database answers, 1 otherwise")
     return parser


def main(argv: Optional[List[str]] = None, scheduler: Optional[JobScheduler] = None) -> int:
     args = build_parser().parse_args(argv)
     configure_logging()

     if args.command == "init-db":
          from database import init_db
          init_db()
          return 0
     if args.command == "check-db":
          from database import check_connection
          return 0 if check_connection() else 1

     scheduler = scheduler or build_scheduler()
     install_signal_handlers(scheduler)

     if args.once:
          report = scheduler.run_once()
          return 1 if report.aborted else 0

     scheduler.run_forever(run_immediately=args.run_immediately)
     return 0


if __name__ == "__main__":
     sys.exit(main())
