# tests/test_scheduler_cli.py
"""
The rent-scheduler command line.
"""
import pytest

import scheduler as cli
from services.errors import LedgerUnavailableError
from services.job_scheduler import JobScheduler

from conftest import DUE


@pytest.fixture(autouse=True)
def no_signal_handlers(monkeypatch):
     monkeypatch.setattr(cli, "install_signal_handlers", lambda scheduler: None)


@pytest.fixture
def job(store, gateway, clock, settings):
     return JobScheduler(store, gateway, clock, settings=settings)


class TestRunOnce:
     def test_success_exit_code(self, job, seed, gateway, clock):
          seed.payment(seed.lease())
          clock.set(DUE)
          assert cli.main(["run", "--once"], scheduler=job) == 0
          assert job.last_report.reminders_sent == 1
          assert len(gateway.sent) == 1

     def test_aborted_tick_exit_code(self, job, store, monkeypatch):
          def unavailable():
               raise LedgerUnavailableError("down")

          monkeypatch.setattr(store, "list_active_leases", unavailable)
          assert cli.main(["run", "--once"], scheduler=job) == 1


class TestDaemon:
     def test_run_returns_zero_after_stop(self, job, seed, clock):
          seed.payment(seed.lease())
          clock.set(DUE)
          # A stop requested during the startup tick ends the loop.
          original = job.run_tick

          def tick_then_stop():
               report = original()
               job.request_stop()
               return report

          job.run_tick = tick_then_stop
          assert cli.main(["run", "--run-immediately"], scheduler=job) == 0
          assert job.last_report is not None
          assert job.stopping

     def test_daemon_shutdown_uses_configured_timeout(self, job, monkeypatch):
          waits = []

          class RecordingLock:
               def acquire(self, blocking=True, timeout=-1):
                    waits.append(timeout)
                    return True

               def release(self):
                    pass

          monkeypatch.setattr(job, "_tick_lock", RecordingLock())
          monkeypatch.setattr(job, "run_tick", lambda: job.request_stop())
          job.settings = job.settings.model_copy(update={"shutdown_timeout": 2.5})

          assert cli.main(["run", "--run-immediately"], scheduler=job) == 0
          assert waits == [2.5]


class TestParser:
     def test_command_is_required(self):
          with pytest.raises(SystemExit):
               cli.build_parser().parse_args([])

     def test_once_flag(self):
          args = cli.build_parser().parse_args(["run", "--once"])
          assert args.command == "run"
          assert args.once is True

     def test_once_short_flag(self):
          assert cli.build_parser().parse_args(["run", "-o"]).once is True
          assert cli.build_parser().parse_args(["run"]).once is False

     def test_short_flag_runs_single_tick(self, job, seed, clock):
          seed.payment(seed.lease())
          clock.set(DUE)
          assert cli.main(["run", "-o"], scheduler=job) == 0
          assert job.last_report.payments_updated == 1


class TestDatabaseCommands:
     def test_init_db_then_check(self):
          assert cli.main(["init-db"]) == 0
          assert cli.main(["check-db"]) == 0

     def test_build_scheduler_uses_configured_database(self):
          cli.main(["init-db"])
          job = cli.build_scheduler(settings=cli.SchedulerSettings(timezone="UTC", max_workers=1))
          assert job.settings.timezone == "UTC"
          assert job.store.list_active_leases() == []
