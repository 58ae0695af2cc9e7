# config.py
"""
Environment-driven configuration for the rent ledger scheduler.

Values are read once from the process environment (and a local .env file,
if present) at import time. The scheduler-specific knobs are grouped into
a validated SchedulerSettings model so they can be overridden in tests.

Usage:
     from config import get_scheduler_settings

     settings = get_scheduler_settings()
     print(settings.run_hour, settings.timezone)
"""
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables
load_dotenv()

# Database
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Email / SMS transport (Brevo)
BREVO_API_KEY = os.getenv("BREVO_API_KEY")
BREVO_SMS_SENDER = os.getenv("BREVO_SMS_SENDER")
EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@pms-platform.local")
APP_NAME = os.getenv("APP_NAME", "PMS Platform")
APP_URL = os.getenv("APP_URL", "http://localhost:3000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def _parse_horizons(raw: str) -> List[int]:
     return [int(part) for part in raw.split(",") if part.strip()]


class SchedulerSettings(BaseModel):
     """Cadence and policy knobs for the background scheduler."""
     run_hour: int = Field(default=8, ge=0, le=23, description="Hour of the daily run")
     run_minute: int = Field(default=0, ge=0, le=59, description="Minute of the daily run")
     timezone: str = Field(default="America/Denver", description="IANA zone used for 'today'")
     max_workers: int = Field(default=4, ge=1, description="Leases evaluated in parallel per tick")
     shutdown_timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for an in-flight tick")
     reminder_days_before_due: int = Field(default=3, ge=1)
     expiry_horizons: List[int] = Field(default_factory=lambda: [30, 14, 7])

     @field_validator("expiry_horizons")
     @classmethod
     def _positive_unique_horizons(cls, value: List[int]) -> List[int]:
          if any(h <= 0 for h in value):
               raise ValueError("expiry horizons must be positive day counts")
          return sorted(set(value), reverse=True)


def get_scheduler_settings(overrides: Optional[dict] = None) -> SchedulerSettings:
     """
     Build scheduler settings from the environment.

     Args:
          overrides: Optional field values that take precedence over the environment

     Returns:
          SchedulerSettings: validated settings
     """
     values = {
          "run_hour": int(os.getenv("SCHEDULER_RUN_HOUR", "8")),
          "run_minute": int(os.getenv("SCHEDULER_RUN_MINUTE", "0")),
          "timezone": os.getenv("SCHEDULER_TIMEZONE", "America/Denver"),
          "max_workers": int(os.getenv("SCHEDULER_MAX_WORKERS", "4")),
          "shutdown_timeout": float(os.getenv("SCHEDULER_SHUTDOWN_TIMEOUT", "30")),
          "reminder_days_before_due": int(os.getenv("REMINDER_DAYS_BEFORE_DUE", "3")),
          "expiry_horizons": _parse_horizons(os.getenv("LEASE_EXPIRY_HORIZONS", "30,14,7")),
     }
     if overrides:
          values.update(overrides)
     return SchedulerSettings(**values)
