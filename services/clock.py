# services/clock.py
"""
Time source for the scheduler.

Every component asks a Clock for "now" instead of calling datetime.now()
directly, so tests can pin "today" to any date.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Union
from zoneinfo import ZoneInfo


def start_of_day(instant: datetime) -> datetime:
     """Midnight of the instant's calendar day, keeping its tzinfo."""
     return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
     """
     Whole calendar days from start to end (negative if end is earlier).

     Datetimes are reduced to their calendar date first, so 23:59 -> 00:01
     the next morning counts as one day.
     """
     if isinstance(start, datetime):
          start = start.date()
     if isinstance(end, datetime):
          end = end.date()
     return (end - start).days


class Clock(ABC):
     """Injectable source of the current instant."""

     @abstractmethod
     def now(self) -> datetime:
          """Current timezone-aware instant."""

     def today(self) -> date:
          return self.now().date()

     def start_of_day(self, instant: datetime) -> datetime:
          return start_of_day(instant)

     def days_between(self, start: Union[date, datetime], end: Union[date, datetime]) -> int:
          return days_between(start, end)


class SystemClock(Clock):
     """Wall clock in a fixed IANA zone (the zone that defines 'today')."""

     def __init__(self, timezone: str = "UTC"):
          self._tz = ZoneInfo(timezone)

     @property
     def tz(self) -> ZoneInfo:
          return self._tz

     def now(self) -> datetime:
          return datetime.now(self._tz)


class FixedClock(Clock):
     """
     Clock frozen at a given instant until moved explicitly.

     Usage:
          clock = FixedClock(datetime(2026, 3, 1, 8, 0))
          clock.advance(days=6)
     """

     def __init__(self, instant: Union[date, datetime], timezone: str = "UTC"):
          self._tz = ZoneInfo(timezone)
          self._now = self._coerce(instant)

     def _coerce(self, instant: Union[date, datetime]) -> datetime:
          if not isinstance(instant, datetime):
               instant = datetime(instant.year, instant.month, instant.day)
          if instant.tzinfo is None:
               instant = instant.replace(tzinfo=self._tz)
          return instant

     def now(self) -> datetime:
          return self._now

     def set(self, instant: Union[date, datetime]) -> None:
          self._now = self._coerce(instant)

     def advance(self, **delta) -> datetime:
          """Move forward by a timedelta given as keyword arguments."""
          self._now = self._now + timedelta(**delta)
          return self._now
