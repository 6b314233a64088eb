from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, Protocol, Union
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_BUSINESS_TIMEZONE
from ..core.exceptions import ValidationError

DateLike = Union[date, str]


class Clock(Protocol):
    """Source of "now" in the business time zone."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError


@dataclass(frozen=True)
class BusinessClock:
    """Wall clock pinned to one canonical business time zone.

    Server-local or UTC dates shift which day a midnight-adjacent check-in
    lands in, so every "today" in the system comes from here.
    """

    tz: tzinfo = field(default_factory=lambda: ZoneInfo(DEFAULT_BUSINESS_TIMEZONE))

    @classmethod
    def for_zone(cls, name: str) -> "BusinessClock":
        return cls(tz=ZoneInfo(name))

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


@dataclass(frozen=True)
class FixedClock:
    """Clock frozen at a given instant (tests, batch recomputation)."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant

    def today(self) -> date:
        return self.instant.date()


def parse_iso_date(value: DateLike) -> date:
    """Parse YYYY-MM-DD string into date (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_month(value: Union[date, str]) -> date:
    """Parse a YYYY-MM month key into the first day of that month."""
    if isinstance(value, date):
        return value.replace(day=1)
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m").date()
    except ValueError:
        raise ValidationError(f"Invalid month {value!r}, expected YYYY-MM")


def month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def month_bounds(month_start: date) -> tuple[date, date]:
    last_day = calendar.monthrange(month_start.year, month_start.month)[1]
    return month_start.replace(day=1), month_start.replace(day=last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Inclusive day range; empty when start > end."""
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def is_sunday(d: date) -> bool:
    return d.weekday() == calendar.SUNDAY


def following_sunday(d: date) -> date:
    """First Sunday strictly after d."""
    days_ahead = (calendar.SUNDAY - d.weekday()) % 7 or 7
    return d + timedelta(days=days_ahead)
