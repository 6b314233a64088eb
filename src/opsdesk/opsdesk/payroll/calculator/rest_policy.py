"""Weekly rest policies.

Decide how a non-Present Sunday is charged, so the rule can be swapped
without touching the day walk in the calculator.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Sequence

from ...common.datetime_utils import following_sunday, is_sunday
from ...core.enums import AttendanceStatus


class WeeklyRestPolicy(ABC):
    @abstractmethod
    def rest_day_units(
        self,
        day: date,
        status: Optional[AttendanceStatus],
        promised_leave_dates: Sequence[date],
    ) -> Optional[int]:
        """Absence units for `day`, or None to charge it as an ordinary day.

        Only called for days whose status is not Present, Paid Off or Off.
        `promised_leave_dates` are the dates of Approved leaves whose owner
        promised to work the following Sunday.
        """

        raise NotImplementedError


class EarnedRestPolicy(WeeklyRestPolicy):
    """No automatic weekly rest day; a Sunday off has to be earned.

    A compensatory Sunday that is not worked charges the Sunday itself plus
    every leave day it was promised against.
    """

    def rest_day_units(self, day, status, promised_leave_dates):
        if not is_sunday(day):
            return None

        matched = sum(1 for d in promised_leave_dates if following_sunday(d) == day)
        if matched and status != AttendanceStatus.PRESENT:
            return 1 + matched
        return None


class SundayOffPolicy(EarnedRestPolicy):
    """Sundays without any record are free; compensatory promises still bind."""

    def rest_day_units(self, day, status, promised_leave_dates):
        units = super().rest_day_units(day, status, promised_leave_dates)
        if units is not None:
            return units
        if is_sunday(day) and status is None:
            return 0
        return None
