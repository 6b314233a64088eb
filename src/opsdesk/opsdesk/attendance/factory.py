from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.constants import DEFAULT_HALF_DAY_THRESHOLD_HOURS
from .strategies.base import CheckoutStrategy
from .strategies.full_day_strategy import FullDayStrategy
from .strategies.half_day_strategy import HalfDayStrategy


@dataclass
class CheckoutStrategyFactory:
    """Factory Pattern: choose the checkout strategy from session length."""

    half_day_threshold_hours: float = DEFAULT_HALF_DAY_THRESHOLD_HOURS

    def for_checkout(self, *, check_in: datetime, now: datetime) -> CheckoutStrategy:
        if now - check_in < timedelta(hours=self.half_day_threshold_hours):
            return HalfDayStrategy()
        return FullDayStrategy()
