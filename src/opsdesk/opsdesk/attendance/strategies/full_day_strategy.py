from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class FullDayStrategy(CheckoutStrategy):
    """Session long enough for a full day."""

    def decide_checkout(self, *, check_in: datetime, now: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
