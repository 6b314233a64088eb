from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class HalfDayStrategy(CheckoutStrategy):
    """Short session, downgraded to Half Day."""

    def decide_checkout(self, *, check_in: datetime, now: datetime) -> StatusDecision:
        hours = (now - check_in).total_seconds() / 3600
        return StatusDecision(status=AttendanceStatus.HALF_DAY, note=f"{hours:.1f}h worked")
