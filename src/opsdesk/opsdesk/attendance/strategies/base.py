from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class CheckoutStrategy(ABC):
    """Strategy Pattern: decide the status a session closes with."""

    @abstractmethod
    def decide_checkout(self, *, check_in: datetime, now: datetime) -> StatusDecision:
        raise NotImplementedError
