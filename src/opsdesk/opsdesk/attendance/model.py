from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance row; (user_id, work_date) is the natural key.

    `status` is the stored status and may be stale; read it through
    `normalizer.effective_status` before showing or paying on it.
    """

    user_id: int
    work_date: date
    status: AttendanceStatus
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    label: str
    created_by: Optional[int] = None
