from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    """One requested day off.

    `will_work_sunday` promises to work the Sunday right after `leave_date`
    in exchange for the leave.
    """

    request_id: Optional[int]
    user_id: int
    leave_date: date
    reason: str
    status: RequestStatus
    will_work_sunday: bool = False
    is_paid_leave: bool = False
    created_at: Optional[datetime] = None
