from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, Holiday


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def first_attendance_dates(self) -> Dict[int, date]:
        """Earliest attendance date per user (joining date proxy)."""

        raise NotImplementedError

    def create_checkin(self, *, user_id: int, work_date: date, check_in: datetime, status: AttendanceStatus) -> int:
        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out: datetime, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def upsert_status(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> None:
        """Admin override / leave approval: set status, keep any timestamps."""

        raise NotImplementedError

    def upsert_holiday(self, *, holiday: Holiday, user_ids: Sequence[int]) -> None:
        raise NotImplementedError

    def delete_holiday(self, *, holiday_date: date) -> None:
        raise NotImplementedError

    def list_holidays_between(self, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError
