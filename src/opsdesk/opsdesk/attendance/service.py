from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Union

from ..common.datetime_utils import Clock, iter_days, month_bounds, month_key, parse_iso_date, parse_month
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_CHECKIN_END_HOUR, DEFAULT_CHECKIN_START_HOUR, MONTHLY_PAID_LEAVE_CREDIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from .factory import CheckoutStrategyFactory
from .model import AttendanceRecord, Holiday
from .normalizer import normalize_record, normalize_records
from .repository import AttendanceRepository

log = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        *,
        clock: Clock,
        strategy_factory: Optional[CheckoutStrategyFactory] = None,
        checkin_start_hour: int = DEFAULT_CHECKIN_START_HOUR,
        checkin_end_hour: int = DEFAULT_CHECKIN_END_HOUR,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._clock = clock
        self._factory = strategy_factory or CheckoutStrategyFactory()
        self._checkin_start_hour = int(checkin_start_hour)
        self._checkin_end_hour = int(checkin_end_hour)

    def _as_business_time(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self._clock.now().tzinfo)
        return value

    def check_in(self, user_id: int) -> AttendanceRecord:
        now = self._clock.now()
        today = now.date()

        if not (self._checkin_start_hour <= now.hour < self._checkin_end_hour):
            raise ValidationError(
                f"Check-in is only allowed between {self._checkin_start_hour:02d}:00 and {self._checkin_end_hour:02d}:00"
            )

        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundError("User not found")

        if self._attendance.get_for_user_and_date(user_id, today):
            raise ValidationError("Already checked in for today")

        month = month_key(today)
        if profile.last_leave_credited_month != month:
            if self._profiles.credit_monthly_leave(user_id=user_id, month=month, amount=MONTHLY_PAID_LEAVE_CREDIT):
                log.info("credited %d paid leave to user %s for %s", MONTHLY_PAID_LEAVE_CREDIT, user_id, month)

        attendance_id = self._attendance.create_checkin(
            user_id=user_id,
            work_date=today,
            check_in=now,
            status=AttendanceStatus.PRESENT,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=today,
            check_in=now,
            status=AttendanceStatus.PRESENT,
        )

    def check_out(self, user_id: int) -> AttendanceRecord:
        now = self._clock.now()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record or record.check_in is None:
            raise ValidationError("No check-in record found for today")
        if record.check_out is not None:
            raise ValidationError("Already checked out for today")

        check_in = self._as_business_time(record.check_in)
        strategy = self._factory.for_checkout(check_in=check_in, now=now)
        decision = strategy.decide_checkout(check_in=check_in, now=now)

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out=now, status=decision.status):
            raise ValidationError("Checkout failed")

        log.debug("user %s checked out as %s (%s)", user_id, decision.status.value, decision.note or "-")
        return AttendanceRecord(
            attendance_id=record.attendance_id,
            user_id=user_id,
            work_date=today,
            check_in=record.check_in,
            check_out=now,
            status=decision.status,
        )

    def get_today_record(self, user_id: int) -> Optional[AttendanceRecord]:
        today = self._clock.today()
        record = self._attendance.get_for_user_and_date(user_id, today)
        return normalize_record(record, today) if record else None

    def get_month_records(self, user_id: int, month: Union[date, str]) -> List[AttendanceRecord]:
        """Effective (normalized) records of one user for one month."""
        start, end = month_bounds(parse_month(month))
        rows = self._attendance.list_for_user_between(user_id, start, end)
        return normalize_records(rows, self._clock.today())

    def get_calendar(self, user_id: int, month: Union[date, str]) -> List[dict]:
        start, end = month_bounds(parse_month(month))
        by_day = {r.work_date: r for r in self.get_month_records(user_id, start)}
        holidays = {h.holiday_date: h.label for h in self._attendance.list_holidays_between(start, end)}

        out = []
        for day in iter_days(start, end):
            r = by_day.get(day)
            out.append(
                {
                    "date": day.isoformat(),
                    "status": r.status.value if r else None,
                    "check_in": r.check_in.strftime("%H:%M") if r and r.check_in else None,
                    "check_out": r.check_out.strftime("%H:%M") if r and r.check_out else None,
                    "holiday": holidays.get(day),
                }
            )
        return out

    def mark_holiday(self, *, current_role: Role, admin_user_id: int, holiday_date, label: str) -> Holiday:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can mark holidays")

        holiday = Holiday(
            holiday_date=parse_iso_date(holiday_date),
            label=require_non_empty(label, "Holiday label"),
            created_by=int(admin_user_id),
        )
        employees = self._profiles.list_by_role(Role.EMPLOYEE)
        self._attendance.upsert_holiday(holiday=holiday, user_ids=[p.user_id for p in employees])
        log.info("holiday %s (%s) marked for %d employees", holiday.holiday_date, holiday.label, len(employees))
        return holiday

    def remove_holiday(self, *, current_role: Role, holiday_date) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can remove holidays")
        self._attendance.delete_holiday(holiday_date=parse_iso_date(holiday_date))

    def override_status(self, *, current_role: Role, user_id: int, work_date, status) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change attendance status")
        try:
            new_status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown attendance status {status!r}")

        self._attendance.upsert_status(user_id=int(user_id), work_date=parse_iso_date(work_date), status=new_status)
