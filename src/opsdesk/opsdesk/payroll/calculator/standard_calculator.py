from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Union

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import iter_days, month_bounds, parse_iso_date, parse_month
from ...common.validators import require_non_negative_money
from ...core.enums import AttendanceStatus, RequestStatus
from ...core.exceptions import ValidationError
from ...leaves.model import LeaveRequest
from ..model import SalaryComputationResult
from .base import SalaryCalculator
from .rest_policy import EarnedRestPolicy, WeeklyRestPolicy

NOT_COUNTED = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.PAID_OFF, AttendanceStatus.OFF})


def _coerce_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown attendance status {value!r}")


def _status_by_day(records: Sequence[AttendanceRecord]) -> Dict[date, AttendanceStatus]:
    by_day: Dict[date, AttendanceStatus] = {}
    for r in records:
        day = parse_iso_date(r.work_date)
        if day in by_day:
            raise ValidationError(f"Duplicate attendance record for {day.isoformat()}")
        by_day[day] = _coerce_status(r.status)
    return by_day


def _promised_leave_dates(leave_requests: Sequence[LeaveRequest]) -> List[date]:
    out = []
    for leave in leave_requests:
        leave_date = parse_iso_date(leave.leave_date)
        try:
            status = RequestStatus(leave.status)
        except ValueError:
            raise ValidationError(f"Unknown leave status {leave.status!r}")
        if status == RequestStatus.APPROVED and leave.will_work_sunday:
            out.append(leave_date)
    return out


class StandardSalaryCalculator(SalaryCalculator):
    """Flat deduction per whole absence, floored at zero salary.

    Walks every day from max(joining date, month start) to
    min(today, month end). Present, Paid Off and Off days are free; any
    other day (a missing record included) is one absence, unless the weekly
    rest policy charges it differently. Half Day is a full absence.
    """

    def __init__(self, *, rest_policy: Optional[WeeklyRestPolicy] = None):
        self._rest_policy = rest_policy or EarnedRestPolicy()

    def calculate(
        self,
        base_salary,
        deduction_amount,
        attendance_records: Sequence[AttendanceRecord],
        leave_requests: Sequence[LeaveRequest] = (),
        joining_date: Optional[Union[date, str]] = None,
        target_month: Optional[Union[date, str]] = None,
        *,
        today: date,
    ) -> SalaryComputationResult:
        base = require_non_negative_money(base_salary, "Base salary")
        rate = require_non_negative_money(deduction_amount, "Deduction amount")

        month_start, month_end = month_bounds(parse_month(target_month) if target_month is not None else today)
        start = month_start
        if joining_date is not None:
            start = max(parse_iso_date(joining_date), month_start)
        end = min(today, month_end)

        statuses = _status_by_day(attendance_records)
        promised = _promised_leave_dates(leave_requests)

        absences = 0
        working_days = 0
        paid_leaves_used = 0
        present = 0
        for day in iter_days(start, end):
            working_days += 1
            status = statuses.get(day)
            if status == AttendanceStatus.PRESENT:
                present += 1
            elif status == AttendanceStatus.PAID_OFF:
                paid_leaves_used += 1
            absences += self._absence_units(day, status, promised)

        total_deduction = rate * absences
        final_salary = max(Decimal("0"), base - total_deduction)

        return SalaryComputationResult(
            base_salary=base,
            deduction_amount=rate,
            absences_count=absences,
            total_deduction=total_deduction,
            final_salary=final_salary,
            working_days_count=working_days,
            present_count=present,
            paid_leaves_used=paid_leaves_used,
            period_start=start,
            period_end=end,
        )

    def _absence_units(self, day: date, status: Optional[AttendanceStatus], promised: Sequence[date]) -> int:
        if status in NOT_COUNTED:
            return 0
        units = self._rest_policy.rest_day_units(day, status, promised)
        if units is not None:
            return units
        return 1


def calculate_salary(
    base_salary,
    deduction_amount,
    attendance_records: Sequence[AttendanceRecord],
    leave_requests: Sequence[LeaveRequest] = (),
    joining_date: Optional[Union[date, str]] = None,
    target_month: Optional[Union[date, str]] = None,
    *,
    today: date,
    rest_policy: Optional[WeeklyRestPolicy] = None,
) -> SalaryComputationResult:
    """Functional form of StandardSalaryCalculator.calculate."""
    return StandardSalaryCalculator(rest_policy=rest_policy).calculate(
        base_salary,
        deduction_amount,
        attendance_records,
        leave_requests,
        joining_date,
        target_month,
        today=today,
    )
