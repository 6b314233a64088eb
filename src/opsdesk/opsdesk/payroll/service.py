from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Union

from ..attendance.normalizer import normalize_records
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, month_bounds, month_key, parse_month
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..leaves.repository import LeaveRepository
from ..users.model import Profile
from ..users.repository import ProfileRepository
from ..wallet.repository import WalletRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import EmployeePayroll, MonthlyFinanceSummary, SalarySnapshot
from .repository import SnapshotRepository

log = logging.getLogger(__name__)

# A leave up to a week before the month can promise the month's first Sunday.
LEAVE_LOOKBACK_DAYS = 7


class PayrollService:
    def __init__(
        self,
        profiles: ProfileRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        wallet: WalletRepository,
        snapshots: SnapshotRepository,
        *,
        clock: Clock,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._profiles = profiles
        self._attendance = attendance
        self._leaves = leaves
        self._wallet = wallet
        self._snapshots = snapshots
        self._clock = clock
        self._calculator = calculator or StandardSalaryCalculator()

    def _resolve_month(self, month: Optional[Union[date, str]]) -> date:
        return parse_month(month) if month not in (None, "") else self._clock.today().replace(day=1)

    def _compute(self, profile: Profile, records, leaves, joining_date: Optional[date], month_start: date, today: date) -> EmployeePayroll:
        result = self._calculator.calculate(
            profile.salary,
            profile.deduction_amount,
            normalize_records(records, today),
            leaves,
            joining_date,
            month_start,
            today=today,
        )
        return EmployeePayroll(user_id=profile.user_id, name=profile.name, result=result, joining_date=joining_date)

    def compute_for_employee(self, user_id: int, month: Optional[Union[date, str]] = None) -> EmployeePayroll:
        profile = self._profiles.get_by_id(int(user_id))
        if not profile or profile.role != Role.EMPLOYEE:
            raise NotFoundError("Employee not found")

        month_start, month_end = month_bounds(self._resolve_month(month))
        today = self._clock.today()
        records = self._attendance.list_for_user_between(profile.user_id, month_start, month_end)
        leaves = self._leaves.list_for_user_between(
            profile.user_id, month_start - timedelta(days=LEAVE_LOOKBACK_DAYS), month_end
        )
        joining_date = self._attendance.first_attendance_dates().get(profile.user_id)
        return self._compute(profile, records, leaves, joining_date, month_start, today)

    def compute_month(self, month: Optional[Union[date, str]] = None) -> List[EmployeePayroll]:
        """Payroll for every Employee, with one fetch per table."""
        month_start, month_end = month_bounds(self._resolve_month(month))
        today = self._clock.today()

        employees = self._profiles.list_by_role(Role.EMPLOYEE)
        records_by_user: Dict[int, list] = defaultdict(list)
        for r in self._attendance.list_between(month_start, month_end):
            records_by_user[r.user_id].append(r)
        leaves_by_user: Dict[int, list] = defaultdict(list)
        for leave in self._leaves.list_between(month_start - timedelta(days=LEAVE_LOOKBACK_DAYS), month_end):
            leaves_by_user[leave.user_id].append(leave)
        joining_dates = self._attendance.first_attendance_dates()

        return [
            self._compute(
                emp,
                records_by_user.get(emp.user_id, []),
                leaves_by_user.get(emp.user_id, []),
                joining_dates.get(emp.user_id),
                month_start,
                today,
            )
            for emp in employees
        ]

    def monthly_finance_summary(self, *, current_role: Role, month: Optional[Union[date, str]] = None) -> MonthlyFinanceSummary:
        """Employee net salaries plus freelancer credits for one month."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can view finance summaries")

        month_start, month_end = month_bounds(self._resolve_month(month))
        payroll = self.compute_month(month_start)

        tz = self._clock.now().tzinfo
        credits = self._wallet.list_credits_between(
            datetime.combine(month_start, time.min, tzinfo=tz),
            datetime.combine(month_end, time.max, tzinfo=tz),
        )

        return MonthlyFinanceSummary(
            month=month_key(month_start),
            total_employee_salary=sum((p.result.final_salary for p in payroll), Decimal("0")),
            total_freelancer_earned=sum((t.amount for t in credits), Decimal("0")),
            employee_count=len(payroll),
            freelancer_count=len({t.freelancer_id for t in credits}),
        )

    def snapshot_month(self, *, current_role: Role, month: Optional[Union[date, str]] = None) -> Sequence[SalarySnapshot]:
        """Persist a point-in-time copy of the month's payroll for audit."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can snapshot payroll")

        month_start = self._resolve_month(month)
        computed_at = self._clock.now()
        remaining = {p.user_id: p.paid_leaves for p in self._profiles.list_by_role(Role.EMPLOYEE)}

        snapshots = [
            SalarySnapshot(
                user_id=p.user_id,
                month=month_key(month_start),
                absences_count=p.result.absences_count,
                total_deduction=p.result.total_deduction,
                final_salary=p.result.final_salary,
                paid_leaves_used=p.result.paid_leaves_used,
                remaining_paid_leaves=remaining.get(p.user_id, 0),
                computed_at=computed_at,
            )
            for p in self.compute_month(month_start)
        ]
        self._snapshots.upsert_many(snapshots)
        log.info("payroll snapshot for %s stored (%d employees)", month_key(month_start), len(snapshots))
        return snapshots

    def list_snapshots(self, *, current_role: Role, month: Optional[Union[date, str]] = None) -> Sequence[SalarySnapshot]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can view payroll snapshots")
        return self._snapshots.list_for_month(month_key(self._resolve_month(month)))
