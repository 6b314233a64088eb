from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Sequence, Union

from ...attendance.model import AttendanceRecord
from ...leaves.model import LeaveRequest
from ..model import SalaryComputationResult


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
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
        raise NotImplementedError
