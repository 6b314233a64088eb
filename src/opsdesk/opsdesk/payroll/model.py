from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


def _jsonable(data: dict) -> dict:
    out = {}
    for k, v in data.items():
        if isinstance(v, Decimal):
            out[k] = str(v)
        elif isinstance(v, (date, datetime)):
            out[k] = v.isoformat()
        else:
            out[k] = v
    return out


@dataclass(frozen=True)
class SalaryComputationResult:
    """Derived per (employee, month); recomputed on demand."""

    base_salary: Decimal
    deduction_amount: Decimal
    absences_count: int
    total_deduction: Decimal
    final_salary: Decimal
    working_days_count: int
    present_count: int
    paid_leaves_used: int
    period_start: date
    period_end: date

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class SalarySnapshot:
    """Point-in-time copy of a computation, kept for audit/history.

    Editing attendance afterwards does not update it; `computed_at` says
    when it was true.
    """

    user_id: int
    month: str
    absences_count: int
    total_deduction: Decimal
    final_salary: Decimal
    paid_leaves_used: int
    remaining_paid_leaves: int
    computed_at: datetime

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class EmployeePayroll:
    user_id: int
    name: str
    result: SalaryComputationResult
    joining_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "joining_date": self.joining_date.isoformat() if self.joining_date else None,
            **self.result.to_dict(),
        }


@dataclass(frozen=True)
class MonthlyFinanceSummary:
    month: str
    total_employee_salary: Decimal
    total_freelancer_earned: Decimal
    employee_count: int
    freelancer_count: int

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))
