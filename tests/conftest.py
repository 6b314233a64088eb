from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

import pytest

from opsdesk.attendance.model import AttendanceRecord, Holiday
from opsdesk.common.datetime_utils import FixedClock
from opsdesk.core.enums import AttendanceStatus, RequestStatus, Role, TaskStatus
from opsdesk.leaves.model import LeaveRequest
from opsdesk.tasks.model import Task
from opsdesk.users.model import Profile

IST = ZoneInfo("Asia/Kolkata")


class InMemoryProfiles:
    def __init__(self, profiles=()):
        self._by_id: Dict[int, Profile] = {p.user_id: p for p in profiles}

    def add(self, profile: Profile) -> Profile:
        self._by_id[profile.user_id] = profile
        return profile

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        return self._by_id.get(int(user_id))

    def list_by_role(self, role: Role):
        return [p for p in self._by_id.values() if p.role == role]

    def credit_monthly_leave(self, *, user_id: int, month: str, amount: int) -> bool:
        p = self._by_id[user_id]
        if p.last_leave_credited_month == month:
            return False
        self._by_id[user_id] = replace(p, paid_leaves=p.paid_leaves + amount, last_leave_credited_month=month)
        return True

    def consume_paid_leave(self, *, user_id: int) -> bool:
        p = self._by_id[user_id]
        if p.paid_leaves <= 0:
            return False
        self._by_id[user_id] = replace(p, paid_leaves=p.paid_leaves - 1)
        return True


class InMemoryAttendance:
    def __init__(self):
        self._by_user_date: Dict[Tuple[int, date], AttendanceRecord] = {}
        self.holidays: Dict[date, Holiday] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._id += 1
        record = replace(record, attendance_id=self._id)
        self._by_user_date[(record.user_id, record.work_date)] = record
        return record

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def list_for_user_between(self, user_id: int, start: date, end: date):
        return sorted(
            (r for r in self._by_user_date.values() if r.user_id == user_id and start <= r.work_date <= end),
            key=lambda r: r.work_date,
        )

    def list_between(self, start: date, end: date):
        return sorted(
            (r for r in self._by_user_date.values() if start <= r.work_date <= end),
            key=lambda r: (r.user_id, r.work_date),
        )

    def first_attendance_dates(self) -> Dict[int, date]:
        out: Dict[int, date] = {}
        for r in self._by_user_date.values():
            if r.user_id not in out or r.work_date < out[r.user_id]:
                out[r.user_id] = r.work_date
        return out

    def create_checkin(self, *, user_id, work_date, check_in, status) -> int:
        return self.add(AttendanceRecord(user_id=user_id, work_date=work_date, check_in=check_in, status=status)).attendance_id

    def update_checkout(self, *, attendance_id, check_out, status) -> bool:
        for key, r in self._by_user_date.items():
            if r.attendance_id == attendance_id:
                self._by_user_date[key] = replace(r, check_out=check_out, status=status)
                return True
        return False

    def upsert_status(self, *, user_id, work_date, status) -> None:
        existing = self._by_user_date.get((user_id, work_date))
        if existing:
            self._by_user_date[(user_id, work_date)] = replace(existing, status=status)
        else:
            self.add(AttendanceRecord(user_id=user_id, work_date=work_date, status=status))

    def upsert_holiday(self, *, holiday: Holiday, user_ids) -> None:
        self.holidays[holiday.holiday_date] = holiday
        for uid in user_ids:
            self._by_user_date.pop((uid, holiday.holiday_date), None)
            self.add(AttendanceRecord(user_id=uid, work_date=holiday.holiday_date, status=AttendanceStatus.HOLIDAY))

    def delete_holiday(self, *, holiday_date: date) -> None:
        self.holidays.pop(holiday_date, None)
        for key, r in list(self._by_user_date.items()):
            if r.work_date == holiday_date and r.status == AttendanceStatus.HOLIDAY:
                del self._by_user_date[key]

    def list_holidays_between(self, start: date, end: date):
        return [h for d, h in sorted(self.holidays.items()) if start <= d <= end]


class InMemoryLeaves:
    def __init__(self):
        self._by_id: Dict[int, LeaveRequest] = {}
        self._next_id = 1

    def add(self, req: LeaveRequest) -> LeaveRequest:
        req = replace(req, request_id=self._next_id)
        self._next_id += 1
        self._by_id[req.request_id] = req
        return req

    def create_many(self, requests) -> List[int]:
        return [self.add(r).request_id for r in requests]

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self._by_id.get(int(request_id))

    def list_for_user_between(self, user_id, start, end):
        return [r for r in self._by_id.values() if r.user_id == user_id and start <= r.leave_date <= end]

    def list_between(self, start, end):
        return [r for r in self._by_id.values() if start <= r.leave_date <= end]

    def list_by_status(self, status, *, limit=200):
        return [r for r in self._by_id.values() if r.status == status][:limit]

    def decide(self, *, request_id, status, is_paid_leave) -> bool:
        req = self._by_id.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._by_id[req.request_id] = replace(req, status=status, is_paid_leave=is_paid_leave)
        return True


class InMemoryTasks:
    def __init__(self):
        self._by_id: Dict[int, Task] = {}
        self._next_id = 1

    def create(self, *, title, description, assignee_id, payment_amount, created_by) -> int:
        task_id = self._next_id
        self._next_id += 1
        self._by_id[task_id] = Task(
            task_id=task_id,
            title=title,
            description=description,
            assignee_id=assignee_id,
            payment_amount=payment_amount,
            created_by=created_by,
            status=TaskStatus.PENDING,
        )
        return task_id

    def get_by_id(self, task_id: int) -> Optional[Task]:
        return self._by_id.get(int(task_id))

    def list_for_assignee(self, assignee_id: int):
        return [t for t in self._by_id.values() if t.assignee_id == assignee_id]

    def update_status(self, *, task_id, expected, status, feedback=None) -> bool:
        task = self._by_id.get(int(task_id))
        if not task or task.status != expected:
            return False
        self._by_id[task.task_id] = replace(task, status=status, feedback=feedback if feedback is not None else task.feedback)
        return True


class InMemoryWallet:
    def __init__(self, profiles: InMemoryProfiles):
        self._profiles = profiles
        self.transactions = []

    def record(self, txn):
        if txn.task_id is not None and any(
            t.task_id == txn.task_id and t.type == txn.type for t in self.transactions
        ):
            return None
        txn = replace(txn, transaction_id=len(self.transactions) + 1)
        self.transactions.append(txn)
        p = self._profiles.get_by_id(txn.freelancer_id)
        self._profiles.add(replace(p, wallet_balance=p.wallet_balance + txn.signed_amount))
        return txn.transaction_id

    def ledger_balance(self, freelancer_id: int) -> Decimal:
        return sum((t.signed_amount for t in self.transactions if t.freelancer_id == freelancer_id), Decimal("0"))

    def cached_balance(self, freelancer_id: int) -> Decimal:
        return self._profiles.get_by_id(freelancer_id).wallet_balance

    def set_cached_balance(self, freelancer_id: int, amount: Decimal) -> None:
        p = self._profiles.get_by_id(freelancer_id)
        self._profiles.add(replace(p, wallet_balance=amount))

    def list_for_freelancer(self, freelancer_id: int, *, limit: int = 100):
        return [t for t in reversed(self.transactions) if t.freelancer_id == freelancer_id][:limit]

    def list_credits_between(self, start: datetime, end: datetime):
        return [t for t in self.transactions if t.type.value == "credit" and start <= t.created_at <= end]


class InMemorySnapshots:
    def __init__(self):
        self.rows = {}

    def upsert_many(self, snapshots) -> None:
        for s in snapshots:
            self.rows[(s.user_id, s.month)] = s

    def list_for_month(self, month: str):
        return [s for (_, m), s in sorted(self.rows.items()) if m == month]


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 9, 30, 12, 0, tzinfo=IST))


@pytest.fixture
def profiles():
    return InMemoryProfiles(
        [
            Profile(user_id=1, name="Admin", email="admin@example.com", role=Role.ADMIN),
            Profile(
                user_id=2,
                name="Asha",
                email="asha@example.com",
                role=Role.EMPLOYEE,
                salary=Decimal("30000"),
                deduction_amount=Decimal("500"),
                paid_leaves=1,
            ),
            Profile(user_id=3, name="Farid", email="farid@example.com", role=Role.FREELANCER),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def leaves_repo():
    return InMemoryLeaves()


@pytest.fixture
def tasks_repo():
    return InMemoryTasks()


@pytest.fixture
def wallet_repo(profiles):
    return InMemoryWallet(profiles)


@pytest.fixture
def snapshots_repo():
    return InMemorySnapshots()
