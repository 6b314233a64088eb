from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import CheckoutStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import BusinessClock, Clock
from .core.constants import (
    DEFAULT_BUSINESS_TIMEZONE,
    DEFAULT_CHECKIN_END_HOUR,
    DEFAULT_CHECKIN_START_HOUR,
    DEFAULT_HALF_DAY_THRESHOLD_HOURS,
)
from .database.connection import DatabaseConnection, DBConfig
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .payroll.mysql_snapshot_repository import MySQLSnapshotRepository
from .payroll.service import PayrollService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.service import TaskService
from .users.mysql_user_repository import MySQLProfileRepository
from .wallet.mysql_wallet_repository import MySQLWalletRepository
from .wallet.service import WalletService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: Clock

    profiles_repo: MySQLProfileRepository
    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository
    tasks_repo: MySQLTaskRepository
    wallet_repo: MySQLWalletRepository
    snapshots_repo: MySQLSnapshotRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    wallet_service: WalletService
    task_service: TaskService
    payroll_service: PayrollService


def build_container(*, db_config: dict, settings=None, clock: Clock | None = None) -> Container:
    clock = clock or BusinessClock.for_zone(getattr(settings, "BUSINESS_TIMEZONE", DEFAULT_BUSINESS_TIMEZONE))
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    profiles_repo = MySQLProfileRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    tasks_repo = MySQLTaskRepository(conn)
    wallet_repo = MySQLWalletRepository(conn)
    snapshots_repo = MySQLSnapshotRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        profiles_repo,
        clock=clock,
        strategy_factory=CheckoutStrategyFactory(
            half_day_threshold_hours=float(getattr(settings, "HALF_DAY_THRESHOLD_HOURS", DEFAULT_HALF_DAY_THRESHOLD_HOURS))
        ),
        checkin_start_hour=int(getattr(settings, "CHECKIN_START_HOUR", DEFAULT_CHECKIN_START_HOUR)),
        checkin_end_hour=int(getattr(settings, "CHECKIN_END_HOUR", DEFAULT_CHECKIN_END_HOUR)),
    )
    leave_service = LeaveService(leaves_repo, attendance_repo, profiles_repo)
    wallet_service = WalletService(wallet_repo, profiles_repo, clock=clock)
    task_service = TaskService(tasks_repo, profiles_repo, wallet_service)
    payroll_service = PayrollService(
        profiles_repo,
        attendance_repo,
        leaves_repo,
        wallet_repo,
        snapshots_repo,
        clock=clock,
    )

    return Container(
        conn=conn,
        clock=clock,
        profiles_repo=profiles_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        tasks_repo=tasks_repo,
        wallet_repo=wallet_repo,
        snapshots_repo=snapshots_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
        wallet_service=wallet_service,
        task_service=task_service,
        payroll_service=payroll_service,
    )
