from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, Holiday
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, work_date, check_in, check_out, status"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        status=AttendanceStatus(r["status"]),
    )


def _naive(value: datetime) -> datetime:
    # DATETIME columns hold business-local wall time
    return value.replace(tzinfo=None)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(user_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE work_date BETWEEN %s AND %s
                ORDER BY user_id, work_date
                """,
                (start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def first_attendance_dates(self) -> Dict[int, date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id, MIN(work_date) AS first_date FROM attendance GROUP BY user_id")
            return {int(r["user_id"]): r["first_date"] for r in fetchall(cur)}

    def create_checkin(self, *, user_id: int, work_date: date, check_in: datetime, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, work_date, check_in, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), work_date, _naive(check_in), status.value),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET check_out=%s, status=%s WHERE attendance_id=%s",
                (_naive(check_out), status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def upsert_status(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, work_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (int(user_id), work_date, status.value),
            )

    def upsert_holiday(self, *, holiday: Holiday, user_ids: Sequence[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(holiday_date, label, created_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE label=VALUES(label), created_by=VALUES(created_by)
                """,
                (holiday.holiday_date, holiday.label, holiday.created_by),
            )
            if user_ids:
                cur.executemany(
                    """
                    INSERT INTO attendance(user_id, work_date, check_in, check_out, status)
                    VALUES(%s,%s,NULL,NULL,%s)
                    ON DUPLICATE KEY UPDATE check_in=NULL, check_out=NULL, status=VALUES(status)
                    """,
                    [(int(uid), holiday.holiday_date, AttendanceStatus.HOLIDAY.value) for uid in user_ids],
                )

    def delete_holiday(self, *, holiday_date: date) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_date=%s", (holiday_date,))
            cur.execute(
                "DELETE FROM attendance WHERE work_date=%s AND status=%s",
                (holiday_date, AttendanceStatus.HOLIDAY.value),
            )

    def list_holidays_between(self, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_date, label, created_by FROM holidays WHERE holiday_date BETWEEN %s AND %s ORDER BY holiday_date",
                (start, end),
            )
            return [
                Holiday(holiday_date=r["holiday_date"], label=r["label"], created_by=r.get("created_by"))
                for r in fetchall(cur)
            ]
