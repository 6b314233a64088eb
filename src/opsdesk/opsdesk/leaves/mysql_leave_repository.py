from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = "request_id, user_id, leave_date, reason, status, will_work_sunday, is_paid_leave, created_at"


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_date=r["leave_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        will_work_sunday=bool(r.get("will_work_sunday")),
        is_paid_leave=bool(r.get("is_paid_leave")),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, requests: Sequence[LeaveRequest]) -> list[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for req in requests:
                cur.execute(
                    """
                    INSERT INTO leave_requests(user_id, leave_date, reason, status, will_work_sunday, is_paid_leave)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(req.user_id),
                        req.leave_date,
                        req.reason,
                        req.status.value,
                        int(req.will_work_sunday),
                        int(req.is_paid_leave),
                    ),
                )
                ids.append(int(cur.lastrowid))
        return ids

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leave_requests
                WHERE user_id=%s AND leave_date BETWEEN %s AND %s
                ORDER BY leave_date
                """,
                (int(user_id), start, end),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_between(self, start: date, end: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_date BETWEEN %s AND %s ORDER BY user_id, leave_date",
                (start, end),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_by_status(self, status: RequestStatus, *, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE status=%s ORDER BY created_at DESC LIMIT %s",
                (status.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(self, *, request_id: int, status: RequestStatus, is_paid_leave: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, is_paid_leave=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(is_paid_leave), int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
