from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_COLUMNS = "task_id, title, description, assignee_id, status, payment_amount, feedback, created_by"


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        title=r["title"],
        description=r.get("description") or "",
        assignee_id=r.get("assignee_id"),
        status=TaskStatus(r["status"]),
        payment_amount=as_decimal(r["payment_amount"]) if r.get("payment_amount") is not None else None,
        feedback=r.get("feedback"),
        created_by=int(r["created_by"]),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, title, description, assignee_id, payment_amount, created_by) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, assignee_id, status, payment_amount, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (title, description, assignee_id, TaskStatus.PENDING.value, payment_amount, int(created_by)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (int(task_id),))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def list_for_assignee(self, assignee_id: int) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE assignee_id=%s ORDER BY created_at DESC",
                (int(assignee_id),),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def update_status(self, *, task_id, expected, status, feedback=None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks SET status=%s, feedback=COALESCE(%s, feedback)
                WHERE task_id=%s AND status=%s
                """,
                (status.value, feedback, int(task_id), expected.value),
            )
            return cur.rowcount > 0
