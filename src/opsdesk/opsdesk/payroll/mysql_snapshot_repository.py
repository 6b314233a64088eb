from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall
from .model import SalarySnapshot
from .repository import SnapshotRepository


class MySQLSnapshotRepository(SnapshotRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_many(self, snapshots: Sequence[SalarySnapshot]) -> None:
        if not snapshots:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO salary_snapshots(
                    user_id, month, absences_count, total_deduction, final_salary,
                    paid_leaves_used, remaining_paid_leaves, computed_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    absences_count=VALUES(absences_count),
                    total_deduction=VALUES(total_deduction),
                    final_salary=VALUES(final_salary),
                    paid_leaves_used=VALUES(paid_leaves_used),
                    remaining_paid_leaves=VALUES(remaining_paid_leaves),
                    computed_at=VALUES(computed_at)
                """,
                [
                    (
                        s.user_id,
                        s.month,
                        s.absences_count,
                        s.total_deduction,
                        s.final_salary,
                        s.paid_leaves_used,
                        s.remaining_paid_leaves,
                        s.computed_at.replace(tzinfo=None),
                    )
                    for s in snapshots
                ],
            )

    def list_for_month(self, month: str) -> Sequence[SalarySnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, month, absences_count, total_deduction, final_salary,
                       paid_leaves_used, remaining_paid_leaves, computed_at
                FROM salary_snapshots WHERE month=%s ORDER BY user_id
                """,
                (month,),
            )
            return [
                SalarySnapshot(
                    user_id=int(r["user_id"]),
                    month=r["month"],
                    absences_count=int(r["absences_count"]),
                    total_deduction=as_decimal(r["total_deduction"]),
                    final_salary=as_decimal(r["final_salary"]),
                    paid_leaves_used=int(r["paid_leaves_used"]),
                    remaining_paid_leaves=int(r["remaining_paid_leaves"]),
                    computed_at=r["computed_at"],
                )
                for r in fetchall(cur)
            ]
