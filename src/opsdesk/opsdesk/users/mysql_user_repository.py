from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "user_id, name, email, role, salary, deduction_amount, paid_leaves, wallet_balance, last_leave_credited_month"


def _to_profile(r: dict) -> Profile:
    return Profile(
        user_id=int(r["user_id"]),
        name=r["name"],
        email=r["email"],
        role=Role(r["role"]),
        salary=as_decimal(r.get("salary")),
        deduction_amount=as_decimal(r.get("deduction_amount")),
        paid_leaves=int(r.get("paid_leaves") or 0),
        wallet_balance=as_decimal(r.get("wallet_balance")),
        last_leave_credited_month=r.get("last_leave_credited_month"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def list_by_role(self, role: Role) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE role=%s ORDER BY user_id", (role.value,))
            return [_to_profile(r) for r in fetchall(cur)]

    def credit_monthly_leave(self, *, user_id: int, month: str, amount: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE profiles
                SET paid_leaves = paid_leaves + %s, last_leave_credited_month = %s
                WHERE user_id=%s AND (last_leave_credited_month IS NULL OR last_leave_credited_month <> %s)
                """,
                (int(amount), month, int(user_id), month),
            )
            return cur.rowcount > 0

    def consume_paid_leave(self, *, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET paid_leaves = paid_leaves - 1 WHERE user_id=%s AND paid_leaves > 0",
                (int(user_id),),
            )
            return cur.rowcount > 0
