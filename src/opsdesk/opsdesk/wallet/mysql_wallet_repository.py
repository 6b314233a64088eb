from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import TransactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import WalletTransaction
from .repository import WalletRepository

_COLUMNS = "transaction_id, freelancer_id, amount, type, task_id, description, created_at"


def _to_txn(r: dict) -> WalletTransaction:
    return WalletTransaction(
        transaction_id=int(r["transaction_id"]),
        freelancer_id=int(r["freelancer_id"]),
        amount=as_decimal(r["amount"]),
        type=TransactionType(r["type"]),
        task_id=r.get("task_id"),
        description=r.get("description"),
        created_at=r["created_at"],
    )


class MySQLWalletRepository(WalletRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, txn: WalletTransaction) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO wallet_transactions(freelancer_id, amount, type, task_id, description, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(txn.freelancer_id),
                        txn.amount,
                        txn.type.value,
                        txn.task_id,
                        txn.description,
                        txn.created_at.replace(tzinfo=None),
                    ),
                )
                txn_id = int(cur.lastrowid)
                cur.execute(
                    "UPDATE profiles SET wallet_balance = wallet_balance + %s WHERE user_id=%s",
                    (txn.signed_amount, int(txn.freelancer_id)),
                )
                return txn_id
        except mysql.connector.IntegrityError as e:
            # only the (task_id, type) unique key means "already credited"
            if txn.task_id is None or e.errno != errorcode.ER_DUP_ENTRY:
                raise
            return None

    def ledger_balance(self, freelancer_id: int) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT SUM(CASE WHEN type='credit' THEN amount ELSE -amount END) AS balance
                FROM wallet_transactions WHERE freelancer_id=%s
                """,
                (int(freelancer_id),),
            )
            r = fetchone(cur)
            return as_decimal(r["balance"] if r else None)

    def cached_balance(self, freelancer_id: int) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT wallet_balance FROM profiles WHERE user_id=%s", (int(freelancer_id),))
            r = fetchone(cur)
            return as_decimal(r["wallet_balance"] if r else None)

    def set_cached_balance(self, freelancer_id: int, amount: Decimal) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET wallet_balance=%s WHERE user_id=%s", (amount, int(freelancer_id)))

    def list_for_freelancer(self, freelancer_id: int, *, limit: int = 100) -> Sequence[WalletTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM wallet_transactions
                WHERE freelancer_id=%s ORDER BY created_at DESC, transaction_id DESC LIMIT %s
                """,
                (int(freelancer_id), int(limit)),
            )
            return [_to_txn(r) for r in fetchall(cur)]

    def list_credits_between(self, start: datetime, end: datetime) -> Sequence[WalletTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM wallet_transactions
                WHERE type='credit' AND created_at BETWEEN %s AND %s
                """,
                (start.replace(tzinfo=None), end.replace(tzinfo=None)),
            )
            return [_to_txn(r) for r in fetchall(cur)]
