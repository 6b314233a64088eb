from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import WalletTransaction


class WalletRepository(Protocol):
    def record(self, txn: WalletTransaction) -> Optional[int]:
        """Insert `txn` and apply its signed amount to the cached balance.

        Both writes happen in one database transaction and the balance is
        changed with a single atomic increment. Returns None when a credit
        for the same task already exists.
        """

        raise NotImplementedError

    def ledger_balance(self, freelancer_id: int) -> Decimal:
        raise NotImplementedError

    def cached_balance(self, freelancer_id: int) -> Decimal:
        raise NotImplementedError

    def set_cached_balance(self, freelancer_id: int, amount: Decimal) -> None:
        raise NotImplementedError

    def list_for_freelancer(self, freelancer_id: int, *, limit: int = 100) -> Sequence[WalletTransaction]:
        raise NotImplementedError

    def list_credits_between(self, start: datetime, end: datetime) -> Sequence[WalletTransaction]:
        raise NotImplementedError
