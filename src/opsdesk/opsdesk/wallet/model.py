from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import TransactionType


@dataclass(frozen=True)
class WalletTransaction:
    freelancer_id: int
    amount: Decimal
    type: TransactionType
    created_at: datetime
    task_id: Optional[int] = None
    description: Optional[str] = None
    transaction_id: Optional[int] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == TransactionType.CREDIT else -self.amount


@dataclass(frozen=True)
class LedgerReconciliation:
    freelancer_id: int
    cached_balance: Decimal
    ledger_balance: Decimal
    corrected: bool = False

    @property
    def drift(self) -> Decimal:
        return self.cached_balance - self.ledger_balance

    @property
    def in_sync(self) -> bool:
        return self.drift == 0
