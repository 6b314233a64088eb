from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Sequence

from ..common.datetime_utils import Clock
from ..common.validators import require_positive_money
from ..core.enums import Role, TransactionType
from ..core.exceptions import AuthorizationError, LedgerDriftError, NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from .model import LedgerReconciliation, WalletTransaction
from .repository import WalletRepository

log = logging.getLogger(__name__)


class WalletService:
    """Freelancer wallet.

    The transaction ledger is the source of truth. `profiles.wallet_balance`
    is a cache that only moves through `WalletRepository.record`.
    """

    def __init__(self, wallet: WalletRepository, profiles: ProfileRepository, *, clock: Clock):
        self._wallet = wallet
        self._profiles = profiles
        self._clock = clock

    def _get_freelancer(self, freelancer_id: int):
        profile = self._profiles.get_by_id(int(freelancer_id))
        if not profile or profile.role != Role.FREELANCER:
            raise NotFoundError("Freelancer not found")
        return profile

    def credit_for_task(self, *, freelancer_id: int, task_id: int, amount, title: str = "") -> Optional[WalletTransaction]:
        """Credit a completed task's payment. A task is credited at most once."""
        txn = WalletTransaction(
            freelancer_id=int(freelancer_id),
            amount=require_positive_money(amount, "Payment amount"),
            type=TransactionType.CREDIT,
            task_id=int(task_id),
            description=f"Payment for task: {title}" if title else "Task payment",
            created_at=self._clock.now(),
        )
        txn_id = self._wallet.record(txn)
        if txn_id is None:
            log.warning("task %s already credited to user %s, skipping", task_id, freelancer_id)
            return None

        log.info("credited %s to user %s for task %s", txn.amount, freelancer_id, task_id)
        return replace(txn, transaction_id=txn_id)

    def payout(self, *, current_role: Role, freelancer_id: int, amount, description: str = "") -> WalletTransaction:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can process payments")

        self._get_freelancer(freelancer_id)
        value = require_positive_money(amount, "Amount")
        available = self._wallet.ledger_balance(int(freelancer_id))
        if value > available:
            raise ValidationError(f"Payout {value} exceeds wallet balance {available}")

        txn = WalletTransaction(
            freelancer_id=int(freelancer_id),
            amount=value,
            type=TransactionType.DEBIT,
            description=(description or "").strip() or "Manual payment payout",
            created_at=self._clock.now(),
        )
        txn_id = self._wallet.record(txn)
        log.info("paid out %s to user %s", value, freelancer_id)
        return replace(txn, transaction_id=txn_id)

    def balance(self, freelancer_id: int) -> Decimal:
        """Balance derived from the ledger, never from the cache."""
        return self._wallet.ledger_balance(int(freelancer_id))

    def history(self, freelancer_id: int, *, limit: int = 100) -> Sequence[WalletTransaction]:
        return self._wallet.list_for_freelancer(int(freelancer_id), limit=limit)

    def reconcile(self, freelancer_id: int, *, fix: bool = False, strict: bool = False) -> LedgerReconciliation:
        """Compare the cached balance with the ledger sum.

        On drift: log a warning, rewrite the cache when `fix` is set, and
        raise LedgerDriftError when `strict` is set.
        """
        cached = self._wallet.cached_balance(int(freelancer_id))
        ledger = self._wallet.ledger_balance(int(freelancer_id))
        if cached == ledger:
            return LedgerReconciliation(freelancer_id=int(freelancer_id), cached_balance=cached, ledger_balance=ledger)

        log.warning("wallet drift for user %s: cached=%s ledger=%s", freelancer_id, cached, ledger)
        if strict:
            raise LedgerDriftError(int(freelancer_id), cached, ledger)
        if fix:
            self._wallet.set_cached_balance(int(freelancer_id), ledger)
            log.info("wallet cache for user %s reset to %s", freelancer_id, ledger)

        return LedgerReconciliation(
            freelancer_id=int(freelancer_id),
            cached_balance=cached,
            ledger_balance=ledger,
            corrected=fix,
        )

    def reconcile_all(self, *, current_role: Role, fix: bool = False) -> List[LedgerReconciliation]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reconcile wallets")
        return [self.reconcile(p.user_id, fix=fix) for p in self._profiles.list_by_role(Role.FREELANCER)]
