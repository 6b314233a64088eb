from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Employee, Freelancer or Admin.

    `wallet_balance` is a cache of the wallet ledger (Freelancers only);
    the ledger is the source of truth.
    """

    user_id: int
    name: str
    email: str
    role: Role
    salary: Decimal = Decimal("0")
    deduction_amount: Decimal = Decimal("0")
    paid_leaves: int = 0
    wallet_balance: Decimal = Decimal("0")
    last_leave_credited_month: Optional[str] = None
