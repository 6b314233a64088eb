from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[Profile]:
        raise NotImplementedError

    def credit_monthly_leave(self, *, user_id: int, month: str, amount: int) -> bool:
        """Add `amount` paid leaves unless `month` was already credited."""

        raise NotImplementedError

    def consume_paid_leave(self, *, user_id: int) -> bool:
        """Decrement paid leaves by one, never below zero."""

        raise NotImplementedError
