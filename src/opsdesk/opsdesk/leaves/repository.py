from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create_many(self, requests: Sequence[LeaveRequest]) -> list[int]:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_by_status(self, status: RequestStatus, *, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, is_paid_leave: bool) -> bool:
        """Move a Pending request to `status`. False if it was not Pending."""

        raise NotImplementedError
