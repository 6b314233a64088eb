from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import Task


class TaskRepository(Protocol):
    def create(
        self,
        *,
        title: str,
        description: str,
        assignee_id: Optional[int],
        payment_amount: Optional[Decimal],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_for_assignee(self, assignee_id: int) -> Sequence[Task]:
        raise NotImplementedError

    def update_status(
        self,
        *,
        task_id: int,
        expected: TaskStatus,
        status: TaskStatus,
        feedback: Optional[str] = None,
    ) -> bool:
        """Compare-and-set on status. False if the task moved meanwhile."""

        raise NotImplementedError
