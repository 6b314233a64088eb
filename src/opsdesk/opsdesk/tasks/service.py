from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative_money
from ..core.enums import Role, TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from ..wallet.service import WalletService
from .model import Task
from .repository import TaskRepository

log = logging.getLogger(__name__)

SUBMITTABLE = frozenset({TaskStatus.PENDING, TaskStatus.REVISION})
REVIEW_OUTCOMES = frozenset({TaskStatus.COMPLETED, TaskStatus.REVISION})


class TaskService:
    def __init__(self, tasks: TaskRepository, profiles: ProfileRepository, wallet: WalletService):
        self._tasks = tasks
        self._profiles = profiles
        self._wallet = wallet

    def _get(self, task_id: int) -> Task:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create(
        self,
        *,
        current_role: Role,
        created_by: int,
        title: str,
        description: str = "",
        assignee_id: Optional[int] = None,
        payment_amount=None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can create tasks")

        amount = None
        if payment_amount not in (None, ""):
            amount = require_non_negative_money(payment_amount, "Payment amount")
        if assignee_id is not None and not self._profiles.get_by_id(int(assignee_id)):
            raise NotFoundError("Assignee not found")

        return self._tasks.create(
            title=require_non_empty(title, "Title"),
            description=(description or "").strip(),
            assignee_id=int(assignee_id) if assignee_id is not None else None,
            payment_amount=amount,
            created_by=int(created_by),
        )

    def list_mine(self, user_id: int) -> Sequence[Task]:
        return self._tasks.list_for_assignee(int(user_id))

    def submit(self, *, current_user_id: int, task_id: int) -> Task:
        """Assignee hands the task in for review."""
        task = self._get(task_id)
        if task.assignee_id != int(current_user_id):
            raise AuthorizationError("Only the assignee can submit this task")
        if task.status not in SUBMITTABLE:
            raise ValidationError(f"Cannot submit a task in {task.status.value}")
        return self._transition(task, TaskStatus.REVIEW)

    def review(self, *, current_role: Role, task_id: int, decision, feedback: str = "") -> Task:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can review tasks")

        outcome = self._parse_status(decision)
        if outcome not in REVIEW_OUTCOMES:
            raise ValidationError("Review must end in Completed or Revision")

        task = self._get(task_id)
        if task.status != TaskStatus.REVIEW:
            raise ValidationError("Task is not awaiting review")
        return self._transition(task, outcome, feedback=(feedback or "").strip() or None)

    def set_status(self, *, current_role: Role, task_id: int, status) -> Task:
        """Admin override to any status."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change task status")
        task = self._get(task_id)
        new_status = self._parse_status(status)
        if new_status == task.status:
            return task
        return self._transition(task, new_status)

    @staticmethod
    def _parse_status(value) -> TaskStatus:
        try:
            return TaskStatus(value)
        except ValueError:
            raise ValidationError(f"Unknown task status {value!r}")

    def _transition(self, task: Task, status: TaskStatus, *, feedback: Optional[str] = None) -> Task:
        # Credit before the status write: a retry after a failed status write
        # is harmless because a task can only be credited once.
        if status == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED:
            self._pay_out(task)

        if not self._tasks.update_status(task_id=task.task_id, expected=task.status, status=status, feedback=feedback):
            raise ValidationError("Task was changed by someone else, reload and retry")

        log.debug("task %s: %s -> %s", task.task_id, task.status.value, status.value)
        return Task(
            task_id=task.task_id,
            title=task.title,
            status=status,
            created_by=task.created_by,
            description=task.description,
            assignee_id=task.assignee_id,
            payment_amount=task.payment_amount,
            feedback=feedback if feedback is not None else task.feedback,
        )

    def _pay_out(self, task: Task) -> None:
        if task.assignee_id is None or not task.payment_amount or task.payment_amount <= 0:
            return
        assignee = self._profiles.get_by_id(task.assignee_id)
        if not assignee or assignee.role != Role.FREELANCER:
            return
        self._wallet.credit_for_task(
            freelancer_id=assignee.user_id,
            task_id=task.task_id,
            amount=task.payment_amount,
            title=task.title,
        )
