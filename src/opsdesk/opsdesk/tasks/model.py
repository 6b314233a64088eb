from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    status: TaskStatus
    created_by: int
    description: str = ""
    assignee_id: Optional[int] = None
    payment_amount: Optional[Decimal] = None
    feedback: Optional[str] = None
