from __future__ import annotations

from typing import Protocol, Sequence

from .model import SalarySnapshot


class SnapshotRepository(Protocol):
    def upsert_many(self, snapshots: Sequence[SalarySnapshot]) -> None:
        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[SalarySnapshot]:
        raise NotImplementedError
