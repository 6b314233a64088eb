"""Read-time attendance status normalization.

A record still marked Present with no checkout, once its day has fully
elapsed, counts as Absent everywhere it is read. Nothing here writes back
to storage; every reader goes through these functions.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, List

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


def is_missed_checkout(record: AttendanceRecord, today: date) -> bool:
    return (
        record.status == AttendanceStatus.PRESENT
        and record.check_out is None
        and parse_iso_date(record.work_date) < today
    )


def effective_status(record: AttendanceRecord, today: date) -> AttendanceStatus:
    if is_missed_checkout(record, today):
        return AttendanceStatus.ABSENT
    return AttendanceStatus(record.status)


def normalize_record(record: AttendanceRecord, today: date) -> AttendanceRecord:
    if is_missed_checkout(record, today):
        return replace(record, status=AttendanceStatus.ABSENT)
    return record


def normalize_records(records: Iterable[AttendanceRecord], today: date) -> List[AttendanceRecord]:
    return [normalize_record(r, today) for r in records]
