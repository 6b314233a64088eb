from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from .model import LeaveRequest
from .repository import LeaveRepository

log = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, attendance: AttendanceRepository, profiles: ProfileRepository):
        self._leaves = leaves
        self._attendance = attendance
        self._profiles = profiles

    def submit(
        self,
        *,
        current_role: Role,
        user_id: int,
        dates: Iterable,
        reason: str,
        will_work_sunday: bool = False,
        is_paid_leave: bool = False,
    ) -> list[int]:
        """One Pending request per day; only the first day may be paid."""
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can request leave")

        days = sorted({parse_iso_date(d) for d in dates})
        if not days:
            raise ValidationError("Select at least one day")
        reason = require_non_empty(reason, "Reason")

        requests = [
            LeaveRequest(
                request_id=None,
                user_id=int(user_id),
                leave_date=day,
                reason=reason,
                status=RequestStatus.PENDING,
                will_work_sunday=bool(will_work_sunday),
                is_paid_leave=bool(is_paid_leave) and index == 0,
            )
            for index, day in enumerate(days)
        ]
        return self._leaves.create_many(requests)

    def approve(self, *, current_role: Role, request_id: int, paid_override: bool = False) -> LeaveRequest:
        """Approve a leave and record the day as Paid Off (paid) or Off.

        Paid only when the admin asks for it and the employee still has a
        paid leave left; the balance is then decremented.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can approve leave")

        req = self._get_pending(request_id)
        profile = self._profiles.get_by_id(req.user_id)
        if not profile:
            raise NotFoundError("User not found")

        paid = bool(paid_override) and profile.paid_leaves >= 1

        if not self._leaves.decide(request_id=req.request_id, status=RequestStatus.APPROVED, is_paid_leave=paid):
            raise ValidationError("Request was already decided")

        self._attendance.upsert_status(
            user_id=req.user_id,
            work_date=req.leave_date,
            status=AttendanceStatus.PAID_OFF if paid else AttendanceStatus.OFF,
        )
        if paid:
            self._profiles.consume_paid_leave(user_id=req.user_id)

        log.info("leave %s approved for user %s on %s (paid=%s)", req.request_id, req.user_id, req.leave_date, paid)
        return LeaveRequest(
            request_id=req.request_id,
            user_id=req.user_id,
            leave_date=req.leave_date,
            reason=req.reason,
            status=RequestStatus.APPROVED,
            will_work_sunday=req.will_work_sunday,
            is_paid_leave=paid,
            created_at=req.created_at,
        )

    def reject(self, *, current_role: Role, request_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reject leave")

        req = self._get_pending(request_id)
        if not self._leaves.decide(request_id=req.request_id, status=RequestStatus.REJECTED, is_paid_leave=False):
            raise ValidationError("Request was already decided")

    def list_pending(self, *, current_role: Role, limit: int = 200) -> Sequence[LeaveRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can review leave")
        return self._leaves.list_by_status(RequestStatus.PENDING, limit=limit)

    def _get_pending(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request was already decided")
        return req
