from datetime import date

import pytest

from opsdesk.core.enums import AttendanceStatus, RequestStatus, Role
from opsdesk.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from opsdesk.leaves.service import LeaveService


@pytest.fixture
def svc(leaves_repo, attendance_repo, profiles):
    return LeaveService(leaves_repo, attendance_repo, profiles)


def test_submit_creates_one_pending_request_per_day(svc, leaves_repo):
    ids = svc.submit(
        current_role=Role.EMPLOYEE,
        user_id=2,
        dates=["2025-09-12", "2025-09-10", "2025-09-12"],
        reason="wedding",
        will_work_sunday=True,
        is_paid_leave=True,
    )

    requests = [leaves_repo.get_by_id(i) for i in ids]
    assert [r.leave_date for r in requests] == [date(2025, 9, 10), date(2025, 9, 12)]
    assert all(r.status == RequestStatus.PENDING and r.will_work_sunday for r in requests)
    assert [r.is_paid_leave for r in requests] == [True, False]


def test_submit_validates_role_and_input(svc):
    with pytest.raises(AuthorizationError):
        svc.submit(current_role=Role.FREELANCER, user_id=3, dates=["2025-09-10"], reason="x")
    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.EMPLOYEE, user_id=2, dates=[], reason="x")
    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.EMPLOYEE, user_id=2, dates=["2025-09-10"], reason="  ")


def test_paid_approval_consumes_balance_and_marks_paid_off(svc, attendance_repo, profiles):
    (first,) = svc.submit(current_role=Role.EMPLOYEE, user_id=2, dates=["2025-09-10"], reason="sick")

    approved = svc.approve(current_role=Role.ADMIN, request_id=first, paid_override=True)

    assert approved.status == RequestStatus.APPROVED
    assert approved.is_paid_leave is True
    assert profiles.get_by_id(2).paid_leaves == 0
    assert attendance_repo.get_for_user_and_date(2, date(2025, 9, 10)).status == AttendanceStatus.PAID_OFF


def test_paid_approval_without_balance_falls_back_to_off(svc, attendance_repo, profiles):
    a, b = svc.submit(current_role=Role.EMPLOYEE, user_id=2, dates=["2025-09-10", "2025-09-11"], reason="trip")
    svc.approve(current_role=Role.ADMIN, request_id=a, paid_override=True)

    second = svc.approve(current_role=Role.ADMIN, request_id=b, paid_override=True)

    assert second.is_paid_leave is False
    assert profiles.get_by_id(2).paid_leaves == 0
    assert attendance_repo.get_for_user_and_date(2, date(2025, 9, 11)).status == AttendanceStatus.OFF


def test_decided_request_cannot_be_decided_again(svc):
    (req,) = svc.submit(current_role=Role.EMPLOYEE, user_id=2, dates=["2025-09-10"], reason="x")
    svc.reject(current_role=Role.ADMIN, request_id=req)

    with pytest.raises(ValidationError):
        svc.approve(current_role=Role.ADMIN, request_id=req)
    with pytest.raises(NotFoundError):
        svc.reject(current_role=Role.ADMIN, request_id=999)


def test_only_admins_review(svc):
    (req,) = svc.submit(current_role=Role.EMPLOYEE, user_id=2, dates=["2025-09-10"], reason="x")

    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.EMPLOYEE, request_id=req)
    with pytest.raises(AuthorizationError):
        svc.list_pending(current_role=Role.EMPLOYEE)
    assert [r.request_id for r in svc.list_pending(current_role=Role.ADMIN)] == [req]
