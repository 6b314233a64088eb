import pytest

from opsdesk.attendance.service import AttendanceService
from opsdesk.container import Container
from opsdesk.leaves.service import LeaveService
from opsdesk.main import create_app
from opsdesk.payroll.service import PayrollService
from opsdesk.tasks.service import TaskService
from opsdesk.wallet.service import WalletService


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app()
    return app.test_client()


@pytest.fixture
def fake_client(monkeypatch, clock, profiles, attendance_repo, leaves_repo, tasks_repo, wallet_repo, snapshots_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    wallet_service = WalletService(wallet_repo, profiles, clock=clock)
    container = Container(
        conn=None,
        clock=clock,
        profiles_repo=profiles,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        tasks_repo=tasks_repo,
        wallet_repo=wallet_repo,
        snapshots_repo=snapshots_repo,
        attendance_service=AttendanceService(attendance_repo, profiles, clock=clock),
        leave_service=LeaveService(leaves_repo, attendance_repo, profiles),
        wallet_service=wallet_service,
        task_service=TaskService(tasks_repo, profiles, wallet_service),
        payroll_service=PayrollService(profiles, attendance_repo, leaves_repo, wallet_repo, snapshots_repo, clock=clock),
    )
    client = create_app(container).test_client()
    _login(client, 1, "Admin")
    return client


def _login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_anonymous_request_is_rejected(client):
    resp = client.get("/api/attendance/today")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": {"message": "Not authenticated", "code": "UNAUTHENTICATED"}}


def test_admin_routes_reject_employees(client):
    _login(client, 2, "Employee")

    resp = client.get("/api/admin/payroll")

    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "FORBIDDEN"


def test_validation_error_maps_to_400(client):
    _login(client, 2, "Employee")

    resp = client.get("/api/attendance/calendar/not-a-month")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_route_uses_json_envelope(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize("url", ["/api/admin/finance-summary", "/api/admin/finance-summary?month="])
def test_finance_summary_defaults_to_current_month(fake_client, url):
    resp = fake_client.get(url)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["month"] == "2025-09"
    assert data["employee_count"] == 1


def test_finance_summary_for_given_month(fake_client):
    resp = fake_client.get("/api/admin/finance-summary?month=2025-08")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["month"] == "2025-08"


def test_snapshot_without_month_uses_current_month(fake_client, snapshots_repo):
    resp = fake_client.post("/api/admin/payroll/snapshots")

    assert resp.status_code == 201
    body = resp.get_json()
    assert [s["month"] for s in body["data"]] == ["2025-09"]
    assert body["meta"] == {"point_in_time": True}
    assert list(snapshots_repo.rows) == [(2, "2025-09")]


def test_snapshot_for_given_month(fake_client, snapshots_repo):
    resp = fake_client.post("/api/admin/payroll/snapshots", json={"month": "2025-08"})

    assert resp.status_code == 201
    assert list(snapshots_repo.rows) == [(2, "2025-08")]


def test_snapshot_listing_with_and_without_month(fake_client):
    fake_client.post("/api/admin/payroll/snapshots")

    current = fake_client.get("/api/admin/payroll/snapshots")
    other = fake_client.get("/api/admin/payroll/snapshots?month=2025-08")

    assert current.status_code == 200
    assert [s["user_id"] for s in current.get_json()["data"]] == [2]
    assert other.get_json()["data"] == []
