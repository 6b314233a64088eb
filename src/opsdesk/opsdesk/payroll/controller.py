from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, serialize
from ..common.session import admin_required, current_role, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    @app.route("/api/payroll/me", methods=["GET"], endpoint="my_payroll")
    @login_required
    def my_payroll():
        result = svc.compute_for_employee(current_user_id(), request.args.get("month"))
        return ok(result.to_dict())

    @app.route("/api/admin/payroll", methods=["GET"], endpoint="admin_payroll")
    @admin_required
    def month_payroll():
        rows = svc.compute_month(request.args.get("month"))
        return ok([r.to_dict() for r in rows])

    @app.route("/api/admin/payroll/<int:user_id>", methods=["GET"], endpoint="admin_employee_payroll")
    @admin_required
    def employee_payroll(user_id: int):
        return ok(svc.compute_for_employee(user_id, request.args.get("month")).to_dict())

    @app.route("/api/admin/finance-summary", methods=["GET"], endpoint="admin_finance_summary")
    @admin_required
    def finance_summary():
        summary = svc.monthly_finance_summary(current_role=current_role(), month=request.args.get("month"))
        return ok(summary.to_dict())

    @app.route("/api/admin/payroll/snapshots", methods=["POST"], endpoint="admin_payroll_snapshot")
    @admin_required
    def take_snapshot():
        payload = request.get_json(silent=True) or {}
        snapshots = svc.snapshot_month(current_role=current_role(), month=payload.get("month"))
        return ok([s.to_dict() for s in snapshots], status=201, point_in_time=True)

    @app.route("/api/admin/payroll/snapshots", methods=["GET"], endpoint="admin_payroll_snapshots")
    @admin_required
    def list_snapshots():
        snapshots = svc.list_snapshots(current_role=current_role(), month=request.args.get("month"))
        return ok(serialize(list(snapshots)), point_in_time=True)
