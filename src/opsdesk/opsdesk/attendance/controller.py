from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, serialize
from ..common.session import admin_required, current_role, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        return ok(serialize(svc.check_in(current_user_id())), status=201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        return ok(serialize(svc.check_out(current_user_id())))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return ok(serialize(svc.get_today_record(current_user_id())))

    @app.route("/api/attendance/calendar/<month>", methods=["GET"], endpoint="attendance_calendar")
    @login_required
    def calendar(month: str):
        return ok(svc.get_calendar(current_user_id(), month))

    @app.route("/api/admin/attendance/<int:user_id>/calendar/<month>", methods=["GET"], endpoint="admin_attendance_calendar")
    @admin_required
    def admin_calendar(user_id: int, month: str):
        return ok(svc.get_calendar(user_id, month))

    @app.route("/api/admin/attendance/<int:user_id>/<work_date>", methods=["PUT"], endpoint="admin_attendance_override")
    @admin_required
    def override(user_id: int, work_date: str):
        payload = request.get_json(silent=True) or {}
        svc.override_status(current_role=current_role(), user_id=user_id, work_date=work_date, status=payload.get("status"))
        return ok({"user_id": user_id, "date": work_date, "status": payload.get("status")})

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="admin_mark_holiday")
    @admin_required
    def mark_holiday():
        payload = request.get_json(silent=True) or {}
        holiday = svc.mark_holiday(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            holiday_date=payload.get("date") or "",
            label=payload.get("label") or "",
        )
        return ok(serialize(holiday), status=201)

    @app.route("/api/admin/holidays/<holiday_date>", methods=["DELETE"], endpoint="admin_remove_holiday")
    @admin_required
    def remove_holiday(holiday_date: str):
        svc.remove_holiday(current_role=current_role(), holiday_date=holiday_date)
        return ok({"date": holiday_date})
