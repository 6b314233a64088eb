from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, serialize
from ..common.session import admin_required, current_role, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        payload = request.get_json(silent=True) or {}
        ids = svc.submit(
            current_role=current_role(),
            user_id=current_user_id(),
            dates=payload.get("dates") or [],
            reason=payload.get("reason") or "",
            will_work_sunday=bool(payload.get("will_work_sunday")),
            is_paid_leave=bool(payload.get("is_paid_leave")),
        )
        return ok({"request_ids": ids}, status=201)

    @app.route("/api/admin/leaves", methods=["GET"], endpoint="pending_leaves")
    @admin_required
    def pending_leaves():
        limit = request.args.get("limit", default=200, type=int)
        return ok(serialize(list(svc.list_pending(current_role=current_role(), limit=limit))))

    @app.route("/api/admin/leaves/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @admin_required
    def approve_leave(request_id: int):
        payload = request.get_json(silent=True) or {}
        approved = svc.approve(
            current_role=current_role(),
            request_id=request_id,
            paid_override=bool(payload.get("paid")),
        )
        return ok(serialize(approved))

    @app.route("/api/admin/leaves/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @admin_required
    def reject_leave(request_id: int):
        svc.reject(current_role=current_role(), request_id=request_id)
        return ok({"request_id": request_id, "status": "Rejected"})
