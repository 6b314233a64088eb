from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, serialize
from ..common.session import admin_required, current_role, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.task_service

    @app.route("/api/tasks", methods=["GET"], endpoint="my_tasks")
    @login_required
    def my_tasks():
        return ok(serialize(list(svc.list_mine(current_user_id()))))

    @app.route("/api/tasks/<int:task_id>/submit", methods=["POST"], endpoint="submit_task")
    @login_required
    def submit_task(task_id: int):
        return ok(serialize(svc.submit(current_user_id=current_user_id(), task_id=task_id)))

    @app.route("/api/admin/tasks", methods=["POST"], endpoint="create_task")
    @admin_required
    def create_task():
        payload = request.get_json(silent=True) or {}
        task_id = svc.create(
            current_role=current_role(),
            created_by=current_user_id(),
            title=payload.get("title") or "",
            description=payload.get("description") or "",
            assignee_id=payload.get("assignee_id"),
            payment_amount=payload.get("payment_amount"),
        )
        return ok({"task_id": task_id}, status=201)

    @app.route("/api/admin/tasks/<int:task_id>/review", methods=["POST"], endpoint="review_task")
    @admin_required
    def review_task(task_id: int):
        payload = request.get_json(silent=True) or {}
        task = svc.review(
            current_role=current_role(),
            task_id=task_id,
            decision=payload.get("decision"),
            feedback=payload.get("feedback") or "",
        )
        return ok(serialize(task))

    @app.route("/api/admin/tasks/<int:task_id>/status", methods=["PUT"], endpoint="set_task_status")
    @admin_required
    def set_task_status(task_id: int):
        payload = request.get_json(silent=True) or {}
        return ok(serialize(svc.set_status(current_role=current_role(), task_id=task_id, status=payload.get("status"))))
