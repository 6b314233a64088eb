from __future__ import annotations

from flask import Flask, request

from ..common.http import ok, serialize
from ..common.session import admin_required, current_role, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.wallet_service

    @app.route("/api/wallet", methods=["GET"], endpoint="my_wallet")
    @login_required
    def my_wallet():
        user_id = current_user_id()
        return ok(
            {
                "balance": str(svc.balance(user_id)),
                "transactions": serialize(list(svc.history(user_id))),
            }
        )

    @app.route("/api/admin/wallet/<int:freelancer_id>/payouts", methods=["POST"], endpoint="wallet_payout")
    @admin_required
    def payout(freelancer_id: int):
        payload = request.get_json(silent=True) or {}
        txn = svc.payout(
            current_role=current_role(),
            freelancer_id=freelancer_id,
            amount=payload.get("amount"),
            description=payload.get("description") or "",
        )
        return ok(serialize(txn), status=201)

    @app.route("/api/admin/wallet/reconcile", methods=["POST"], endpoint="wallet_reconcile")
    @admin_required
    def reconcile():
        payload = request.get_json(silent=True) or {}
        results = svc.reconcile_all(current_role=current_role(), fix=bool(payload.get("fix")))
        return ok(
            [
                {**serialize(r), "drift": str(r.drift), "in_sync": r.in_sync}
                for r in results
            ]
        )
