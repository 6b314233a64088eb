from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError


def ok(data=None, status=200, **meta):
    payload = {"success": True, "data": data}
    if meta:
        payload["meta"] = meta
    return jsonify(payload), status


def fail(message="Bad Request", status=400, code=None, detail=None):
    err = {"message": message}
    if code:
        err["code"] = code
    if detail:
        err["detail"] = detail
    return jsonify({"success": False, "error": err}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), status=400, code="VALIDATION_ERROR")

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e), status=403, code="FORBIDDEN")

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), status=404, code="NOT_FOUND")

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), status=409, code="DOMAIN_ERROR")

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)


def serialize(value):
    """Dataclasses, Decimals, dates and enums to JSON-friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value
