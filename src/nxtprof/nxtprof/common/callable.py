"""Callable-function plumbing on top of Flask.

Requests are ``POST {"data": {...}}`` with a Firebase ID token in the
``Authorization: Bearer`` header. Responses are ``{"result": ...}`` or
``{"error": {"status": ..., "message": ...}}`` with the matching HTTP code.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError
from ..users.model import Caller
from ..users.service import AuthService

logger = logging.getLogger(__name__)

CallableView = Callable[[Caller, Any], Any]


def error_payload(status: str, message: str) -> dict:
    return {"error": {"status": status, "message": message}}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify(error_payload(e.code, str(e))), e.http_status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error in callable", extra={"path": request.path})
        return jsonify(error_payload("INTERNAL", "An unexpected error occurred.")), 500


def callable_route(
    app: Flask,
    auth: AuthService,
    name: str,
    *,
    admin_only: bool = True,
    denied_message: str = "Must be an admin to run this operation.",
) -> Callable[[CallableView], CallableView]:
    """Register ``view(caller, data)`` as the callable ``/<name>``.

    Authentication and the admin check run before the view body, so a
    rejected caller never reaches the store or the spreadsheet.
    """

    def decorator(view: CallableView) -> CallableView:
        @wraps(view)
        def wrapper():
            caller = auth.authenticate(request.headers.get("Authorization"))
            if admin_only:
                auth.require_admin(caller, denied_message)

            body = request.get_json(silent=True)
            data = body.get("data") if isinstance(body, dict) else None
            return jsonify({"result": view(caller, data)})

        app.add_url_rule(f"/{name}", endpoint=name, view_func=wrapper, methods=["POST"])
        return view

    return decorator
