from __future__ import annotations

from flask import Flask

from ..common.callable import callable_route
from ..common.schemas import SessionIdRequest
from ..common.validators import validate_input
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @callable_route(app, auth, "endLearningSessionAndLockPoints", denied_message="Only admins can end a session.")
    def end_learning_session_and_lock_points(caller, data):
        req = validate_input(SessionIdRequest, data)
        return container.learning_service.end_session_and_lock_points(req.session_id)

    @callable_route(app, auth, "getSessionLearningPoints")
    def get_session_learning_points(caller, data):
        req = validate_input(SessionIdRequest, data)
        points = container.learning_service.list_session_points(req.session_id)
        return {"points": [p.to_dict() for p in points]}
