from __future__ import annotations

from datetime import datetime

from flask import Flask

from ..common.callable import callable_route
from ..common.datetime_utils import parse_iso_date
from ..common.schemas import ScheduleSessionRequest, SessionRefRequest
from ..common.validators import validate_input
from ..container import Container
from ..core.exceptions import FailedPreconditionError, NotFoundError
from .model import TransitionResult


def _require_applied(result: TransitionResult) -> dict:
    """An explicitly requested transition that did not apply is an error."""
    if result.applied:
        return result.to_dict()
    if result.status is None:
        raise NotFoundError(f"No session found for {result.session_id}.")
    raise FailedPreconditionError(result.message)


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    scheduler = container.session_scheduler

    @callable_route(app, auth, "scheduleSession")
    def schedule_session(caller, data):
        req = validate_input(ScheduleSessionRequest, data)
        result = scheduler.schedule(
            req.session_type,
            parse_iso_date(req.date),
            at=datetime.strptime(req.time, "%H:%M").time(),
            scheduled_by=str(caller.claims.get("name") or caller.uid),
            respect_calendar=False,
        )
        if not result.applied:
            raise FailedPreconditionError(result.message)
        return result.to_dict()

    @callable_route(app, auth, "startSession")
    def start_session(caller, data):
        req = validate_input(SessionRefRequest, data)
        return _require_applied(scheduler.activate(req.session_type, req.session_id))

    @callable_route(app, auth, "endSession")
    def end_session(caller, data):
        req = validate_input(SessionRefRequest, data)
        return _require_applied(scheduler.end(req.session_type, req.session_id))
