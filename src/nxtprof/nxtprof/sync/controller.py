from __future__ import annotations

from flask import Flask

from ..common.callable import callable_route
from ..common.schemas import SessionIdRequest, SyncToSheetRequest
from ..common.validators import validate_input
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @callable_route(app, auth, "syncAttendanceToSheet")
    def sync_attendance_to_sheet(caller, data):
        req = validate_input(SyncToSheetRequest, data)
        return container.attendance_sync.sync(req.date, req.session_type).to_dict()

    @callable_route(app, auth, "syncLearningPointsToSheet", denied_message="Only admins may run this sync.")
    def sync_learning_points_to_sheet(caller, data):
        req = validate_input(SessionIdRequest, data)
        return container.learning_sync.sync(req.session_id).to_dict()
