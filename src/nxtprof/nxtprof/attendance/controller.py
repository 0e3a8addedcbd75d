from __future__ import annotations

from flask import Flask

from ..common.callable import callable_route
from ..common.schemas import MarkAttendanceRequest, SessionRefRequest
from ..common.validators import validate_input
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    recorder = container.attendance_recorder

    @callable_route(app, auth, "markAttendance")
    def mark_attendance(caller, data):
        req = validate_input(MarkAttendanceRequest, data)
        recorder.mark(
            session_type=req.session_type,
            session_id=req.session_id,
            employee_uid=req.employee_uid,
            status=req.status,
            reason=req.reason,
        )
        return {"success": True, "message": f"Marked {req.status.value}."}

    @callable_route(app, auth, "finalizeAttendance")
    def finalize_attendance(caller, data):
        req = validate_input(SessionRefRequest, data)
        return recorder.finalize(session_type=req.session_type, session_id=req.session_id).to_dict()

    @callable_route(app, auth, "getSessionStats", admin_only=False)
    def get_session_stats(caller, data):
        req = validate_input(SessionRefRequest, data)
        return dict(recorder.stats(session_type=req.session_type, session_id=req.session_id))
