from __future__ import annotations

from google.api_core.exceptions import ServiceUnavailable

from src.nxtprof.nxtprof.attendance.model import AttendanceRecord
from src.nxtprof.nxtprof.core.enums import AttendanceStatus, SessionStatus, SessionType
from src.nxtprof.nxtprof.core.exceptions import ValidationError
from src.nxtprof.nxtprof.sessions.model import Session

DAY = "2026-03-02"


def test_daily_standup_cycle(app, sessions, attendance):
    runner = app.test_cli_runner()

    assert runner.invoke(args=["schedule-session", "standups"]).exit_code == 0
    assert runner.invoke(args=["activate-session", "standups"]).exit_code == 0
    result = runner.invoke(args=["end-session", "standups"])

    assert result.exit_code == 0
    assert sessions.get(SessionType.STANDUPS, DAY).status == SessionStatus.ENDED
    assert {r.status for r in attendance.list_for_session(SessionType.STANDUPS, DAY)} == {AttendanceStatus.MISSED}


def test_schedule_on_sunday_does_nothing(app, sessions):
    result = app.test_cli_runner().invoke(args=["schedule-session", "standups", "--date", "2026-03-01"])

    assert result.exit_code == 0
    assert sessions.get(SessionType.STANDUPS, "2026-03-01") is None


def test_sync_attendance_runs_both_session_types(app, attendance, attendance_book):
    for st in SessionType:
        attendance.add(
            AttendanceRecord(
                session_type=st,
                session_id=DAY,
                employee_uid="u-1",
                employee_id="1001",
                employee_name="Ravi",
                employee_email="ravi@example.com",
                status=AttendanceStatus.PRESENT,
            )
        )

    result = app.test_cli_runner().invoke(args=["sync-attendance"])

    assert result.exit_code == 0
    assert len(attendance_book.data_rows("Standups")) == 1
    assert len(attendance_book.data_rows("Learning Hours")) == 1


def test_sync_learning_points_failure_exits_non_zero(app, sessions):
    sessions.put(Session(session_type=SessionType.LEARNING_HOURS, session_id=DAY, status=SessionStatus.ACTIVE))

    result = app.test_cli_runner().invoke(args=["sync-learning-points", "--date", DAY])

    assert result.exit_code == 1
    assert sessions.get(SessionType.LEARNING_HOURS, DAY).synced is False


def _present(session_type):
    return AttendanceRecord(
        session_type=session_type,
        session_id=DAY,
        employee_uid="u-1",
        employee_id="1001",
        employee_name="Ravi",
        employee_email="ravi@example.com",
        status=AttendanceStatus.PRESENT,
    )


def test_store_outage_for_one_type_does_not_skip_the_other(app, attendance, attendance_book, monkeypatch):
    attendance.add(_present(SessionType.LEARNING_HOURS))
    list_for_session = attendance.list_for_session

    def flaky(session_type, session_id):
        if session_type == SessionType.STANDUPS:
            raise ServiceUnavailable("firestore down")
        return list_for_session(session_type, session_id)

    monkeypatch.setattr(attendance, "list_for_session", flaky)

    result = app.test_cli_runner().invoke(args=["sync-attendance", "--date", DAY])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ServiceUnavailable)
    assert len(attendance_book.data_rows("Learning Hours")) == 1


def test_unexpected_learning_sync_error_exits_non_zero(app, sessions, monkeypatch):
    def boom(session_type, session_id):
        raise ServiceUnavailable("firestore down")

    monkeypatch.setattr(sessions, "get", boom)

    result = app.test_cli_runner().invoke(args=["sync-learning-points", "--date", DAY])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ServiceUnavailable)


def test_bad_date_exits_non_zero_without_touching_the_sheet(app, sheets):
    result = app.test_cli_runner().invoke(args=["sync-attendance", "--date", "03/02/2026"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValidationError)
    assert sheets.opened == []


def test_end_session_without_a_session_is_a_noop(app):
    result = app.test_cli_runner().invoke(args=["end-session", "standups", "--date", DAY])

    assert result.exit_code == 0
    assert "No session to end." in result.output
