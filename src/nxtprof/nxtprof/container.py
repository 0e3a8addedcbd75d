from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Callable, Mapping, Optional

from .attendance.firestore_attendance_repository import FirestoreAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceRecorder
from .common.datetime_utils import now_utc
from .core.constants import DEFAULT_TIME_ZONE
from .core.enums import SessionType
from .database.connection import DatabaseConnection, FirestoreConfig
from .learning.firestore_learning_point_repository import FirestoreLearningPointRepository
from .learning.repository import LearningPointRepository
from .learning.service import LearningSessionService
from .sessions.firestore_session_repository import FirestoreSessionRepository
from .sessions.model import SessionCalendar
from .sessions.repository import SessionRepository
from .sessions.service import SessionScheduler
from .sheets.gateway import SpreadsheetGatewayFactory
from .sheets.gspread_gateway import GspreadGatewayFactory
from .sync.attendance_sync import AttendanceSyncEngine
from .sync.learning_points_sync import LearningPointSyncEngine
from .users.firestore_employee_repository import FirestoreEmployeeRepository
from .users.repository import EmployeeRepository
from .users.service import AuthService, TokenVerifier, firebase_token_verifier

DEFAULT_SESSION_TIMES = {
    SessionType.STANDUPS.value: {"start": "09:00"},
    SessionType.LEARNING_HOURS.value: {"start": "17:00"},
}


@dataclass(frozen=True)
class Container:
    time_zone: str

    employees_repo: EmployeeRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository
    points_repo: LearningPointRepository

    auth_service: AuthService
    attendance_recorder: AttendanceRecorder
    session_scheduler: SessionScheduler
    learning_service: LearningSessionService
    attendance_sync: AttendanceSyncEngine
    learning_sync: LearningPointSyncEngine


def _parse_clock(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def session_calendars(session_times: Optional[Mapping[str, Any]] = None) -> dict[SessionType, SessionCalendar]:
    merged = {**DEFAULT_SESSION_TIMES, **(session_times or {})}
    calendars = {}
    for session_type in SessionType:
        cfg = merged[session_type.value]
        calendars[session_type] = SessionCalendar(
            start=_parse_clock(cfg["start"]),
            working_days=frozenset(cfg.get("days", (0, 1, 2, 3, 4, 5))),
        )
    return calendars


def wire_container(
    settings: Mapping[str, Any],
    *,
    employees_repo: EmployeeRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    points_repo: LearningPointRepository,
    sheets: SpreadsheetGatewayFactory,
    verifier: TokenVerifier,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    time_zone = str(settings.get("TIME_ZONE") or DEFAULT_TIME_ZONE)
    tab_titles = {
        SessionType(k): v for k, v in (settings.get("ATTENDANCE_TAB_TITLES") or {}).items() if v
    }

    auth_service = AuthService(verifier)
    attendance_recorder = AttendanceRecorder(sessions_repo, employees_repo, attendance_repo, clock=clock)
    session_scheduler = SessionScheduler(
        sessions_repo,
        employees_repo,
        attendance_recorder,
        calendars=session_calendars(settings.get("SESSION_TIMES")),
        time_zone=time_zone,
        clock=clock,
    )
    learning_service = LearningSessionService(sessions_repo, points_repo, clock=clock)
    attendance_sync = AttendanceSyncEngine(
        attendance_repo,
        sheets,
        spreadsheet_id=str(settings.get("ATTENDANCE_SPREADSHEET_ID") or ""),
        time_zone=time_zone,
        tab_titles=tab_titles,
    )
    learning_sync = LearningPointSyncEngine(
        sessions_repo,
        points_repo,
        employees_repo,
        sheets,
        spreadsheet_id=str(settings.get("LEARNING_HOURS_SPREADSHEET_ID") or ""),
        time_zone=time_zone,
        clock=clock,
    )

    return Container(
        time_zone=time_zone,
        employees_repo=employees_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        points_repo=points_repo,
        auth_service=auth_service,
        attendance_recorder=attendance_recorder,
        session_scheduler=session_scheduler,
        learning_service=learning_service,
        attendance_sync=attendance_sync,
        learning_sync=learning_sync,
    )


def build_container(settings: Mapping[str, Any]) -> Container:
    firestore_config = settings.get("FIRESTORE_CONFIG") or {}
    conn = DatabaseConnection(
        FirestoreConfig(
            project=firestore_config.get("project"),
            database=str(firestore_config.get("database") or "(default)"),
            emulator_host=firestore_config.get("emulator_host"),
        )
    )

    return wire_container(
        settings,
        employees_repo=FirestoreEmployeeRepository(conn),
        sessions_repo=FirestoreSessionRepository(conn),
        attendance_repo=FirestoreAttendanceRepository(conn),
        points_repo=FirestoreLearningPointRepository(conn),
        sheets=GspreadGatewayFactory(str(settings.get("SHEETS_SA_KEY_ENV") or "SHEETS_SA_KEY")),
        verifier=firebase_token_verifier(settings.get("FIREBASE_PROJECT_ID") or firestore_config.get("project")),
    )
