from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Mapping, Optional

from ..attendance.service import AttendanceRecorder
from ..common.datetime_utils import at_local_time, now_utc, session_id_for, to_local
from ..core.constants import SYSTEM_SCHEDULER
from ..core.enums import AttendanceStatus, SessionStatus, SessionType
from ..core.exceptions import ValidationError
from ..users.repository import EmployeeRepository
from .model import SessionCalendar, TransitionResult
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionScheduler:
    """Time-triggered session state machine: scheduled -> active -> ended.

    Every transition checks its own precondition and is a no-op otherwise, so
    a trigger that fires twice is harmless.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        employees: EmployeeRepository,
        recorder: AttendanceRecorder,
        *,
        calendars: Mapping[SessionType, SessionCalendar],
        time_zone: str,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._employees = employees
        self._recorder = recorder
        self._calendars = dict(calendars)
        self._tz = time_zone
        self._clock = clock

    def today(self) -> date:
        return to_local(self._clock(), self._tz).date()

    def _resolve_id(self, session_id: Optional[str]) -> str:
        return session_id or session_id_for(self.today())

    def schedule(
        self,
        session_type: SessionType,
        day: Optional[date] = None,
        *,
        at: Optional[time] = None,
        scheduled_by: str = SYSTEM_SCHEDULER,
        respect_calendar: bool = True,
    ) -> TransitionResult:
        day = day or self.today()
        session_id = session_id_for(day)
        calendar = self._calendars[session_type]

        if respect_calendar and not calendar.is_working_day(day.weekday()):
            logger.info(
                "Skipping scheduling on a non-working day",
                extra={"session_type": session_type.value, "session_id": session_id},
            )
            return TransitionResult(session_id, False, None, f"{day:%A} is not a working day.")

        existing = self._sessions.get(session_type, session_id)
        if existing and existing.status != SessionStatus.SCHEDULED:
            return TransitionResult(
                session_id, False, existing.status, f"Session is already {existing.status.value}."
            )

        scheduled_time = at_local_time(day, at or calendar.start, self._tz)
        if not respect_calendar and scheduled_time < self._clock().replace(second=0, microsecond=0):
            raise ValidationError("Cannot schedule in the past.")

        self._sessions.save_scheduled(
            session_type,
            session_id,
            scheduled_time=scheduled_time,
            scheduled_by=scheduled_by,
        )
        logger.info(
            "Session scheduled",
            extra={"session_type": session_type.value, "session_id": session_id},
        )
        return TransitionResult(
            session_id, True, SessionStatus.SCHEDULED, f"Session scheduled for {scheduled_time:%Y-%m-%d %H:%M}."
        )

    def activate(self, session_type: SessionType, session_id: Optional[str] = None) -> TransitionResult:
        session_id = self._resolve_id(session_id)
        session = self._sessions.get(session_type, session_id)
        if not session:
            return TransitionResult(session_id, False, None, "No session to start.")
        if session.status != SessionStatus.SCHEDULED:
            return TransitionResult(session_id, False, session.status, f"Session is already {session.status.value}.")

        roster = {emp.uid: AttendanceStatus.MISSED for emp in self._employees.list_active()}
        self._sessions.activate(session_type, session_id, started_at=self._clock(), temp_attendance=roster)
        logger.info(
            "Session started",
            extra={"session_type": session_type.value, "session_id": session_id, "count": len(roster)},
        )
        return TransitionResult(session_id, True, SessionStatus.ACTIVE, "Session started.")

    def end(self, session_type: SessionType, session_id: Optional[str] = None) -> TransitionResult:
        session_id = self._resolve_id(session_id)
        session = self._sessions.get(session_type, session_id)
        if not session:
            return TransitionResult(session_id, False, None, "No session to end.")
        if session.status != SessionStatus.ACTIVE:
            return TransitionResult(session_id, False, session.status, f"Session is {session.status.value}, not active.")

        result = self._recorder.finalize_session(session, end_session=True)
        logger.info(
            "Session ended",
            extra={"session_type": session_type.value, "session_id": session_id},
        )
        return TransitionResult(
            session_id, True, SessionStatus.ENDED, f"Session ended; {result.records_written} attendance records saved."
        )
