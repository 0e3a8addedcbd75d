from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import NO_REASON_PROVIDED
from ..core.enums import AttendanceStatus, SessionStatus, SessionType
from ..core.exceptions import FailedPreconditionError, NotFoundError, ValidationError
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .model import AttendanceRecord, FinalizeResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def build_records(
    session: Session,
    roster: Sequence[Employee],
    *,
    marked_at: datetime,
) -> list[AttendanceRecord]:
    """One record per roster employee from the session's live attendance.

    Unmarked employees default to Missed; Not Available without a saved
    reason gets a placeholder so closing a session never blocks on free text.
    """

    records: list[AttendanceRecord] = []
    for emp in roster:
        status = session.temp_attendance.get(emp.uid, AttendanceStatus.MISSED)
        reason = None
        if status == AttendanceStatus.NOT_AVAILABLE:
            reason = (session.absence_reasons.get(emp.uid) or "").strip() or NO_REASON_PROVIDED
        records.append(
            AttendanceRecord(
                session_type=session.session_type,
                session_id=session.session_id,
                employee_uid=emp.uid,
                employee_id=emp.employee_id,
                employee_name=emp.name,
                employee_email=emp.email,
                status=status,
                reason=reason,
                scheduled_at=session.scheduled_time,
                marked_at=marked_at,
            )
        )
    return records


class AttendanceRecorder:
    def __init__(
        self,
        sessions: SessionRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._employees = employees
        self._attendance = attendance
        self._clock = clock

    def _get_session(self, session_type: SessionType, session_id: str) -> Session:
        session = self._sessions.get(session_type, session_id)
        if not session:
            raise NotFoundError(f"No {session_type.value} session found for {session_id}.")
        return session

    def mark(
        self,
        *,
        session_type: SessionType,
        session_id: str,
        employee_uid: str,
        status: AttendanceStatus,
        reason: Optional[str] = None,
    ) -> None:
        session = self._get_session(session_type, session_id)
        if session.status != SessionStatus.ACTIVE:
            raise FailedPreconditionError("Attendance can only be marked while the session is active.")

        emp = self._employees.get_by_uid(employee_uid)
        if not emp or emp.archived:
            raise NotFoundError("Employee not found.")

        if status == AttendanceStatus.NOT_AVAILABLE:
            if reason is not None and not reason.strip():
                raise ValidationError("Reason is required.")
            reason = reason.strip() if reason else None
        else:
            reason = None

        self._sessions.mark_attendance(
            session_type,
            session_id,
            employee_uid=employee_uid,
            status=status,
            reason=reason,
        )

    def finalize_session(self, session: Session, *, end_session: bool = True) -> FinalizeResult:
        """Materialize the records of ``session`` in a single batch write.

        The caller is responsible for checking the session status.
        """

        roster = self._employees.list_active()
        now = self._clock()
        records = build_records(session, roster, marked_at=now)
        ending = end_session and session.status == SessionStatus.ACTIVE

        self._attendance.finalize_session(
            session.session_type,
            session.session_id,
            records,
            ended_at=now if ending else None,
            lock_learning_points=ending and session.session_type == SessionType.LEARNING_HOURS,
        )
        logger.info(
            "Attendance finalized",
            extra={
                "session_type": session.session_type.value,
                "session_id": session.session_id,
                "count": len(records),
            },
        )
        return FinalizeResult(session_id=session.session_id, records_written=len(records), ended=ending)

    def finalize(self, *, session_type: SessionType, session_id: str, end_session: bool = True) -> FinalizeResult:
        session = self._get_session(session_type, session_id)
        if session.status == SessionStatus.SCHEDULED:
            raise FailedPreconditionError("Session has not started yet.")
        return self.finalize_session(session, end_session=end_session)

    def stats(self, *, session_type: SessionType, session_id: str) -> Mapping[str, int]:
        session = self._get_session(session_type, session_id)
        values = list(session.temp_attendance.values())
        return {
            "total": len(self._employees.list_active()),
            "present": values.count(AttendanceStatus.PRESENT),
            "absent": values.count(AttendanceStatus.ABSENT),
            "missed": values.count(AttendanceStatus.MISSED),
            "notAvailable": values.count(AttendanceStatus.NOT_AVAILABLE),
        }
