from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from google.cloud import firestore

from ..core.constants import SESSION_COLLECTIONS
from ..core.enums import AttendanceStatus, SessionStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.firestore_base import get_dict, normalize_timestamp
from .model import Session
from .repository import SessionRepository


def _to_session(session_type: SessionType, r: Dict[str, Any]) -> Session:
    return Session(
        session_type=session_type,
        session_id=r["id"],
        status=SessionStatus(r.get("status")),
        scheduled_time=normalize_timestamp(r.get("scheduledTime")),
        scheduled_by=r.get("scheduledBy"),
        started_at=normalize_timestamp(r.get("startedAt")),
        ended_at=normalize_timestamp(r.get("endedAt")),
        temp_attendance={uid: AttendanceStatus(s) for uid, s in (r.get("tempAttendance") or {}).items()},
        absence_reasons=dict(r.get("absenceReasons") or {}),
        synced=r.get("synced") is True,
        synced_at=normalize_timestamp(r.get("syncedAt")),
    )


class FirestoreSessionRepository(SessionRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    def _ref(self, session_type: SessionType, session_id: str):
        return self._conn.client().collection(SESSION_COLLECTIONS[session_type]).document(session_id)

    def get(self, session_type: SessionType, session_id: str) -> Optional[Session]:
        r = get_dict(self._ref(session_type, session_id))
        return _to_session(session_type, r) if r else None

    def save_scheduled(
        self,
        session_type: SessionType,
        session_id: str,
        *,
        scheduled_time: datetime,
        scheduled_by: str,
    ) -> None:
        self._ref(session_type, session_id).set(
            {
                "status": SessionStatus.SCHEDULED.value,
                "scheduledTime": scheduled_time,
                "scheduledBy": scheduled_by,
            }
        )

    def activate(
        self,
        session_type: SessionType,
        session_id: str,
        *,
        started_at: datetime,
        temp_attendance: Mapping[str, AttendanceStatus],
    ) -> None:
        self._ref(session_type, session_id).update(
            {
                "status": SessionStatus.ACTIVE.value,
                "startedAt": started_at,
                "tempAttendance": {uid: s.value for uid, s in temp_attendance.items()},
                "absenceReasons": {},
            }
        )

    def mark_attendance(
        self,
        session_type: SessionType,
        session_id: str,
        *,
        employee_uid: str,
        status: AttendanceStatus,
        reason: Optional[str] = None,
    ) -> None:
        field_path = firestore.Client.field_path
        self._ref(session_type, session_id).update(
            {
                field_path("tempAttendance", employee_uid): status.value,
                field_path("absenceReasons", employee_uid): reason if reason else firestore.DELETE_FIELD,
            }
        )

    def mark_synced(self, session_id: str, *, synced_at: datetime) -> None:
        self._ref(SessionType.LEARNING_HOURS, session_id).update({"synced": True, "syncedAt": synced_at})
