from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.constants import (
    ATTENDANCE_COLLECTIONS,
    ATTENDANCE_SESSION_FIELDS,
    LEARNING_POINTS_COLLECTION,
    SESSION_COLLECTIONS,
)
from ..core.enums import AttendanceStatus, SessionStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.firestore_base import (
    check_batch_size,
    normalize_timestamp,
    stream_dicts,
    where_equals,
    write_batch,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _to_record(session_type: SessionType, r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        session_type=session_type,
        session_id=r.get(ATTENDANCE_SESSION_FIELDS[session_type]) or "",
        employee_uid=r.get("employee_id") or "",
        employee_id=r.get("employeeId"),
        employee_name=r.get("employee_name") or "",
        employee_email=r.get("employee_email") or "",
        status=AttendanceStatus(r["status"]),
        reason=r.get("reason"),
        scheduled_at=normalize_timestamp(r.get("scheduled_at")),
        marked_at=normalize_timestamp(r.get("markedAt")),
    )


class FirestoreAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    def list_for_session(self, session_type: SessionType, session_id: str) -> Sequence[AttendanceRecord]:
        query = where_equals(
            self._conn.client().collection(ATTENDANCE_COLLECTIONS[session_type]),
            **{ATTENDANCE_SESSION_FIELDS[session_type]: session_id},
        )
        return [_to_record(session_type, r) for r in stream_dicts(query)]

    def finalize_session(
        self,
        session_type: SessionType,
        session_id: str,
        records: Sequence[AttendanceRecord],
        *,
        ended_at: Optional[datetime] = None,
        lock_learning_points: bool = False,
    ) -> None:
        client = self._conn.client()
        attendance = client.collection(ATTENDANCE_COLLECTIONS[session_type])

        point_refs = []
        if lock_learning_points:
            query = where_equals(client.collection(LEARNING_POINTS_COLLECTION), sessionId=session_id)
            point_refs = [snap.reference for snap in query.stream()]

        writes = len(records) + (1 if ended_at is not None else 0) + len(point_refs)
        check_batch_size(writes, f"finalize {session_type.value} session {session_id}")
        logger.info(
            "Committing attendance batch",
            extra={"session_type": session_type.value, "session_id": session_id, "count": writes},
        )

        with write_batch(self._conn) as batch:
            for rec in records:
                batch.set(attendance.document(rec.doc_id), rec.to_document())

            if ended_at is not None:
                batch.update(
                    client.collection(SESSION_COLLECTIONS[session_type]).document(session_id),
                    {
                        "status": SessionStatus.ENDED.value,
                        "endedAt": ended_at,
                        "tempAttendance": {r.employee_uid: r.status.value for r in records},
                        "absenceReasons": {r.employee_uid: r.reason for r in records if r.reason},
                    },
                )

            for ref in point_refs:
                batch.update(ref, {"editable": False})
