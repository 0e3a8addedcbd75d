from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Sequence

from ..core.constants import LEARNING_POINTS_COLLECTION, SESSION_COLLECTIONS
from ..core.enums import SessionStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.firestore_base import check_batch_size, normalize_timestamp, where_equals, write_batch
from .model import LearningPoint
from .repository import LearningPointRepository


def _text(r: Dict[str, Any], key: str) -> str:
    value = r.get(key)
    return "" if value is None else str(value)


def _to_point(point_id: str, r: Dict[str, Any]) -> LearningPoint:
    return LearningPoint(
        point_id=point_id,
        session_id=_text(r, "sessionId"),
        user_id=_text(r, "userId"),
        task_name=_text(r, "task_name"),
        framework_category=_text(r, "framework_category"),
        subcategory=_text(r, "subcategory"),
        point_type=_text(r, "point_type"),
        recipient=_text(r, "recipient"),
        situation=_text(r, "situation"),
        behavior=_text(r, "behavior"),
        impact=_text(r, "impact"),
        action_item=_text(r, "action_item"),
        date=normalize_timestamp(r.get("date")),
        created_at=normalize_timestamp(r.get("createdAt")),
        editable=r.get("editable") is not False,
    )


class FirestoreLearningPointRepository(LearningPointRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    def _query(self, session_id: str):
        return where_equals(self._conn.client().collection(LEARNING_POINTS_COLLECTION), sessionId=session_id)

    def list_for_session(self, session_id: str, *, locked_only: bool = False) -> Sequence[LearningPoint]:
        query = self._query(session_id)
        if locked_only:
            query = where_equals(query, editable=False)
        return [_to_point(snap.id, snap.to_dict() or {}) for snap in query.stream()]

    def lock_and_end_session(self, session_id: str, *, ended_at: datetime) -> int:
        client = self._conn.client()
        refs = [snap.reference for snap in self._query(session_id).stream()]
        check_batch_size(len(refs) + 1, f"lock points of learning session {session_id}")

        with write_batch(self._conn) as batch:
            for ref in refs:
                batch.update(ref, {"editable": False})
            batch.update(
                client.collection(SESSION_COLLECTIONS[SessionType.LEARNING_HOURS]).document(session_id),
                {"status": SessionStatus.ENDED.value, "endedAt": ended_at},
            )
        return len(refs)
