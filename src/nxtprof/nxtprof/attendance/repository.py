from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_session(self, session_type: SessionType, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def finalize_session(
        self,
        session_type: SessionType,
        session_id: str,
        records: Sequence[AttendanceRecord],
        *,
        ended_at: Optional[datetime] = None,
        lock_learning_points: bool = False,
    ) -> None:
        """Write all records in one atomic batch.

        Records are upserted by ``AttendanceRecord.doc_id``. When ``ended_at``
        is given the same batch flips the session to ended and reconciles its
        live attendance maps with the written records; ``lock_learning_points``
        also sets ``editable=False`` on the session's learning points.
        """

        raise NotImplementedError
