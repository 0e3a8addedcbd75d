from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol

from ..core.enums import AttendanceStatus, SessionType
from .model import Session


class SessionRepository(Protocol):
    def get(self, session_type: SessionType, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def save_scheduled(
        self,
        session_type: SessionType,
        session_id: str,
        *,
        scheduled_time: datetime,
        scheduled_by: str,
    ) -> None:
        """Create (or overwrite) the session document with status=scheduled."""

        raise NotImplementedError

    def activate(
        self,
        session_type: SessionType,
        session_id: str,
        *,
        started_at: datetime,
        temp_attendance: Mapping[str, AttendanceStatus],
    ) -> None:
        raise NotImplementedError

    def mark_attendance(
        self,
        session_type: SessionType,
        session_id: str,
        *,
        employee_uid: str,
        status: AttendanceStatus,
        reason: Optional[str] = None,
    ) -> None:
        """Update one entry of the live attendance maps (last write wins)."""

        raise NotImplementedError

    def mark_synced(self, session_id: str, *, synced_at: datetime) -> None:
        """Flag a learning-hour session as exported to the spreadsheet."""

        raise NotImplementedError
