from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Mapping, Optional

from ..core.enums import AttendanceStatus, SessionStatus, SessionType


@dataclass(frozen=True)
class Session:
    """Thực thể miền (domain): Phiên standup / learning hour của một ngày."""

    session_type: SessionType
    session_id: str
    status: SessionStatus
    scheduled_time: Optional[datetime] = None
    scheduled_by: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    temp_attendance: Mapping[str, AttendanceStatus] = field(default_factory=dict)
    absence_reasons: Mapping[str, str] = field(default_factory=dict)
    synced: bool = False
    synced_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionCalendar:
    """When a session type runs: start clock time and working weekdays.

    ``working_days`` uses ``date.weekday()`` numbering (Monday=0).
    """

    start: time
    working_days: frozenset[int] = frozenset({0, 1, 2, 3, 4, 5})

    def is_working_day(self, weekday: int) -> bool:
        return weekday in self.working_days


@dataclass(frozen=True)
class TransitionResult:
    session_id: str
    applied: bool
    status: Optional[SessionStatus]
    message: str

    def to_dict(self) -> dict:
        return {
            "success": True,
            "sessionId": self.session_id,
            "applied": self.applied,
            "status": self.status.value if self.status else None,
            "message": self.message,
        }
