from __future__ import annotations

from enum import Enum


class SessionType(str, Enum):
    """Loại phiên họp hằng ngày; giá trị trùng tên collection phiên."""

    STANDUPS = "standups"
    LEARNING_HOURS = "learning_hours"


class SessionStatus(str, Enum):
    """Vòng đời phiên: chỉ đi một chiều scheduled -> active -> ended."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    ENDED = "ended"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    MISSED = "Missed"
    NOT_AVAILABLE = "Not Available"
