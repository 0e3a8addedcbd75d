from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.constants import ATTENDANCE_SESSION_FIELDS
from ..core.enums import AttendanceStatus, SessionType


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh của một nhân viên trong một phiên."""

    session_type: SessionType
    session_id: str
    employee_uid: str
    employee_id: Optional[str]
    employee_name: str
    employee_email: str
    status: AttendanceStatus
    reason: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    marked_at: Optional[datetime] = None

    @property
    def doc_id(self) -> str:
        return f"{self.session_id}_{self.employee_uid}"

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            ATTENDANCE_SESSION_FIELDS[self.session_type]: self.session_id,
            "employee_id": self.employee_uid,
            "employeeId": self.employee_id,
            "employee_name": self.employee_name,
            "employee_email": self.employee_email,
            "status": self.status.value,
            "scheduled_at": self.scheduled_at,
            "markedAt": self.marked_at,
        }
        if self.status == AttendanceStatus.NOT_AVAILABLE:
            doc["reason"] = self.reason
        return doc


@dataclass(frozen=True)
class FinalizeResult:
    session_id: str
    records_written: int
    ended: bool

    def to_dict(self) -> dict:
        verb = "saved and session ended" if self.ended else "saved"
        return {
            "success": True,
            "message": f"Attendance for {self.session_id} {verb} ({self.records_written} records).",
            "recordsWritten": self.records_written,
        }
