from __future__ import annotations

import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from ..core.enums import AttendanceStatus, SessionType

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_date(value: str) -> str:
    if not _DATE_RE.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value


def _check_session_type(value):
    if isinstance(value, SessionType):
        return value
    if not isinstance(value, str) or value not in {t.value for t in SessionType}:
        raise ValueError("Session type must be 'standups' or 'learning_hours'")
    return value


def _check_status(value):
    if isinstance(value, AttendanceStatus):
        return value
    if not isinstance(value, str) or value not in {s.value for s in AttendanceStatus}:
        raise ValueError("Status must be one of Present, Absent, Missed, Not Available")
    return value


DateString = Annotated[str, AfterValidator(_check_date)]
SessionTypeValue = Annotated[SessionType, BeforeValidator(_check_session_type)]
AttendanceStatusValue = Annotated[AttendanceStatus, BeforeValidator(_check_status)]


class CallableModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


class SyncToSheetRequest(CallableModel):
    date: DateString
    session_type: SessionTypeValue = Field(alias="sessionType")


class SessionIdRequest(CallableModel):
    session_id: str = Field(alias="sessionId", min_length=1, max_length=100)


class SessionRefRequest(CallableModel):
    session_type: SessionTypeValue = Field(alias="sessionType")
    session_id: DateString = Field(alias="sessionId")


class ScheduleSessionRequest(CallableModel):
    session_type: SessionTypeValue = Field(alias="sessionType")
    date: DateString
    time: str

    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        if not _TIME_RE.match(value):
            raise ValueError("Time must be in HH:MM format")
        return value


class MarkAttendanceRequest(CallableModel):
    session_type: SessionTypeValue = Field(alias="sessionType")
    session_id: DateString = Field(alias="sessionId")
    employee_uid: str = Field(alias="employeeUid", min_length=1, max_length=128)
    status: AttendanceStatusValue
    reason: Optional[str] = Field(default=None, max_length=1000)
