from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from src.nxtprof.nxtprof.attendance.model import AttendanceRecord
from src.nxtprof.nxtprof.container import wire_container
from src.nxtprof.nxtprof.core.enums import SessionStatus, SessionType
from src.nxtprof.nxtprof.learning.model import LearningPoint
from src.nxtprof.nxtprof.sessions.model import Session
from src.nxtprof.nxtprof.sheets.gateway import SheetTab
from src.nxtprof.nxtprof.users.model import Employee

TZ = "Asia/Kolkata"

# Monday 2026-03-02, 08:30 in Asia/Kolkata.
MONDAY_MORNING = datetime(2026, 3, 2, 3, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime = MONDAY_MORNING):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryEmployees:
    def __init__(self, employees: Sequence[Employee] = ()):
        self.by_uid: Dict[str, Employee] = {e.uid: e for e in employees}

    def add(self, emp: Employee) -> None:
        self.by_uid[emp.uid] = emp

    def list_active(self) -> Sequence[Employee]:
        return [e for e in self.by_uid.values() if not e.archived]

    def get_by_uid(self, uid: str) -> Optional[Employee]:
        return self.by_uid.get(uid)


class InMemorySessions:
    def __init__(self):
        self.docs: Dict[tuple, Session] = {}
        self.synced_calls: List[str] = []

    def put(self, session: Session) -> None:
        self.docs[(session.session_type, session.session_id)] = session

    def get(self, session_type: SessionType, session_id: str) -> Optional[Session]:
        return self.docs.get((session_type, session_id))

    def save_scheduled(self, session_type, session_id, *, scheduled_time, scheduled_by) -> None:
        self.put(
            Session(
                session_type=session_type,
                session_id=session_id,
                status=SessionStatus.SCHEDULED,
                scheduled_time=scheduled_time,
                scheduled_by=scheduled_by,
            )
        )

    def activate(self, session_type, session_id, *, started_at, temp_attendance) -> None:
        s = self.docs[(session_type, session_id)]
        self.put(
            replace(
                s,
                status=SessionStatus.ACTIVE,
                started_at=started_at,
                temp_attendance=dict(temp_attendance),
                absence_reasons={},
            )
        )

    def mark_attendance(self, session_type, session_id, *, employee_uid, status, reason=None) -> None:
        s = self.docs[(session_type, session_id)]
        temp = dict(s.temp_attendance)
        temp[employee_uid] = status
        reasons = dict(s.absence_reasons)
        if reason:
            reasons[employee_uid] = reason
        else:
            reasons.pop(employee_uid, None)
        self.put(replace(s, temp_attendance=temp, absence_reasons=reasons))

    def end(self, session_type, session_id, *, ended_at, **changes) -> None:
        s = self.docs[(session_type, session_id)]
        self.put(replace(s, status=SessionStatus.ENDED, ended_at=ended_at, **changes))

    def mark_synced(self, session_id, *, synced_at) -> None:
        self.synced_calls.append(session_id)
        s = self.docs[(SessionType.LEARNING_HOURS, session_id)]
        self.put(replace(s, synced=True, synced_at=synced_at))


class InMemoryPoints:
    def __init__(self, sessions: InMemorySessions):
        self._sessions = sessions
        self.by_id: Dict[str, LearningPoint] = {}

    def add(self, point: LearningPoint) -> None:
        self.by_id[point.point_id] = point

    def lock(self, session_id: str) -> int:
        ids = [pid for pid, p in self.by_id.items() if p.session_id == session_id]
        for pid in ids:
            self.by_id[pid] = replace(self.by_id[pid], editable=False)
        return len(ids)

    def list_for_session(self, session_id, *, locked_only=False) -> Sequence[LearningPoint]:
        return [
            p for p in self.by_id.values()
            if p.session_id == session_id and (not locked_only or not p.editable)
        ]

    def lock_and_end_session(self, session_id, *, ended_at) -> int:
        locked = self.lock(session_id)
        self._sessions.end(SessionType.LEARNING_HOURS, session_id, ended_at=ended_at)
        return locked


class InMemoryAttendance:
    def __init__(self, sessions: InMemorySessions, points: InMemoryPoints):
        self._sessions = sessions
        self._points = points
        self.docs: Dict[tuple, Dict[str, AttendanceRecord]] = {}

    def add(self, record: AttendanceRecord) -> None:
        self.docs.setdefault((record.session_type, record.session_id), {})[record.doc_id] = record

    def list_for_session(self, session_type, session_id) -> Sequence[AttendanceRecord]:
        return list(self.docs.get((session_type, session_id), {}).values())

    def finalize_session(self, session_type, session_id, records, *, ended_at=None, lock_learning_points=False) -> None:
        for rec in records:
            self.add(rec)
        if ended_at is not None:
            self._sessions.end(
                session_type,
                session_id,
                ended_at=ended_at,
                temp_attendance={r.employee_uid: r.status for r in records},
                absence_reasons={r.employee_uid: r.reason for r in records if r.reason},
            )
        if lock_learning_points:
            self._points.lock(session_id)


def _split_range(range_a1: str):
    title, cells = range_a1.rsplit("!", 1)
    if title.startswith("'") and title.endswith("'"):
        title = title[1:-1].replace("''", "'")
    return title, cells


class FakeWorkbook:
    """A spreadsheet held in memory: ordered tabs, each a list of rows.

    Interprets only the calls the sync engines make: reads of ``A2:A`` and
    of whole column ranges, ``deleteDimension`` row requests and appends.
    """

    def __init__(self, tabs: Sequence[tuple] = ()):
        self.tabs: List[SheetTab] = []
        self.rows: Dict[str, List[List[str]]] = {}
        self.calls: List[tuple] = []
        self.fail_on: set = set()
        for sheet_id, title, header in tabs:
            self.add_tab(sheet_id, title, header)

    def add_tab(self, sheet_id: int, title: str, header: Sequence[str] = ("Header",)) -> None:
        self.tabs.append(SheetTab(sheet_id=sheet_id, title=title))
        self.rows[title] = [list(header)]

    def data_rows(self, title: str) -> List[List[str]]:
        return self.rows[title][1:]

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise RequestsConnectionError(f"{op} failed")

    def list_tabs(self) -> Sequence[SheetTab]:
        self.calls.append(("list_tabs",))
        self._maybe_fail("list_tabs")
        return list(self.tabs)

    def get_values(self, range_a1: str) -> List[List[str]]:
        self.calls.append(("get_values", range_a1))
        self._maybe_fail("get_values")
        title, cells = _split_range(range_a1)
        rows = self.rows[title]
        if cells == "A2:A":
            return [row[:1] for row in rows[1:]]
        return [list(row) for row in rows]

    def batch_update(self, requests: Sequence[Dict[str, Any]]) -> None:
        self.calls.append(("batch_update", list(requests)))
        self._maybe_fail("batch_update")
        titles = {t.sheet_id: t.title for t in self.tabs}
        for req in requests:
            rng = req["deleteDimension"]["range"]
            rows = self.rows[titles[rng["sheetId"]]]
            del rows[rng["startIndex"]:rng["endIndex"]]

    def append_rows(self, range_a1: str, rows: Sequence[Sequence[str]]) -> None:
        self.calls.append(("append_rows", range_a1, [list(r) for r in rows]))
        self._maybe_fail("append_rows")
        title, _ = _split_range(range_a1)
        self.rows[title].extend(list(r) for r in rows)

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]


class FakeSheets:
    def __init__(self):
        self.books: Dict[str, FakeWorkbook] = {}
        self.opened: List[str] = []

    def open(self, spreadsheet_id: str) -> FakeWorkbook:
        self.opened.append(spreadsheet_id)
        return self.books[spreadsheet_id]


TOKENS = {
    "admin-token": {"user_id": "admin-1", "isAdmin": True, "name": "Asha Admin"},
    "user-token": {"user_id": "u-1", "isAdmin": False},
    "string-admin-token": {"user_id": "u-2", "isAdmin": "true"},
}


def fake_verifier(token: str):
    if token not in TOKENS:
        raise ValueError("Token could not be verified")
    return TOKENS[token]


SETTINGS = {
    "TIME_ZONE": TZ,
    "ATTENDANCE_SPREADSHEET_ID": "attendance-sheet",
    "LEARNING_HOURS_SPREADSHEET_ID": "learning-sheet",
}


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def employees():
    return InMemoryEmployees(
        [
            Employee(uid="u-1", name="Ravi", email="ravi@example.com", employee_id="1001"),
            Employee(uid="u-2", name="Anita", email="anita@example.com", employee_id="1002"),
            Employee(uid="u-3", name="Kiran", email="kiran@example.com", employee_id="1003"),
            Employee(uid="u-9", name="Old Timer", email="old@example.com", employee_id="0999", archived=True),
        ]
    )


@pytest.fixture
def sessions():
    return InMemorySessions()


@pytest.fixture
def points(sessions):
    return InMemoryPoints(sessions)


@pytest.fixture
def attendance(sessions, points):
    return InMemoryAttendance(sessions, points)


@pytest.fixture
def attendance_book():
    return FakeWorkbook(
        [
            (11, "Standups", ["Date", "Time", "Type", "Employee ID", "Name", "Email", "Status", "Reason"]),
            (22, "Learning Hours", ["Date", "Time", "Type", "Employee ID", "Name", "Email", "Status", "Reason"]),
        ]
    )


@pytest.fixture
def learning_book():
    header = ["Date", "Task", "Category", "Subcategory", "Type", "Recipient", "Situation", "Behavior", "Impact", "Action"]
    return FakeWorkbook([(101, "Ravi | 1001", header), (102, "Anita | 1002", header), (103, "Overview", ["x"])])


@pytest.fixture
def sheets(attendance_book, learning_book):
    fake = FakeSheets()
    fake.books["attendance-sheet"] = attendance_book
    fake.books["learning-sheet"] = learning_book
    return fake


@pytest.fixture
def container(employees, sessions, attendance, points, sheets, clock):
    return wire_container(
        SETTINGS,
        employees_repo=employees,
        sessions_repo=sessions,
        attendance_repo=attendance,
        points_repo=points,
        sheets=sheets,
        verifier=fake_verifier,
        clock=clock,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.nxtprof.nxtprof.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
