from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from src.nxtprof.nxtprof.attendance.firestore_attendance_repository import FirestoreAttendanceRepository
from src.nxtprof.nxtprof.attendance.model import AttendanceRecord
from src.nxtprof.nxtprof.core.enums import AttendanceStatus, SessionType
from src.nxtprof.nxtprof.core.exceptions import InternalError
from src.nxtprof.nxtprof.database.firestore_base import MAX_BATCH_WRITES, check_batch_size
from src.nxtprof.nxtprof.learning.firestore_learning_point_repository import FirestoreLearningPointRepository

DAY = "2026-03-02"
NOW = datetime(2026, 3, 2, 4, 0, tzinfo=timezone.utc)


@dataclass
class _Snap:
    reference: tuple


class _Batch:
    def __init__(self):
        self.writes = []
        self.committed = False

    def set(self, ref, data):
        self.writes.append(("set", ref))

    def update(self, ref, data):
        self.writes.append(("update", ref))

    def commit(self):
        self.committed = True


class _Collection:
    def __init__(self, name, docs):
        self.name = name
        self._docs = docs

    def document(self, doc_id):
        return (self.name, doc_id)

    def where(self, filter=None):
        return self

    def stream(self):
        return [_Snap((self.name, d)) for d in self._docs]


class _Client:
    def __init__(self, points=0):
        self.points = [f"p{i}" for i in range(points)]
        self.batches = []

    def collection(self, name):
        return _Collection(name, self.points if name == "learning_points" else [])

    def batch(self):
        b = _Batch()
        self.batches.append(b)
        return b


class _Conn:
    def __init__(self, client):
        self._client = client

    def client(self):
        return self._client


def _records(n):
    return [
        AttendanceRecord(
            session_type=SessionType.STANDUPS,
            session_id=DAY,
            employee_uid=f"u-{i}",
            employee_id=str(i),
            employee_name=f"Emp {i}",
            employee_email=f"e{i}@example.com",
            status=AttendanceStatus.MISSED,
        )
        for i in range(n)
    ]


def test_check_batch_size_allows_the_limit():
    check_batch_size(MAX_BATCH_WRITES, "write")

    with pytest.raises(InternalError):
        check_batch_size(MAX_BATCH_WRITES + 1, "write")


def test_finalize_within_limit_commits_one_batch():
    client = _Client()
    repo = FirestoreAttendanceRepository(_Conn(client))

    repo.finalize_session(SessionType.STANDUPS, DAY, _records(499), ended_at=NOW)

    assert len(client.batches) == 1
    assert client.batches[0].committed is True
    assert len(client.batches[0].writes) == 500


def test_finalize_over_limit_fails_before_writing():
    client = _Client(points=300)
    repo = FirestoreAttendanceRepository(_Conn(client))

    with pytest.raises(InternalError) as exc:
        repo.finalize_session(
            SessionType.LEARNING_HOURS, DAY, _records(250), ended_at=NOW, lock_learning_points=True
        )

    assert "551 writes" in str(exc.value)
    assert client.batches == []


def test_lock_points_over_limit_fails_before_writing():
    client = _Client(points=MAX_BATCH_WRITES)
    repo = FirestoreLearningPointRepository(_Conn(client))

    with pytest.raises(InternalError):
        repo.lock_and_end_session(DAY, ended_at=NOW)

    assert client.batches == []
