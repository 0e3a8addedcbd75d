from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.nxtprof.nxtprof.core.enums import SessionStatus, SessionType
from src.nxtprof.nxtprof.core.exceptions import NotFoundError
from src.nxtprof.nxtprof.learning.model import LearningPoint
from src.nxtprof.nxtprof.sessions.model import Session

DAY = "2026-03-02"


def test_end_session_locks_every_point(container, sessions, points, clock):
    sessions.put(Session(session_type=SessionType.LEARNING_HOURS, session_id=DAY, status=SessionStatus.ACTIVE))
    points.add(LearningPoint(point_id="p1", session_id=DAY, user_id="u-1"))
    points.add(LearningPoint(point_id="p2", session_id=DAY, user_id="u-2"))
    points.add(LearningPoint(point_id="other", session_id="2026-03-03", user_id="u-1"))

    result = container.learning_service.end_session_and_lock_points(DAY)

    assert result == {"success": True, "message": "Session ended and 2 points were locked."}
    assert [p.editable for p in points.list_for_session(DAY)] == [False, False]
    assert points.by_id["other"].editable is True
    s = sessions.get(SessionType.LEARNING_HOURS, DAY)
    assert s.status == SessionStatus.ENDED
    assert s.ended_at == clock.now


def test_end_session_with_no_points(container, sessions):
    sessions.put(Session(session_type=SessionType.LEARNING_HOURS, session_id=DAY, status=SessionStatus.ACTIVE))

    result = container.learning_service.end_session_and_lock_points(DAY)

    assert result["message"] == "Session ended and 0 points were locked."


def test_end_unknown_session(container):
    with pytest.raises(NotFoundError):
        container.learning_service.end_session_and_lock_points(DAY)


def test_points_listed_oldest_first(container, points):
    points.add(LearningPoint(point_id="b", session_id=DAY, user_id="u-1", created_at=datetime(2026, 3, 2, 12, tzinfo=timezone.utc)))
    points.add(LearningPoint(point_id="a", session_id=DAY, user_id="u-1", created_at=datetime(2026, 3, 2, 11, tzinfo=timezone.utc)))
    points.add(LearningPoint(point_id="c", session_id=DAY, user_id="u-1"))

    listed = container.learning_service.list_session_points(DAY)

    assert [p.point_id for p in listed] == ["a", "b", "c"]
