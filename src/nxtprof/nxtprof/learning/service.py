from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import SessionType
from ..core.exceptions import NotFoundError
from ..sessions.repository import SessionRepository
from .model import LearningPoint
from .repository import LearningPointRepository

logger = logging.getLogger(__name__)


class LearningSessionService:
    def __init__(
        self,
        sessions: SessionRepository,
        points: LearningPointRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._points = points
        self._clock = clock

    def end_session_and_lock_points(self, session_id: str) -> dict:
        if not self._sessions.get(SessionType.LEARNING_HOURS, session_id):
            raise NotFoundError(f"Learning-hour session document not found for ID: {session_id}.")

        locked = self._points.lock_and_end_session(session_id, ended_at=self._clock())
        logger.info("Learning session ended", extra={"session_id": session_id, "count": locked})
        return {"success": True, "message": f"Session ended and {locked} points were locked."}

    def list_session_points(self, session_id: str) -> Sequence[LearningPoint]:
        points = list(self._points.list_for_session(session_id))
        points.sort(key=lambda p: (p.created_at is None, p.created_at))
        return points
