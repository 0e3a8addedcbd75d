from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import LearningPoint


class LearningPointRepository(Protocol):
    def list_for_session(self, session_id: str, *, locked_only: bool = False) -> Sequence[LearningPoint]:
        raise NotImplementedError

    def lock_and_end_session(self, session_id: str, *, ended_at: datetime) -> int:
        """Lock every point of the session and mark it ended, in one batch.

        Returns the number of points locked.
        """

        raise NotImplementedError
