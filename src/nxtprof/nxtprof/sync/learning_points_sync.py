from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Sequence

from ..common.datetime_utils import format_local_date, now_utc
from ..core.constants import LEARNING_POINTS_SHEET_COLUMNS
from ..core.enums import SessionStatus, SessionType
from ..core.exceptions import DomainError, FailedPreconditionError, InternalError, NotFoundError
from ..learning.model import LearningPoint
from ..learning.repository import LearningPointRepository
from ..sessions.repository import SessionRepository
from ..sheets.errors import GATEWAY_ERRORS
from ..sheets.gateway import SheetTab, SpreadsheetGateway, SpreadsheetGatewayFactory
from ..sheets.ranges import tab_range
from ..users.repository import EmployeeRepository
from .model import LearningSyncResult

logger = logging.getLogger(__name__)


def subsheet_lookup(tabs: Sequence[SheetTab]) -> Dict[str, SheetTab]:
    """Map external employee id -> tab for titles shaped ``Name | id``."""
    lookup: Dict[str, SheetTab] = {}
    for tab in tabs:
        parts = [p.strip() for p in (tab.title or "").split("|")]
        if len(parts) == 2 and parts[1]:
            lookup[parts[1]] = tab
    return lookup


def duplicate_key(date: str, task_name: str, point_type: str) -> str:
    return f"{date}|{task_name}|{point_type}"


def existing_keys(rows: Sequence[Sequence[str]]) -> set[str]:
    """Keys of the data rows (header skipped) from columns A, B and E."""

    def cell(row: Sequence[str], i: int) -> str:
        return row[i] if i < len(row) else ""

    return {duplicate_key(cell(r, 0), cell(r, 1), cell(r, 4)) for r in rows[1:]}


class LearningPointSyncEngine:
    """Append locked learning points to each employee's tab, once per session.

    Unlike the attendance sync this is an additive merge: per-employee tabs
    are long-lived and shared by many sessions, so rows already present (same
    date, task and point type) are skipped instead of rewritten.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        points: LearningPointRepository,
        employees: EmployeeRepository,
        sheets: SpreadsheetGatewayFactory,
        *,
        spreadsheet_id: str,
        time_zone: str,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._points = points
        self._employees = employees
        self._sheets = sheets
        self._spreadsheet_id = spreadsheet_id
        self._tz = time_zone
        self._clock = clock

    def point_date(self, point: LearningPoint) -> str:
        return format_local_date(point.date or point.created_at or self._clock(), self._tz)

    def to_row(self, point: LearningPoint) -> List[str]:
        return [
            self.point_date(point),
            point.task_name,
            point.framework_category,
            point.subcategory,
            point.point_type,
            point.recipient,
            point.situation,
            point.behavior,
            point.impact,
            point.action_item,
        ]

    def sync(self, session_id: str) -> LearningSyncResult:
        context = {"session_id": session_id}

        session = self._sessions.get(SessionType.LEARNING_HOURS, session_id)
        if not session:
            raise NotFoundError(f"Learning-hour session document not found for ID: {session_id}.")
        if session.status != SessionStatus.ENDED:
            raise FailedPreconditionError("Session must be ended before syncing.")
        if session.synced:
            return LearningSyncResult(True, "This session is already synced.", 0)

        points = self._points.list_for_session(session_id, locked_only=True)
        if not points:
            # Marked anyway so the daily job stops retrying this session.
            self._sessions.mark_synced(session_id, synced_at=self._clock())
            logger.info("No locked learning points", extra=context)
            return LearningSyncResult(
                True, "No locked learning points found for this session. Marked as synced.", 0
            )

        grouped: Dict[str, List[LearningPoint]] = defaultdict(list)
        for p in points:
            grouped[p.user_id].append(p)

        try:
            gateway = self._sheets.open(self._spreadsheet_id)
            lookup = subsheet_lookup(gateway.list_tabs())
            appended = sum(self._sync_user(gateway, lookup, uid, pts) for uid, pts in grouped.items())
        except DomainError:
            logger.exception("Learning points sheet sync failed", extra=context)
            raise
        except GATEWAY_ERRORS as err:
            logger.exception("Learning points sheet sync failed", extra=context)
            raise InternalError(f"An error occurred while syncing learning points. {err}") from err

        self._sessions.mark_synced(session_id, synced_at=self._clock())
        logger.info("Learning points synced", extra={**context, "appended": appended})
        return LearningSyncResult(True, f"Synced successfully. {appended} new rows appended.", appended)

    def _sync_user(
        self,
        gateway: SpreadsheetGateway,
        lookup: Mapping[str, SheetTab],
        uid: str,
        points: Sequence[LearningPoint],
    ) -> int:
        employee = self._employees.get_by_uid(uid)
        if not employee:
            logger.warning("No employee document for learning point owner", extra={"employee_id": uid})
            return 0

        tab = lookup.get(employee.employee_id or "")
        if not tab:
            logger.warning("No subsheet for employee. Skipping.", extra={"employee_id": employee.employee_id})
            return 0

        seen = existing_keys(gateway.get_values(tab_range(tab.title, LEARNING_POINTS_SHEET_COLUMNS)))
        rows: List[List[str]] = []
        for p in points:
            row = self.to_row(p)
            key = duplicate_key(row[0], p.task_name, p.point_type)
            if key in seen:
                continue
            seen.add(key)
            rows.append(row)

        if rows:
            gateway.append_rows(tab_range(tab.title, LEARNING_POINTS_SHEET_COLUMNS), rows)
        return len(rows)
