from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_clock_12h
from ..core.constants import ATTENDANCE_SHEET_COLUMNS, ATTENDANCE_TAB_INDEX
from ..core.enums import SessionType
from ..core.exceptions import DomainError, InternalError, NotFoundError
from ..sheets.errors import GATEWAY_ERRORS
from ..sheets.gateway import SheetTab, SpreadsheetGatewayFactory
from .model import SyncResult
from .row_replacement import replace_keyed_rows

logger = logging.getLogger(__name__)


class AttendanceSyncEngine:
    """Project one day's attendance records onto the attendance workbook.

    Each run deletes the rows already tagged with the date and appends the
    current records, so running it again for the same day yields the same
    rows.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sheets: SpreadsheetGatewayFactory,
        *,
        spreadsheet_id: str,
        time_zone: str,
        tab_titles: Optional[Mapping[SessionType, str]] = None,
    ):
        self._attendance = attendance
        self._sheets = sheets
        self._spreadsheet_id = spreadsheet_id
        self._tz = time_zone
        self._tab_titles = dict(tab_titles or {})

    def to_row(self, record: AttendanceRecord) -> List[str]:
        return [
            record.session_id,
            format_clock_12h(record.scheduled_at, self._tz),
            record.session_type.value,
            record.employee_id or "",
            record.employee_name or "",
            record.employee_email or "",
            record.status.value,
            record.reason or "",
        ]

    def resolve_tab(self, tabs: Sequence[SheetTab], session_type: SessionType) -> SheetTab:
        title = self._tab_titles.get(session_type)
        if title:
            for tab in tabs:
                if tab.title == title and tab.sheet_id is not None:
                    return tab
            raise NotFoundError(f"No sheet titled '{title}' found.")

        if len(tabs) < 2:
            raise NotFoundError("The spreadsheet must contain at least two sheets.")

        index = ATTENDANCE_TAB_INDEX[session_type]
        tab = tabs[index]
        if tab.sheet_id is None or not tab.title:
            raise NotFoundError(f"Sheet at index {index} is missing an ID or title.")
        return tab

    def sync(self, date: str, session_type: SessionType) -> SyncResult:
        context = {"date": date, "session_type": session_type.value}

        records = self._attendance.list_for_session(session_type, date)
        if not records:
            logger.info("No attendance records found", extra=context)
            return SyncResult(True, f"No records found for {date}. Sheet was not modified.")

        rows = [self.to_row(r) for r in sorted(records, key=lambda r: (r.employee_name, r.employee_uid))]

        try:
            gateway = self._sheets.open(self._spreadsheet_id)
            tab = self.resolve_tab(gateway.list_tabs(), session_type)
            result = replace_keyed_rows(gateway, tab, key=date, rows=rows, columns=ATTENDANCE_SHEET_COLUMNS)
        except DomainError:
            logger.exception("Attendance sheet sync failed", extra=context)
            raise
        except GATEWAY_ERRORS as err:
            logger.exception("Attendance sheet sync failed", extra=context)
            raise InternalError(f"An error occurred while syncing to the sheet. {err}") from err

        if result.deleted:
            logger.info("Deleted old rows", extra={**context, "count": result.deleted, "sheet": tab.title})
        logger.info("Attendance synced", extra={**context, "count": result.appended, "sheet": tab.title})
        return SyncResult(
            True,
            f"Successfully synced {result.appended} records.",
            records_synced=result.appended,
            rows_deleted=result.deleted,
        )
