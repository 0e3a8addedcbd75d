"""Two-phase "replace the rows tagged with a key" protocol for one tab.

Phase 1 deletes every data row whose first cell equals the key, phase 2
appends the fresh rows. Phase 2 never starts unless phase 1 succeeded (or
found nothing to delete), so a failure can leave the tab without the key's
rows but never with stale and fresh rows side by side.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..sheets.gateway import SheetTab, SpreadsheetGateway
from ..sheets.ranges import tab_range
from .model import ReplaceResult

HEADER_ROWS = 1


def matching_row_indices(first_column: Sequence[Sequence[str]], key: str) -> List[int]:
    """Zero-based sheet row indices of data rows whose first cell is ``key``.

    ``first_column`` is the A column read from the first data row down.
    """

    return [
        i + HEADER_ROWS
        for i, row in enumerate(first_column)
        if row and row[0] == key
    ]


def delete_row_requests(sheet_id: int, row_indices: Sequence[int]) -> List[Dict[str, Any]]:
    """deleteDimension requests ordered from the highest row to the lowest.

    Deleting bottom-up keeps the indices of the remaining requests valid.
    """

    return [
        {
            "deleteDimension": {
                "range": {
                    "sheetId": sheet_id,
                    "dimension": "ROWS",
                    "startIndex": idx,
                    "endIndex": idx + 1,
                }
            }
        }
        for idx in sorted(set(row_indices), reverse=True)
    ]


def replace_keyed_rows(
    gateway: SpreadsheetGateway,
    tab: SheetTab,
    *,
    key: str,
    rows: Sequence[Sequence[str]],
    columns: str,
) -> ReplaceResult:
    first_column = gateway.get_values(tab_range(tab.title, f"A{HEADER_ROWS + 1}:A"))
    requests = delete_row_requests(tab.sheet_id, matching_row_indices(first_column, key))
    if requests:
        gateway.batch_update(requests)

    if rows:
        gateway.append_rows(tab_range(tab.title, columns), rows)

    return ReplaceResult(deleted=len(requests), appended=len(rows))
