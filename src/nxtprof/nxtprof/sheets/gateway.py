from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence


@dataclass(frozen=True)
class SheetTab:
    """One tab of a spreadsheet as reported by the metadata call."""

    sheet_id: Optional[int]
    title: Optional[str]


class SpreadsheetGateway(Protocol):
    """The spreadsheet operations the sync engines consume.

    A gateway is bound to one spreadsheet.
    """

    def list_tabs(self) -> Sequence[SheetTab]:
        raise NotImplementedError

    def get_values(self, range_a1: str) -> List[List[str]]:
        raise NotImplementedError

    def batch_update(self, requests: Sequence[Dict[str, Any]]) -> None:
        raise NotImplementedError

    def append_rows(self, range_a1: str, rows: Sequence[Sequence[str]]) -> None:
        """Append after the last non-empty row, values parsed as USER_ENTERED."""

        raise NotImplementedError


class SpreadsheetGatewayFactory(Protocol):
    def open(self, spreadsheet_id: str) -> SpreadsheetGateway:
        raise NotImplementedError
