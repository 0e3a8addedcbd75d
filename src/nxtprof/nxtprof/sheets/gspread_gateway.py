"""Google Sheets gateway built on gspread.

Credentials come from a service-account JSON payload injected through an
environment variable (a deployment secret) and are resolved on every
``open`` call, i.e. once per invocation.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Sequence

import gspread
from google.oauth2.service_account import Credentials

from ..core.constants import SHEETS_SCOPES
from ..core.exceptions import InternalError
from .gateway import SheetTab, SpreadsheetGateway, SpreadsheetGatewayFactory

log = logging.getLogger(__name__)


def credentials_from_env(env_key: str) -> Credentials:
    raw = os.getenv(env_key)
    if not raw:
        log.error("Environment variable %s is not configured.", env_key)
        raise InternalError("Service Account key is not configured.")

    try:
        info = json.loads(raw)
    except json.JSONDecodeError as exc:
        log.exception("Failed to parse service account JSON from %s", env_key)
        raise InternalError("Service Account key is malformed.") from exc

    try:
        return Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
    except (ValueError, KeyError) as exc:
        log.exception("Failed to build Google credentials from service account info.")
        raise InternalError(f"Service Account key is malformed. {exc}") from exc


class GspreadGateway(SpreadsheetGateway):
    def __init__(self, spreadsheet: gspread.Spreadsheet):
        self._book = spreadsheet

    def list_tabs(self) -> Sequence[SheetTab]:
        meta = self._book.fetch_sheet_metadata()
        tabs = []
        for sheet in meta.get("sheets") or []:
            props = sheet.get("properties") or {}
            tabs.append(SheetTab(sheet_id=props.get("sheetId"), title=props.get("title")))
        return tabs

    def get_values(self, range_a1: str) -> List[List[str]]:
        resp = self._book.values_get(range_a1)
        return [list(row) for row in resp.get("values") or []]

    def batch_update(self, requests: Sequence[Dict[str, Any]]) -> None:
        self._book.batch_update({"requests": list(requests)})

    def append_rows(self, range_a1: str, rows: Sequence[Sequence[str]]) -> None:
        self._book.values_append(
            range_a1,
            params={"valueInputOption": "USER_ENTERED"},
            body={"values": [list(r) for r in rows]},
        )


class GspreadGatewayFactory(SpreadsheetGatewayFactory):
    def __init__(self, credentials_env: str = "SHEETS_SA_KEY"):
        self._credentials_env = credentials_env

    def open(self, spreadsheet_id: str) -> GspreadGateway:
        if not spreadsheet_id:
            raise InternalError("Spreadsheet id is not configured.")
        creds = credentials_from_env(self._credentials_env)
        client = gspread.authorize(creds)
        log.debug("Opening spreadsheet %s", spreadsheet_id)
        return GspreadGateway(client.open_by_key(spreadsheet_id))
