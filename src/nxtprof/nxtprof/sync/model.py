from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SyncResult:
    success: bool
    message: str
    records_synced: int = 0
    rows_deleted: int = 0

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message, "recordsSynced": self.records_synced}


@dataclass(frozen=True)
class LearningSyncResult:
    success: bool
    message: str
    appended: int = 0

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message, "appended": self.appended}


@dataclass(frozen=True)
class ReplaceResult:
    deleted: int
    appended: int
