from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên trong danh sách điểm danh."""

    uid: str
    name: str
    email: str
    employee_id: Optional[str] = None
    archived: bool = False


@dataclass(frozen=True)
class Caller:
    """Identity of the caller of a callable operation (decoded ID token)."""

    uid: str
    claims: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.claims.get("isAdmin") is True
