from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def list_active(self) -> Sequence[Employee]:
        """Non-archived employees, i.e. the attendance roster."""

        raise NotImplementedError

    def get_by_uid(self, uid: str) -> Optional[Employee]:
        raise NotImplementedError
