from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import EMPLOYEES_COLLECTION
from ..database.connection import DatabaseConnection
from ..database.firestore_base import get_dict, stream_dicts
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        uid=r["id"],
        name=r.get("name") or "",
        email=r.get("email") or "",
        employee_id=r.get("employeeId"),
        archived=r.get("archived") is True,
    )


class FirestoreEmployeeRepository(EmployeeRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    def list_active(self) -> Sequence[Employee]:
        # `archived` is missing on older documents, so filter in code.
        rows = stream_dicts(self._conn.client().collection(EMPLOYEES_COLLECTION))
        return [_to_employee(r) for r in rows if r.get("archived") is not True]

    def get_by_uid(self, uid: str) -> Optional[Employee]:
        r = get_dict(self._conn.client().collection(EMPLOYEES_COLLECTION).document(uid))
        return _to_employee(r) if r else None
