from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from ..core.exceptions import InternalError
from .connection import DatabaseConnection

SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP

# Firestore rejects commits with more writes than this.
MAX_BATCH_WRITES = 500


def check_batch_size(writes: int, what: str) -> None:
    if writes > MAX_BATCH_WRITES:
        raise InternalError(
            f"Cannot {what} atomically: {writes} writes exceed the Firestore batch limit of {MAX_BATCH_WRITES}."
        )


@contextmanager
def write_batch(conn: DatabaseConnection) -> Iterator[firestore.WriteBatch]:
    """Collect writes and commit them atomically on exit.

    Nothing is written if the body raises.
    """

    batch = conn.client().batch()
    yield batch
    batch.commit()


def where_equals(query, **fields: Any):
    for name, value in fields.items():
        query = query.where(filter=FieldFilter(name, "==", value))
    return query


def stream_dicts(query) -> List[Dict[str, Any]]:
    """Materialize a query as ``[{"id": doc_id, **data}, ...]``."""
    return [{"id": snap.id, **(snap.to_dict() or {})} for snap in query.stream()]


def get_dict(ref) -> Optional[Dict[str, Any]]:
    snap = ref.get()
    if not snap.exists:
        return None
    return {"id": snap.id, **(snap.to_dict() or {})}


def normalize_timestamp(value: Any) -> Optional[datetime]:
    """Normalize Firestore timestamp values to aware datetimes.

    The client returns ``DatetimeWithNanoseconds`` (a datetime subclass);
    values written by other SDKs may come back naive or as ISO strings.
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return normalize_timestamp(to_datetime())

    raise TypeError(f"Unsupported Firestore timestamp value type: {type(value)!r}")
