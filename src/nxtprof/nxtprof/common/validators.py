from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)


def validate_input(schema: Type[M], data: Any) -> M:
    """Validate a callable payload, raising ValidationError on failure."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request data must be an object")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        messages = []
        for err in exc.errors():
            msg = str(err.get("msg", "invalid value"))
            # pydantic prefixes custom ValueError messages.
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            messages.append(msg)
        raise ValidationError(", ".join(messages)) from exc
