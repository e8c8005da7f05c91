"""JSON-safe snapshots of ORM rows for audit before/after data."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import inspect


# Never written to the audit trail
REDACTED_COLUMNS = frozenset({"password_hash"})


def serialize_value(value: Any) -> Any:
    """Serialize a value to JSON-compatible primitives.

    Args:
        value: Any value to serialize

    Returns:
        JSON-serializable representation of the value
    """
    if value is None or isinstance(value, str | int | float | bool):
        return value

    result: Any
    if isinstance(value, UUID):
        result = str(value)
    elif isinstance(value, datetime | date):
        result = value.isoformat()
    elif isinstance(value, Decimal):
        result = str(value)
    elif isinstance(value, Enum):
        result = value.value
    elif isinstance(value, dict):
        result = {str(k): serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list | tuple | set | frozenset):
        result = [serialize_value(item) for item in value]
    else:
        result = str(value)

    return result


def snapshot(obj: Any) -> dict[str, Any]:
    """Capture the loaded column values of a mapped instance.

    Only column attributes already loaded are read, so this never
    triggers lazy IO on an async session.
    """
    state = inspect(obj)
    data: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key in REDACTED_COLUMNS or attr.key in state.unloaded:
            continue
        data[attr.key] = serialize_value(getattr(obj, attr.key))
    return data
