"""Post-retrieval column converters.

Values come back from MySQL in storage shape: booleans as ``0``/``1``,
structured values as JSON text, timestamps as naive UTC datetimes (or text,
for ``VARCHAR`` columns). Registering a converter on a statement turns a
column back into the shape it was bound in::

    stmt = db.query("SELECT active, tags, created FROM users WHERE id = :id", {"id": 7})
    stmt.convert(active=to_bool, tags=from_json, created=from_utc_datetime)
    stmt.get_row()
    # {'active': True, 'tags': ['a', 'b'], 'created': datetime(..., tzinfo=UTC)}

``None`` passes through every converter unchanged.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from stmtkit.params import DATETIME_FORMAT

Converter = Callable[[Any], Any]


def to_bool(value: Any) -> bool | None:
    """``0``/``1`` (int, Decimal, bytes or text) to ``bool``."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if isinstance(value, str):
        value = int(value)
    return bool(value)


def from_json(value: Any) -> Any:
    """JSON text to Python lists / dicts / scalars."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    return json.loads(value)


def from_utc_datetime(value: Any) -> datetime | None:
    """A UTC timestamp (datetime or ``YYYY-MM-DD HH:MM:SS`` text) to an aware datetime."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if isinstance(value, str):
        value = datetime.strptime(value, DATETIME_FORMAT)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_int(value: Any) -> int | None:
    """Integer-valued ``Decimal`` / text (e.g. ``SUM()`` results) to ``int``."""
    if value is None:
        return None
    return int(value)


def apply_converters(row: dict[str, Any], converters: dict[str, Converter]) -> dict[str, Any]:
    """Return ``row`` with each registered column converted."""
    if not converters:
        return row
    converted = dict(row)
    for column, converter in converters.items():
        if column in converted and converted[column] is not None:
            converted[column] = converter(converted[column])
    return converted


__all__ = [
    "Converter",
    "to_bool",
    "from_json",
    "from_utc_datetime",
    "to_int",
    "apply_converters",
]
