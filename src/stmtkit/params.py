"""Named parameters: value typing and placeholder compilation.

Two pieces sit between the caller's ``{name: value}`` mapping and the
driver:

``value_and_type_for(value)``
    Infers the storage type of a Python value from its runtime shape and
    converts it to what the database stores:

    ==========================  ==========  ===============================
    Python value                ParamType   Stored as
    ==========================  ==========  ===============================
    ``bool``                    BOOL        ``0`` / ``1``
    ``None``                    NULL        ``NULL``
    ``int``                     INT         integer
    ``str``                     STR         text
    ``list`` / ``tuple`` / map  STR         JSON text
    ``datetime`` / ``date``     STR         ``YYYY-MM-DD HH:MM:SS`` in UTC
    anything else               (none)      :class:`BindError`
    ==========================  ==========  ===============================

``compile_placeholders(sql)``
    Rewrites ``:name`` placeholders into the driver's ``%(name)s`` style,
    skipping quoted strings, quoted identifiers and comments.

Examples:
    >>> value_and_type_for(True)
    BoundValue(param_type=<ParamType.BOOL: 'bool'>, value=1)
    >>> compile_placeholders("SELECT * FROM t WHERE id = :id AND name = ':id'")
    CompiledQuery(sql="SELECT * FROM t WHERE id = %(id)s AND name = ':id'", names=('id',))

Tags:
    parameters, binding, placeholders, json, utc, stmtkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Any, NamedTuple

from stmtkit.errors import BindError

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ParamType(str, Enum):
    """Storage type attached to a bound parameter."""

    BOOL = "bool"
    NULL = "null"
    INT = "int"
    STR = "str"


class BoundValue(NamedTuple):
    """A value converted for storage, tagged with its parameter type."""

    param_type: ParamType
    value: int | str | None


def to_utc_string(value: datetime | date) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS`` in UTC.

    Naive datetimes are taken to be UTC already; a bare ``date`` is
    midnight UTC.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime(DATETIME_FORMAT)


def value_and_type_for(value: Any, name: str | None = None) -> BoundValue:
    """Infer the parameter type of ``value`` and convert it for storage.

    Args:
        value: Python value to bind
        name: Parameter name, used in the error message

    Raises:
        BindError: if the value's type is not supported
    """
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return BoundValue(ParamType.BOOL, int(value))
    if value is None:
        return BoundValue(ParamType.NULL, None)
    if isinstance(value, int):
        return BoundValue(ParamType.INT, value)
    if isinstance(value, str):
        return BoundValue(ParamType.STR, value)
    if isinstance(value, (list, tuple, Mapping)):
        try:
            encoded = json.dumps(value if not isinstance(value, Mapping) else dict(value))
        except (TypeError, ValueError) as e:
            raise BindError(
                f"`{name}` cannot be encoded as JSON: {e}",
                field=name,
                value=value,
                cause=e,
            ).with_context(parameter=name) from e
        return BoundValue(ParamType.STR, encoded)
    if isinstance(value, (datetime, date)):
        return BoundValue(ParamType.STR, to_utc_string(value))

    raise BindError(
        f"`{name}` has unsupported type {type(value).__name__}",
        field=name,
        value=value,
    ).with_context(parameter=name)


# --------------------------------------------------------------------------
# Placeholder compilation
# --------------------------------------------------------------------------

# Alternatives are tried left to right: anything quoted or commented is
# copied verbatim, ``::`` is left alone, ``:name`` becomes a parameter.
_TOKEN_RE = re.compile(
    r"""
      (?P<squote>'(?:[^'\\]|\\.|'')*')
    | (?P<dquote>"(?:[^"\\]|\\.|"")*")
    | (?P<backtick>`(?:[^`]|``)*`)
    | (?P<line_comment>(?:--\s|\#)[^\n]*)
    | (?P<block_comment>/\*.*?\*/)
    | (?P<double_colon>::)
    | :(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE | re.DOTALL,
)


class CompiledQuery(NamedTuple):
    """Query text in driver parameter style plus the placeholder names in order."""

    sql: str
    names: tuple[str, ...]


def normalize_name(name: str) -> str:
    """Strip the optional leading colon from a parameter name."""
    return name[1:] if name.startswith(":") else name


def compile_placeholders(sql: str) -> CompiledQuery:
    """Rewrite ``:name`` placeholders into ``%(name)s`` pyformat style."""
    names: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        name = match.group("name")
        if name is None:
            return match.group(0)
        if name not in names:
            names.append(name)
        return f"%({name})s"

    return CompiledQuery(_TOKEN_RE.sub(_replace, sql), tuple(names))


__all__ = [
    "DATETIME_FORMAT",
    "ParamType",
    "BoundValue",
    "CompiledQuery",
    "to_utc_string",
    "value_and_type_for",
    "normalize_name",
    "compile_placeholders",
]
