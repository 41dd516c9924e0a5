"""
Structural protocols for the native driver objects stmtkit drives.

``Connection`` and ``Statement`` never depend on a concrete driver class;
they only need the shape below. ``mysql.connector`` (pure Python and C
extension alike) satisfies it, and so does any test double that
implements the same methods.

Architecture:
    ::

        NativeConnection                    NativeCursor
        ┌──────────────────────────────┐    ┌──────────────────────────────┐
        │ cursor(buffered=True)        │───▶│ execute(sql, params)         │
        │ start_transaction()          │    │ fetchall()                   │
        │ commit() / rollback()        │    │ description / column_names   │
        │ in_transaction               │    │ rowcount / lastrowid         │
        │ is_connected() / close()     │    │ close()                      │
        └──────────────────────────────┘    └──────────────────────────────┘

Guardrails:
    ❌ DON'T: Import driver classes in connection.py / statement.py for typing
    ✅ DO: Type against these protocols

Tags:
    protocol, connection, cursor, database, stmtkit
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NativeCursor(Protocol):
    """Cursor of a DB-API 2.0 style MySQL driver."""

    description: Sequence[Sequence[Any]] | None
    rowcount: int
    lastrowid: int | None

    def execute(self, operation: str, params: Mapping[str, Any] | None = None) -> Any:
        ...

    def fetchall(self) -> list[tuple[Any, ...]]:
        ...

    def close(self) -> Any:
        ...


@runtime_checkable
class NativeConnection(Protocol):
    """Connection of a DB-API 2.0 style MySQL driver."""

    @property
    def in_transaction(self) -> bool:
        ...

    def cursor(self, *args: Any, **kwargs: Any) -> NativeCursor:
        ...

    def start_transaction(self, *args: Any, **kwargs: Any) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def is_connected(self) -> bool:
        ...

    def close(self) -> None:
        ...


__all__ = [
    "NativeCursor",
    "NativeConnection",
]
