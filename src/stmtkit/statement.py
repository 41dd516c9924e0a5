"""Prepared statement: typed binding, execution and result helpers.

Lifecycle::

    stmt = db.prepare("SELECT id, name FROM users WHERE active = :active")
    stmt.bind({"active": True}).execute()     # bind → execute
    stmt.get_all()                            # [{'id': 1, 'name': 'ada'}, ...]
    stmt.get_column("name")                   # ['ada', ...]
    stmt.bind({"active": False}).execute()    # re-execute, row cache dropped

Rows are fetched once per execute and memoized; every ``execute()`` drops
the cache. The insert id is recorded per execute and is only available when
that execute generated one.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

import mysql.connector

from stmtkit.converters import Converter, apply_converters
from stmtkit.errors import BindError, ColumnNotFoundError, InsertIdError, QueryError
from stmtkit.logging import get_logger
from stmtkit.params import CompiledQuery, ParamType, compile_placeholders, normalize_name
from stmtkit.protocols import NativeCursor

if TYPE_CHECKING:
    from stmtkit.connection import Connection

logger = get_logger(__name__)


class Statement:
    """A query compiled against one Connection, with its native cursor."""

    def __init__(
        self,
        connection: Connection,
        cursor: NativeCursor,
        query_string: str,
        compiled: CompiledQuery | None = None,
    ):
        self._connection = connection
        self._cursor = cursor
        self._query_string = query_string
        self._compiled = compiled or compile_placeholders(query_string)

        self._values: dict[str, int | str | None] = {}
        self._types: dict[str, ParamType] = {}
        self._converters: dict[str, Converter] = {}

        self._insert_id: str | None = None
        self._raw_rows: list[tuple[Any, ...]] | None = None
        self._all_rows: list[dict[str, Any]] | None = None

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def query_string(self) -> str:
        """The query text as passed to ``prepare``."""
        return self._query_string

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return self._compiled.names

    @property
    def parameter_types(self) -> dict[str, ParamType]:
        """Inferred type of every bound parameter."""
        return dict(self._types)

    @property
    def column_names(self) -> list[str]:
        """Columns of the current result set (empty if there is none)."""
        if self._cursor.description is None:
            return []
        return [desc[0] for desc in self._cursor.description]

    # ------------------------------------------------------------------
    # Binding and execution
    # ------------------------------------------------------------------

    def bind(self, values: Mapping[str, Any] | None = None) -> Statement:
        """
        Bind named values, inferring each parameter's type from the value.

        Names may be given with or without the leading colon. Supported
        values: bool, None, int, str, list/tuple/mapping (stored as JSON),
        datetime/date (stored as UTC ``YYYY-MM-DD HH:MM:SS``).

        Nothing is bound unless every value is accepted.

        Raises:
            BindError: if a value has an unsupported type, or the name is not
                a parameter of this query
        """
        converted: dict[str, int | str | None] = {}
        types: dict[str, ParamType] = {}
        for raw_name, value in (values or {}).items():
            name = normalize_name(raw_name)
            if name not in self._compiled.names:
                raise BindError(
                    f"`{name}` is not a parameter of this query",
                    field=name,
                    value=value,
                ).with_context(parameter=name, query=self._query_string)
            bound = self._connection.value_and_type_for(value, name)
            converted[name] = bound.value
            types[name] = bound.param_type
        self._values.update(converted)
        self._types.update(types)
        return self

    def execute(self) -> Statement:
        """
        Run the statement with the bound values.

        Raises:
            QueryError: if the driver rejects the statement; the message
                includes the driver error and the full query text
        """
        self._raw_rows = None
        self._all_rows = None
        self._insert_id = None

        missing = [name for name in self._compiled.names if name not in self._values]
        if missing:
            raise QueryError(
                f"Unbound parameter(s) {', '.join(missing)}; Query String was: {self._query_string}"
            ).with_context(query=self._query_string, parameter=missing[0])

        params = dict(self._values) if self._compiled.names else None
        try:
            self._cursor.execute(self._compiled.sql, params)
        except mysql.connector.Error as e:
            logger.error(
                "statement_failed",
                query=self._query_string,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise QueryError(
                f"{type(e).__name__}: {e}; Query String was: {self._query_string}",
                cause=e,
            ).with_context(query=self._query_string) from e

        lastrowid = self._cursor.lastrowid
        self._insert_id = str(lastrowid) if lastrowid else None

        logger.debug(
            "statement_executed",
            query=self._query_string,
            parameters=list(self._compiled.names),
            rowcount=self._cursor.rowcount,
        )
        return self

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def convert(self, converters: Mapping[str, Converter] | None = None, **kwargs: Converter) -> Statement:
        """Register post-retrieval converters by column name, e.g. ``convert(active=to_bool)``."""
        self._converters.update(converters or {})
        self._converters.update(kwargs)
        self._all_rows = None
        return self

    def _fetch(self) -> list[tuple[Any, ...]]:
        if self._raw_rows is None:
            if self._cursor.description is None:
                self._raw_rows = []
            else:
                self._raw_rows = list(self._cursor.fetchall())
        return self._raw_rows

    def get_all(self) -> list[dict[str, Any]]:
        """All rows as ``{column: value}`` dicts, fetched once per execute."""
        if self._all_rows is None:
            columns = self.column_names
            self._all_rows = [
                apply_converters(dict(zip(columns, row)), self._converters)
                for row in self._fetch()
            ]
        return self._all_rows

    def get_row(self) -> dict[str, Any]:
        """First row, or ``{}`` if there are none."""
        rows = self.get_all()
        return rows[0] if rows else {}

    def get_column(self, key: str | None = None) -> list[Any]:
        """
        Values of one column across all rows.

        Without ``key`` the first column is used. An empty result gives an
        empty list whatever the key.

        Raises:
            ColumnNotFoundError: if ``key`` is not a column of the result
        """
        rows = self.get_all()
        if not rows:
            return []
        if not key:
            first = self.column_names[0]
            converter = self._converters.get(first)
            values = [row[0] for row in self._fetch()]
            if converter is None:
                return values
            return [None if v is None else converter(v) for v in values]
        if key not in rows[0]:
            raise ColumnNotFoundError(key).with_context(query=self._query_string)
        return [row[key] for row in rows]

    def get(self, key: str | None = None) -> Any:
        """First value of ``get_column(key)``, or None if there are no rows."""
        column = self.get_column(key)
        return column[0] if column else None

    def get_row_count(self) -> int:
        """Rows selected or affected by the last execute."""
        return max(self._cursor.rowcount, 0)

    def get_insert_id(self) -> str:
        """
        Id generated by the last execute.

        Raises:
            InsertIdError: if the statement has not been executed or inserted
                nothing
        """
        if self._insert_id is None:
            raise InsertIdError("get_insert_id was called but nothing was inserted.").with_context(
                query=self._query_string
            )
        return self._insert_id

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.get_all())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the native cursor."""
        self._cursor.close()

    def __enter__(self) -> Statement:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Statement({self._query_string!r})"


__all__ = [
    "Statement",
]
