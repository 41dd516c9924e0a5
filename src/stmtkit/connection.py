"""MySQL / MariaDB connection handle.

A ``Connection`` owns exactly one native ``mysql.connector`` connection.
On open it negotiates ``utf8mb4`` / ``utf8mb4_unicode_ci`` and pins the
session time zone to UTC, so every timestamp bound by a ``Statement`` (which
converts to UTC before formatting) is stored and compared consistently.

Usage::

    from stmtkit import Connection

    db = Connection({"host": "db.example.org", "port": 3306, "database": "shop",
                     "user": "shop", "password": "secret"})

    user = db.query("SELECT * FROM users WHERE email = :email", {"email": email}).get_row()

    with db.transaction():
        order_id = db.query(
            "INSERT INTO orders (user_id, items) VALUES (:user, :items)",
            {"user": user["id"], "items": ["A-1", "B-7"]},
        ).get_insert_id()

Construct one ``Connection`` at startup and pass it to whatever needs it.
A Connection and its Statements are not thread-safe; use one Connection
per thread.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

import mysql.connector
from mysql.connector.conversion import MySQLConverter

from stmtkit.errors import DatabaseConnectionError, DatabaseError, QueryError
from stmtkit.logging import LogContext, get_logger
from stmtkit.params import BoundValue, ParamType, compile_placeholders, value_and_type_for
from stmtkit.protocols import NativeConnection
from stmtkit.statement import Statement
from stmtkit.types import UTC_OFFSET, DatabaseConfig

logger = get_logger(__name__)

T = TypeVar("T")


def _coerce_config(config: DatabaseConfig | Mapping[str, Any] | None) -> DatabaseConfig:
    if config is None:
        return DatabaseConfig.from_env()
    if isinstance(config, DatabaseConfig):
        return config
    return DatabaseConfig.from_mapping(config)


class Connection:
    """
    Database connection.

    Args:
        config: ``DatabaseConfig``, a mapping with host/port/database/user/password
            keys, or ``None`` to read ``DB_*`` environment variables.
        native: An already-open driver connection to wrap instead of connecting.

    Raises:
        DatabaseConnectionError: if the connection fails
        ConfigError: if the configuration is incomplete or invalid
    """

    def __init__(
        self,
        config: DatabaseConfig | Mapping[str, Any] | None = None,
        *,
        native: NativeConnection | None = None,
    ):
        self._config = _coerce_config(config)
        self._native: NativeConnection | None = native if native is not None else self._connect()

    @classmethod
    def open(cls, config: DatabaseConfig | Mapping[str, Any] | None = None) -> Connection:
        """Open a connection (same as calling the constructor)."""
        return cls(config)

    def _connect(self) -> NativeConnection:
        try:
            native = mysql.connector.connect(**self._config.connect_kwargs())
        except mysql.connector.Error as e:
            logger.error("database_connect_failed", error=str(e), **self._config.describe())
            raise DatabaseConnectionError(
                f"Failed to connect to MySQL at {self._config.host}:{self._config.port}: {e}",
                cause=e,
            ).with_context(host=self._config.host, database=self._config.database) from e

        logger.info("database_connected", **self._config.describe())
        return native

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def time_zone(self) -> str:
        """Session time zone (always UTC)."""
        return UTC_OFFSET

    @property
    def native(self) -> NativeConnection:
        """The wrapped driver connection."""
        if self._native is None:
            raise DatabaseError("Connection is closed").with_context(
                host=self._config.host, database=self._config.database
            )
        return self._native

    @property
    def is_connected(self) -> bool:
        return self._native is not None and self._native.is_connected()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def query(self, query: str, values: Mapping[str, Any] | None = None) -> Statement:
        """Prepare, bind and execute ``query`` in one call."""
        return self.prepare(query).bind(values).execute()

    def prepare(self, query: str) -> Statement:
        """Compile ``query`` and return a Statement bound to this connection."""
        compiled = compile_placeholders(query)
        try:
            cursor = self.native.cursor(buffered=True)
        except mysql.connector.Error as e:
            raise QueryError(
                f"{type(e).__name__}: {e}; Query String was: {query}", cause=e
            ).with_context(query=query) from e
        return Statement(self, cursor, query, compiled)

    def last_insert_id(self) -> str | None:
        """Most recent auto-generated id of this session, or None if there is none.

        Raises:
            DatabaseError: if the driver fails to run the lookup
        """

        def fetch() -> list[tuple[Any, ...]]:
            cursor = self.native.cursor(buffered=True)
            try:
                cursor.execute("SELECT LAST_INSERT_ID()")
                return cursor.fetchall()
            finally:
                cursor.close()

        rows = self._native_call("last_insert_id", fetch)
        value = rows[0][0] if rows else None
        if not value:
            return None
        return str(value)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def _native_call(self, event: str, fn: Callable[[], T]) -> T:
        try:
            result = fn()
        except mysql.connector.Error as e:
            raise DatabaseError(f"{event} failed: {e}", cause=e).with_context(
                host=self._config.host, database=self._config.database
            ) from e
        logger.debug(event)
        return result

    def begin_transaction(self) -> Connection:
        """Start a transaction; returns self for chaining."""
        self._native_call("transaction_begin", self.native.start_transaction)
        return self

    def is_in_transaction(self) -> bool:
        return bool(self.native.in_transaction)

    def commit(self) -> None:
        self._native_call("transaction_commit", self.native.commit)

    def rollback(self) -> None:
        self._native_call("transaction_rollback", self.native.rollback)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Begin a transaction, commit on success, roll back and re-raise on error.

        Events logged inside the block carry ``transaction_database``.
        """
        with LogContext(transaction_database=self._config.database):
            self.begin_transaction()
            try:
                yield self
            except Exception:
                self.rollback()
                raise
            self.commit()

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def value_and_type_for(self, value: Any, name: str | None = None) -> BoundValue:
        """Infer the parameter type of ``value`` and convert it for storage."""
        return value_and_type_for(value, name)

    def quote(self, value: Any) -> str:
        """Render ``value`` as an SQL literal, typed the same way ``bind`` types it."""
        bound = self.value_and_type_for(value)
        if bound.param_type is ParamType.NULL:
            return "NULL"
        if bound.param_type in (ParamType.BOOL, ParamType.INT):
            return str(bound.value)
        return "'" + MySQLConverter().escape(bound.value) + "'"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the native connection. Safe to call twice."""
        if self._native is None:
            return
        try:
            self._native.close()
        finally:
            self._native = None
            logger.info("database_closed", **self._config.describe())

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self._native is not None else "closed"
        return f"Connection(host={self._config.host!r}, database={self._config.database!r}, {state})"


__all__ = [
    "Connection",
]
