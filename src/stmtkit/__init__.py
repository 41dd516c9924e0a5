"""stmtkit -- a thin connection / statement layer over mysql-connector-python.

Manifesto:
    Most database code needs very little: open a connection, run a query
    with named parameters, read the rows back as dicts, maybe get the id of
    an inserted row. ``stmtkit`` is exactly that and nothing more.

    - **Named parameters:** ``:name`` placeholders, values typed by shape
    - **Dict rows:** ``get_all`` / ``get_row`` / ``get_column`` / ``get``
    - **Explicit failures:** typed errors carrying the query text
    - **No hidden state:** no pool, no singleton, no retries

Architecture::

    errors.py        Structured error hierarchy (StmtkitError, QueryError, ...)
    logging.py       structlog configuration
    settings.py      DB_* environment settings (pydantic-settings)
    types.py         DatabaseConfig
    protocols.py     Native connection / cursor protocols
    params.py        Value typing + :name placeholder compiler
    converters.py    Post-retrieval column converters
    connection.py    Connection
    statement.py     Statement

Tags:
    stmtkit, mysql, mariadb, database, prepared-statement
"""

from stmtkit.connection import Connection
from stmtkit.converters import from_json, from_utc_datetime, to_bool, to_int
from stmtkit.errors import (
    BindError,
    ColumnNotFoundError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    InsertIdError,
    InvalidConfigError,
    MissingConfigError,
    QueryError,
    StmtkitError,
)
from stmtkit.params import BoundValue, ParamType, value_and_type_for
from stmtkit.statement import Statement
from stmtkit.types import DatabaseConfig

__version__ = "0.1.0"

__all__ = [
    "Connection",
    "Statement",
    "DatabaseConfig",
    "BoundValue",
    "ParamType",
    "value_and_type_for",
    "to_bool",
    "from_json",
    "from_utc_datetime",
    "to_int",
    "StmtkitError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "DatabaseConnectionError",
    "DatabaseError",
    "QueryError",
    "ColumnNotFoundError",
    "BindError",
    "InsertIdError",
]
