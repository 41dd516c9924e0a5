"""
Structured error types for stmtkit.

Every failure the wrapper surfaces is a ``StmtkitError`` carrying a
category, structured context (query text, parameter name, host) and the
chained driver exception, so callers can log or route failures without
parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure mode the caller can act on
    - **Rich Context:** Errors carry the query and parameter they concern
    - **Error Chaining:** The driver exception is kept as ``cause``
    - **Familiar bases:** Bind errors are ``TypeError``, missing columns are
      ``KeyError``, insert-id misuse is ``RuntimeError``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       StmtkitError                               │
        │  (category, context, cause)                                     │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError            ValidationError       DatabaseError      │
        │  (CONFIG)               (VALIDATION)          (DATABASE)         │
        │     │                        │                    │              │
        │  MissingConfigError      BindError            QueryError         │
        │  InvalidConfigError      (+ TypeError)        ColumnNotFoundError│
        │                                               (+ KeyError)       │
        │                                                                  │
        │  DatabaseConnectionError InsertIdError                           │
        │  (DATABASE)              (INTERNAL, + RuntimeError)              │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = QueryError("Table 'shop.nope' doesn't exist")
    >>> error.with_context(query="SELECT * FROM nope")
    QueryError(...)
    >>> error.context.query
    'SELECT * FROM nope'

Guardrails:
    ❌ DON'T: Raise a bare ``Exception`` from wrapper code
    ✅ DO: Use the StmtkitError subclass for the failure mode

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as ``cause=`` for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, stmtkit

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        DATABASE: Connection and query failures reported by the driver
        VALIDATION: Values that cannot be bound to a statement
        CONFIG: Missing or invalid connection settings
        INTERNAL: Misuse of the API (e.g. asking for a missing insert id)
        UNKNOWN: Uncategorized errors
    """

    DATABASE = "DATABASE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Only the fields relevant to a failure are set; ``to_dict()`` drops the
    rest so the context can be passed straight to a structured logger.

    Attributes:
        query: Original query text of the statement involved
        parameter: Name of the bound parameter involved
        column: Result column that was requested
        host: Database host of the connection
        database: Database (schema) name of the connection
        metadata: Additional key-value pairs
    """

    query: str | None = None
    parameter: str | None = None
    column: str | None = None
    host: str | None = None
    database: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["query", "parameter", "column", "host", "database"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class StmtkitError(Exception):
    """
    Base exception for all stmtkit errors.

    Subclasses set ``default_category``; the instance carries the message,
    an ``ErrorContext`` and the optional underlying exception as ``cause``
    (also wired to ``__cause__`` so tracebacks show the chain).

    Examples:
        >>> error = StmtkitError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'StmtkitError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> StmtkitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("Failed").with_context(query=sql)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(StmtkitError):
    """Configuration error. The settings must be fixed."""

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseConnectionError(StmtkitError):
    """The connection could not be established."""

    default_category = ErrorCategory.DATABASE


class DatabaseError(StmtkitError):
    """Database query or result error."""

    default_category = ErrorCategory.DATABASE


class QueryError(DatabaseError):
    """
    The driver failed to execute a statement.

    The message embeds the driver error class, its message and the full
    query text, e.g.::

        ProgrammingError: 1146 (42S02): Table 'shop.nope' doesn't exist;
        Query String was: SELECT * FROM nope
    """


class ColumnNotFoundError(DatabaseError, KeyError):
    """A named column is absent from the fetched result."""

    def __init__(self, column: str, **kwargs: Any):
        self.column = column
        super().__init__(f"key not found: {column}", **kwargs)
        self.context.column = column


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(StmtkitError):
    """A value was rejected before reaching the database."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class BindError(ValidationError, TypeError):
    """A value cannot be bound to a named parameter."""


# =============================================================================
# API MISUSE
# =============================================================================


class InsertIdError(StmtkitError, RuntimeError):
    """The insert id was requested but the statement inserted nothing."""

    default_category = ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "StmtkitError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "DatabaseConnectionError",
    "DatabaseError",
    "QueryError",
    "ColumnNotFoundError",
    "ValidationError",
    "BindError",
    "InsertIdError",
]
