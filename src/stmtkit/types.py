"""Connection configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pydantic

from stmtkit.errors import InvalidConfigError, MissingConfigError

UTC_OFFSET = "+00:00"
"""Session time zone forced on every connection."""

_REQUIRED_KEYS = ("host", "port", "database", "user", "password")


@dataclass
class DatabaseConfig:
    """
    Configuration for one MySQL / MariaDB connection.

    Usually built with :meth:`from_mapping` from the application's config
    (``{"host": ..., "port": ..., "database": ..., "user": ..., "password": ...}``)
    or with :meth:`from_env`.
    """

    host: str = "localhost"
    port: int = 3306
    database: str = ""
    user: str = ""
    password: str = field(default="", repr=False)

    charset: str = "utf8mb4"
    collation: str = "utf8mb4_unicode_ci"
    time_zone: str = UTC_OFFSET
    connect_timeout: int = 10

    # Extra keyword arguments for mysql.connector.connect()
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, configuration: Mapping[str, Any]) -> DatabaseConfig:
        """Build a config from a mapping with host/port/database/user/password keys.

        Raises:
            MissingConfigError: if one of the five keys is absent
            InvalidConfigError: if the port is not an integer
        """
        for key in _REQUIRED_KEYS:
            if key not in configuration:
                raise MissingConfigError(key)

        port = configuration["port"]
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise InvalidConfigError("port", port) from None

        extra = {k: v for k, v in configuration.items() if k not in _REQUIRED_KEYS}
        known = {k: extra.pop(k) for k in ("charset", "collation", "connect_timeout") if k in extra}

        return cls(
            host=str(configuration["host"]),
            port=port,
            database=str(configuration["database"]),
            user=str(configuration["user"]),
            password=str(configuration["password"]),
            options=extra,
            **known,
        )

    @classmethod
    def from_env(cls) -> DatabaseConfig:
        """Build a config from ``DB_*`` environment variables.

        Raises:
            InvalidConfigError: if a variable fails validation (e.g. a non-numeric ``DB_PORT``)
        """
        from stmtkit.settings import DatabaseSettings

        try:
            settings = DatabaseSettings()
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(part) for part in first["loc"]) or "settings"
            raise InvalidConfigError(
                key, first.get("input"), f"Invalid configuration for {key}: {first['msg']}"
            ) from e
        return cls(
            host=settings.host,
            port=settings.port,
            database=settings.database,
            user=settings.user,
            password=settings.password.get_secret_value(),
        )

    def connect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``mysql.connector.connect()``."""
        return {
            **self.options,
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "password": self.password,
            "charset": self.charset,
            "collation": self.collation,
            "time_zone": self.time_zone,
            "connection_timeout": self.connect_timeout,
            "autocommit": True,
        }

    def describe(self) -> dict[str, Any]:
        """Loggable summary, without credentials."""
        return {"host": self.host, "port": self.port, "database": self.database, "user": self.user}


__all__ = [
    "UTC_OFFSET",
    "DatabaseConfig",
]
