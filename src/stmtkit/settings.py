"""Environment-driven connection settings.

``DatabaseSettings`` is the fallback configuration path: when a
``Connection`` is opened without an explicit configuration the values are
read from the environment (and a ``.env`` file in the working directory).
``DB_LOG_LEVEL`` is the default level for ``stmtkit.logging.configure_logging()``.

==================  ============  ===========
Environment         Field         Default
==================  ============  ===========
``DB_HOST``         host          localhost
``DB_PORT``         port          3306
``DB_USER``         user          (empty)
``DB_PASSWORD``     password      (empty)
``DB_NAME``         database      (empty)
``DB_LOG_LEVEL``    log_level     INFO
==================  ============  ===========

Examples:
    >>> from stmtkit.settings import DatabaseSettings
    >>> settings = DatabaseSettings(host="db.example.org", database="shop")
    >>> settings.port
    3306

Tags:
    settings, configuration, pydantic, environment, stmtkit

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Connection settings read from ``DB_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = "localhost"
    port: int = Field(default=3306, gt=0, lt=65536)
    user: str = ""
    password: SecretStr = SecretStr("")
    database: str = Field(
        default="",
        validation_alias=AliasChoices("DB_NAME", "DB_DATABASE"),
    )

    log_level: str = "INFO"
