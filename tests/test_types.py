"""Tests for ``stmtkit.types``."""

import pydantic
import pytest

from stmtkit.errors import InvalidConfigError, MissingConfigError
from stmtkit.types import UTC_OFFSET, DatabaseConfig

CONFIGURATION = {
    "host": "example.org",
    "port": "3306",
    "database": "my_database",
    "user": "john.doe",
    "password": "secret",
}


class TestFromMapping:
    def test_basic(self):
        config = DatabaseConfig.from_mapping(CONFIGURATION)
        assert config.host == "example.org"
        assert config.port == 3306
        assert config.database == "my_database"
        assert config.user == "john.doe"
        assert config.password == "secret"
        assert config.time_zone == UTC_OFFSET

    @pytest.mark.parametrize("key", ["host", "port", "database", "user", "password"])
    def test_missing_key(self, key):
        incomplete = {k: v for k, v in CONFIGURATION.items() if k != key}
        with pytest.raises(MissingConfigError) as exc_info:
            DatabaseConfig.from_mapping(incomplete)
        assert exc_info.value.key == key

    def test_invalid_port(self):
        with pytest.raises(InvalidConfigError, match="port"):
            DatabaseConfig.from_mapping({**CONFIGURATION, "port": "mysql"})

    def test_known_extras_and_options(self):
        config = DatabaseConfig.from_mapping(
            {**CONFIGURATION, "connect_timeout": 3, "ssl_disabled": True}
        )
        assert config.connect_timeout == 3
        assert config.options == {"ssl_disabled": True}


class TestConnectKwargs:
    def test_session_settings(self):
        kwargs = DatabaseConfig.from_mapping(CONFIGURATION).connect_kwargs()
        assert kwargs["charset"] == "utf8mb4"
        assert kwargs["collation"] == "utf8mb4_unicode_ci"
        assert kwargs["time_zone"] == "+00:00"
        assert kwargs["connection_timeout"] == 10
        assert kwargs["autocommit"] is True

    def test_options_passed_through(self):
        config = DatabaseConfig(host="h", options={"ssl_disabled": True})
        assert config.connect_kwargs()["ssl_disabled"] is True

    def test_fixed_fields_win_over_options(self):
        config = DatabaseConfig(host="h", options={"host": "other"})
        assert config.connect_kwargs()["host"] == "h"


class TestDescribe:
    def test_no_password(self):
        summary = DatabaseConfig.from_mapping(CONFIGURATION).describe()
        assert summary == {"host": "example.org", "port": 3306, "database": "my_database", "user": "john.doe"}

    def test_repr_hides_password(self):
        assert "secret" not in repr(DatabaseConfig.from_mapping(CONFIGURATION))


def test_from_env(monkeypatch):
    monkeypatch.setenv("DB_HOST", "env-host")
    monkeypatch.setenv("DB_NAME", "env-db")
    monkeypatch.setenv("DB_PASSWORD", "pw")

    config = DatabaseConfig.from_env()

    assert config.host == "env-host"
    assert config.database == "env-db"
    assert config.password == "pw"
    assert config.port == 3306


def test_from_env_invalid_port(monkeypatch):
    monkeypatch.setenv("DB_PORT", "mysql")

    with pytest.raises(InvalidConfigError, match="port") as exc_info:
        DatabaseConfig.from_env()

    assert exc_info.value.key == "port"
    assert exc_info.value.value == "mysql"
    assert isinstance(exc_info.value.__cause__, pydantic.ValidationError)
