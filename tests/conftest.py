"""
Shared pytest fixtures for stmtkit tests.

This module provides:
- ``native`` / ``db`` fixtures wiring ``tests._support.fakes`` into a ``Connection``
- Auto-marking of tests as ``unit`` / ``integration`` by location

Usage:
    from tests._support.fakes import FakeResult

    def test_select(db, native):
        native.script(FakeResult(columns=("x",), rows=[(1,)]))
        assert db.query("SELECT 1 AS x").get_all() == [{"x": 1}]
"""

from __future__ import annotations

from pathlib import Path

import pytest

from stmtkit.connection import Connection
from stmtkit.types import DatabaseConfig
from tests._support.fakes import FakeNativeConnection


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config() -> DatabaseConfig:
    return DatabaseConfig(
        host="db.test",
        port=3306,
        database="shop",
        user="shop",
        password="secret",
    )


@pytest.fixture
def native() -> FakeNativeConnection:
    return FakeNativeConnection()


@pytest.fixture
def db(config: DatabaseConfig, native: FakeNativeConnection) -> Connection:
    """A Connection wrapping the fake native connection."""
    return Connection(config, native=native)


@pytest.fixture(autouse=True)
def clean_db_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep DB_* variables and stray .env files from leaking into tests."""
    for key in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_DATABASE", "DB_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
