"""Shared pytest fixtures for placeQL unit and integration tests."""
from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest

from placeql import Preprocessor
from placeql.compile.context import TranslationContext
from tests.fixtures import USERS_DDL, FakeDialect


@pytest.fixture()
def fake_ctx() -> TranslationContext:
    return TranslationContext(dialect=FakeDialect())


@pytest.fixture(scope="session")
def sqlite_pre() -> Preprocessor:
    return Preprocessor("sqlite")


@pytest.fixture()
def db() -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(":memory:")
    conn.executescript(USERS_DDL)
    yield conn
    conn.close()
