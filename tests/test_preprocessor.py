"""Unit tests for Preprocessor, the module-level entry points and configuration."""

from __future__ import annotations

import pydantic
import pytest

import placeql
from placeql import (
    CompiledSQL,
    ConfigurationError,
    Fragment,
    Preprocessor,
    PreprocessorConfig,
    UsageRestrictionError,
    Where,
)
from placeql.compile.postgres import PostgresDialect
from tests.fixtures import FakeDialect, Row, User


def test_compile_template_defaults_to_mysql():
    sql = placeql.compile_template("SELECT * FROM [user] WHERE [name] = ?", "O'Brien")
    assert sql == "SELECT * FROM `user` WHERE `name` = 'O\\'Brien'"


def test_compile_template_postgres():
    sql = placeql.compile_template(
        "INSERT INTO [user] ?values", Row(1, "it's"), dialect="postgres"
    )
    assert sql == 'INSERT INTO "user" ("id", "name") VALUES (1, \'it\'\'s\')'


def test_compile_template_with_dialect_instance():
    assert placeql.compile_template("[a] = ?", True, dialect=FakeDialect()) == "{a} = true"


def test_prepare_template_postgres_markers():
    stmt = placeql.prepare_template(
        "SELECT ?ident... FROM [user] WHERE [id] = ? AND ?sql",
        placeql.column_names(User),
        Where().and_("[name] = ?"),
        dialect="postgres",
    )
    assert isinstance(stmt, CompiledSQL)
    assert stmt.sql == (
        'SELECT "id", "name", "user_id" FROM "user" WHERE "id" = $1 AND ("name" = $2)'
    )
    assert stmt.placeholders == 2
    assert stmt.dialect == "postgres"
    assert stmt.bind(1, "Bob") == (stmt.sql, (1, "Bob"))


def test_prepare_refuses_set():
    with pytest.raises(UsageRestrictionError):
        placeql.prepare_template("UPDATE [t] ?set", dialect="sqlite")


def test_unknown_dialect_name():
    with pytest.raises(ConfigurationError, match="oracle"):
        Preprocessor("oracle")


def test_preprocessor_is_reusable():
    pre = Preprocessor(PostgresDialect())
    assert pre.compile("?", 1) == "1"
    assert pre.prepare("? ?").sql == "$1 $2"
    # Each prepare call numbers its markers from 1.
    assert pre.prepare("?").sql == "$1"
    assert pre.dialect.dialect_name == "postgres"


def test_custom_mapper_and_tag_key():
    pre = Preprocessor("sqlite", mapper=str.upper)
    assert pre.compile("?values", Row(1, "a")) == '("ID", "NAME") VALUES (1, \'a\')'


def test_fragment_with_args():
    pre = Preprocessor("mysql")
    assert pre.compile("SELECT ?sql", Fragment("?ident FROM [t]", "c")) == "SELECT `c` FROM `t`"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def test_config_defaults():
    config = PreprocessorConfig()
    assert config.dialect == "mysql"
    assert config.tag_key == "db"
    assert config.mapper is placeql.to_underscore


def test_config_builds_preprocessor():
    pre = Preprocessor.from_config(PreprocessorConfig(dialect="postgres"))
    assert pre.compile("[x]") == '"x"'


def test_config_rejects_unknown_dialect():
    with pytest.raises(pydantic.ValidationError, match="unknown dialect 'oracle'"):
        PreprocessorConfig(dialect="oracle")


def test_config_rejects_extra_fields():
    with pytest.raises(pydantic.ValidationError):
        PreprocessorConfig(dialect="mysql", prepared=True)


def test_config_rejects_empty_tag_key():
    with pytest.raises(pydantic.ValidationError):
        PreprocessorConfig(tag_key="")


def test_config_is_frozen():
    config = PreprocessorConfig()
    with pytest.raises(pydantic.ValidationError):
        config.dialect = "sqlite"  # type: ignore[misc]
