"""placeQL – SQL templates with safely escaped placeholders.

Write the SQL, let placeQL quote it.

Public API
----------
``compile_template``
    Interpolate arguments into a template and return the SQL text.

``prepare_template``
    Translate a template for a prepared statement; bare ``?`` placeholders
    become the dialect's positional markers.

``Preprocessor``
    Long-lived object bound to one dialect, with ``compile`` and ``prepare``.

Template grammar
----------------
``[name]``       identifier, no argument consumed
``?``            one escaped value
``?...``         comma-separated values from a sequence
``?ident``       one identifier
``?ident...``    comma-separated identifiers
``?values``      ``(col, …) VALUES (v, …)`` from a record or mapping
``?values...``   multi-row ``VALUES`` from a sequence of records
``?set``         ``SET col = v, …`` from a record or mapping
``?sql``         raw SQL text or a :class:`SQLMarshaler` fragment (alias ``?raw``)

Extensibility
-------------
New dialects can be registered via::

    from placeql.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(Dialect):
        ...

After registration, any ``Preprocessor`` or ``PreprocessorConfig`` accepts
``dialect="oracle"``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from placeql.compile.base import CompiledSQL, Dialect
from placeql.compile.context import PlaceholderCounter, TranslationContext
from placeql.compile.mysql import MySQLDialect
from placeql.compile.postgres import PostgresDialect
from placeql.compile.registry import DialectFactory
from placeql.compile.sqlite import SQLiteDialect
from placeql.compile.translator import Translator
from placeql.errors import (
    ArgumentCountError,
    ConfigurationError,
    EmptyInputError,
    EncodingError,
    ExpandUnsupportedError,
    NoColumnsDerivedError,
    PlaceQLError,
    TemplateSyntaxError,
    TranslationError,
    TypeMismatchError,
    UnknownPlaceholderError,
    UnsupportedValueTypeError,
    UsageRestrictionError,
)
from placeql.preprocessor import Preprocessor
from placeql.schema.capabilities import Nullable, SQLMarshaler, SQLScanner, SQLValuer
from placeql.schema.columns import (
    ColumnSpec,
    OnlyCols,
    Purpose,
    column,
    column_names,
    column_specs,
    only_cols,
)
from placeql.schema.converters import dialect_for_engine
from placeql.schema.fragments import Fragment, Where
from placeql.schema.naming import to_underscore
from placeql.schema.options import PreprocessorConfig

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class("mysql", MySQLDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("sqlite", SQLiteDialect)

__all__ = [
    # Entry points
    "compile_template",
    "prepare_template",
    "Preprocessor",
    "PreprocessorConfig",
    "CompiledSQL",
    # Translation
    "Translator",
    "TranslationContext",
    "PlaceholderCounter",
    # Dialects
    "Dialect",
    "DialectFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "dialect_for_engine",
    # Records
    "ColumnSpec",
    "OnlyCols",
    "Purpose",
    "column",
    "column_names",
    "column_specs",
    "only_cols",
    "to_underscore",
    # Capabilities and fragments
    "Nullable",
    "SQLMarshaler",
    "SQLScanner",
    "SQLValuer",
    "Fragment",
    "Where",
    # Errors
    "PlaceQLError",
    "ConfigurationError",
    "TranslationError",
    "TemplateSyntaxError",
    "ArgumentCountError",
    "UnknownPlaceholderError",
    "ExpandUnsupportedError",
    "TypeMismatchError",
    "UnsupportedValueTypeError",
    "EncodingError",
    "EmptyInputError",
    "NoColumnsDerivedError",
    "UsageRestrictionError",
]


def compile_template(
    template: str,
    *args: Any,
    dialect: Dialect | str = "mysql",
    mapper: Callable[[str], str] = to_underscore,
    tag_key: str = "db",
) -> str:
    """Interpolate ``args`` into ``template`` and return the SQL text.

    This is the one-shot form of :meth:`Preprocessor.compile`::

        sql = placeql.compile_template(
            "INSERT INTO [user] ?values", user, dialect="postgres"
        )

    Args:
        template: SQL text with bracket identifiers and placeholders.
        *args: One argument per argument-consuming placeholder.
        dialect: A :class:`Dialect` instance or registered target name.
        mapper: Column name function for fields without an explicit name.
        tag_key: Metadata key holding ``"name,option"`` field tags.

    Returns:
        The translated SQL text.

    Raises:
        ConfigurationError: If ``dialect`` names no registered dialect.
        TranslationError: (or subclass) if the template or arguments are
            invalid.
    """
    return Preprocessor(dialect, mapper=mapper, tag_key=tag_key).compile(template, *args)


def prepare_template(
    template: str,
    *args: Any,
    dialect: Dialect | str = "mysql",
    mapper: Callable[[str], str] = to_underscore,
    tag_key: str = "db",
) -> CompiledSQL:
    """Translate ``template`` for a prepared statement.

    The one-shot form of :meth:`Preprocessor.prepare`::

        stmt = placeql.prepare_template(
            "SELECT * FROM [user] WHERE [id] = ?", dialect="postgres"
        )
        stmt.sql          # 'SELECT * FROM "user" WHERE "id" = $1'
        stmt.placeholders  # 1

    Raises:
        ConfigurationError: If ``dialect`` names no registered dialect.
        UsageRestrictionError: If the template interpolates values at build
            time (``?...``, ``?values``, ``?values...``, ``?set``).
    """
    return Preprocessor(dialect, mapper=mapper, tag_key=tag_key).prepare(template, *args)
