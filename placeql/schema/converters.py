"""Dialect lookup for SQLAlchemy engines.

:func:`dialect_for_engine` picks the registered dialect matching the
backend of a SQLAlchemy engine or connection, so translated SQL can be run
with ``exec_driver_sql``.

Install the optional dependency before using this module::

    pip install "placeql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from placeql import Preprocessor

    engine = create_engine("sqlite:///app.db")
    pre = Preprocessor.for_engine(engine)
    with engine.connect() as conn:
        conn.exec_driver_sql(pre.compile("SELECT * FROM [user] WHERE [id] = ?", 1))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from placeql.compile.base import Dialect
from placeql.compile.registry import DialectFactory
from placeql.errors import ConfigurationError

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine

#: SQLAlchemy dialect names mapped to dialect targets.
ENGINE_TARGETS: dict[str, str] = {
    "mysql": "mysql",
    "mariadb": "mysql",
    "postgresql": "postgres",
    "sqlite": "sqlite",
}


def dialect_target_for_engine(engine: Engine | Connection) -> str:
    """Return the dialect target name for ``engine``.

    Args:
        engine: A SQLAlchemy :class:`~sqlalchemy.engine.Engine` or
            :class:`~sqlalchemy.engine.Connection`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
        ConfigurationError: If the engine's backend has no dialect.
    """
    try:
        import sqlalchemy  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for dialect_for_engine(). "
            'Install it with: pip install "placeql[sqlalchemy]"'
        ) from exc

    name = engine.dialect.name
    target = ENGINE_TARGETS.get(name)
    if target is None:
        raise ConfigurationError(
            f"No dialect for SQLAlchemy backend '{name}'. "
            f"Supported backends: {sorted(ENGINE_TARGETS)}.",
            registered=DialectFactory.registered_targets(),
        )
    return target


def dialect_for_engine(engine: Engine | Connection) -> Dialect:
    """Return a dialect instance for ``engine``; see :func:`dialect_target_for_engine`."""
    return DialectFactory.create(dialect_target_for_engine(engine))
