"""Long-lived preprocessor bound to one dialect.

``Preprocessor`` is what applications keep around: it holds the dialect and
naming settings, and builds a fresh :class:`~placeql.compile.translator.Translator`
for every call, so one instance can be shared freely between threads.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from placeql.compile.base import CompiledSQL, Dialect
from placeql.compile.context import TranslationContext
from placeql.compile.registry import DialectFactory
from placeql.compile.translator import Translator
from placeql.schema.converters import dialect_for_engine
from placeql.schema.naming import to_underscore
from placeql.schema.options import PreprocessorConfig

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine

logger = logging.getLogger(__name__)


class Preprocessor:
    """Translates templates for one dialect.

    Args:
        dialect: A :class:`Dialect` instance or a registered target name.
        mapper: Column name function for fields without an explicit name.
        tag_key: Metadata key holding ``"name,option"`` field tags.

    Raises:
        ConfigurationError: If ``dialect`` names no registered dialect.

    Example::

        pre = Preprocessor("postgres")
        pre.compile("SELECT * FROM [user] WHERE [id] IN (?...)", [1, 2])
        # 'SELECT * FROM "user" WHERE "id" IN (1, 2)'
    """

    def __init__(
        self,
        dialect: Dialect | str,
        mapper: Callable[[str], str] = to_underscore,
        tag_key: str = "db",
    ) -> None:
        if isinstance(dialect, str):
            dialect = DialectFactory.create(dialect)
        self._ctx = TranslationContext(dialect=dialect, mapper=mapper, tag_key=tag_key)
        logger.debug("created preprocessor for %s", dialect.dialect_name)

    @classmethod
    def from_config(cls, config: PreprocessorConfig) -> Preprocessor:
        return cls(config.dialect, mapper=config.mapper, tag_key=config.tag_key)

    @classmethod
    def for_engine(
        cls,
        engine: Engine | Connection,
        mapper: Callable[[str], str] = to_underscore,
        tag_key: str = "db",
    ) -> Preprocessor:
        """Build a preprocessor for the backend of a SQLAlchemy engine."""
        return cls(dialect_for_engine(engine), mapper=mapper, tag_key=tag_key)

    @property
    def dialect(self) -> Dialect:
        return self._ctx.dialect

    def translator(self, prepared: bool = False) -> Translator:
        """Return a fresh translator sharing this preprocessor's settings."""
        ctx = self._ctx.for_prepared() if prepared else self._ctx
        return Translator(ctx)

    def compile(self, template: str, *args: Any) -> str:
        """Interpolate ``args`` into ``template`` and return the SQL text.

        Raises:
            TranslationError: (or subclass) if the template or arguments are
                invalid.
        """
        return self.translator().translate(template, args)

    def prepare(self, template: str, *args: Any) -> CompiledSQL:
        """Translate ``template`` for a prepared statement.

        Bare ``?`` placeholders become the dialect's positional markers;
        ``args`` feed the build-time placeholders only (``?ident``,
        ``?ident...``, ``?sql``).  Bind the runtime values with
        :meth:`CompiledSQL.bind`::

            stmt = pre.prepare("SELECT * FROM ?ident WHERE [id] = ?", "user")
            cursor.execute(*stmt.bind(42))

        Raises:
            UsageRestrictionError: If the template uses ``?...``,
                ``?values``, ``?values...`` or ``?set``.
        """
        translator = self.translator(prepared=True)
        sql = translator.translate(template, args)
        return CompiledSQL(
            sql=sql,
            dialect=self._ctx.dialect.dialect_name,
            placeholders=translator.placeholders,
        )
