"""Dialect abstractions: CompiledSQL and the Dialect ABC.

The Strategy pattern is used:
- ``Dialect`` declares the six escaping operations the translator needs.
- ``MySQLDialect``, ``PostgresDialect`` and ``SQLiteDialect`` implement them
  for one database family each.

Dialects are stateless; a single instance may be shared by any number of
concurrent translations.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from placeql.errors import ArgumentCountError


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful translation.

    Attributes:
        sql: The translated SQL text.
        dialect: The target dialect name (e.g. ``'mysql'``).
        placeholders: Number of positional parameter markers left in ``sql``
            for the driver to bind.  Always ``0`` outside prepared mode.
    """

    sql: str
    dialect: str
    placeholders: int = 0

    def bind(self, *args: Any) -> tuple[str, tuple[Any, ...]]:
        """Return ``(sql, args)`` ready for a DB-API ``cursor.execute`` call.

        Args:
            *args: One value per positional marker, in marker order.

        Returns:
            The SQL text and the argument tuple.

        Raises:
            ArgumentCountError: If ``len(args)`` differs from
                :attr:`placeholders`.
        """
        if len(args) != self.placeholders:
            raise ArgumentCountError(
                f"statement has {self.placeholders} parameter markers, "
                f"got {len(args)} arguments",
                expected=self.placeholders,
                given=len(args),
            )
        return self.sql, args

    def __str__(self) -> str:
        return self.sql


class Dialect(ABC):
    """Abstract base for the escaping rules of one database family.

    Every method returns SQL text and never raises: malformed input at this
    layer is a programming error, filtered out by the value escaper before
    the dialect is reached.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'mysql'``)."""

    @abstractmethod
    def escape_ident(self, ident: str) -> str:
        """Return a safely quoted identifier (table or column name).

        Args:
            ident: Unquoted identifier.

        Returns:
            Quoted identifier.
        """

    @abstractmethod
    def escape_bool(self, value: bool) -> str:
        """Return the SQL literal for a boolean."""

    @abstractmethod
    def escape_string(self, value: str) -> str:
        """Return a quoted, escaped string literal.

        Args:
            value: The string; already validated as encodable UTF-8.

        Returns:
            SQL string literal.
        """

    @abstractmethod
    def escape_bytes(self, value: bytes) -> str:
        """Return a binary literal for a byte sequence."""

    @abstractmethod
    def escape_time(self, value: datetime) -> str:
        """Return a timestamp literal."""

    @abstractmethod
    def placeholder(self, n: int) -> str:
        """Return the ``n``-th positional parameter marker (1-based).

        Args:
            n: Marker position, starting from 1.

        Returns:
            Dialect-specific marker, e.g. ``?`` or ``$3``.
        """

    @staticmethod
    def format_timestamp(value: datetime, with_offset: bool = False) -> str:
        """Format ``value`` as ``YYYY-MM-DD HH:MM:SS[.ffffff][+HH:MM]``.

        Fractional seconds lose their trailing zeros and are omitted when
        zero.  The UTC offset is appended only when ``with_offset`` is set
        and ``value`` is timezone-aware.
        """
        text = (
            f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
            f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        )
        if value.microsecond:
            text += f".{value.microsecond:06d}".rstrip("0")
        offset = value.utcoffset()
        if with_offset and offset is not None:
            total = int(offset.total_seconds())
            sign = "-" if total < 0 else "+"
            hours, minutes = divmod(abs(total) // 60, 60)
            text += f"{sign}{hours:02d}:{minutes:02d}"
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
