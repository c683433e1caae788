"""SQLite dialect."""
from __future__ import annotations

from datetime import datetime

from placeql.compile.base import Dialect


class SQLiteDialect(Dialect):
    """Escapes values for SQLite.

    Parameter style: ``?``, compatible with Python's built-in ``sqlite3``
    positional execution (``cursor.execute(sql, tuple)``).

    SQLite has no boolean type; ``TRUE``/``FALSE`` are stored as 1 and 0, so
    that is what :meth:`escape_bool` emits.  The ``sqlite3`` module refuses
    query text containing NUL characters, so NULs inside strings are
    spliced in with ``char(0)``.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def escape_ident(self, ident: str) -> str:
        escaped = ident.replace('"', '""')
        return f'"{escaped}"'

    def escape_bool(self, value: bool) -> str:
        return "1" if value else "0"

    def escape_string(self, value: str) -> str:
        if "\x00" not in value:
            return self._quote(value)
        parts = " || char(0) || ".join(self._quote(p) for p in value.split("\x00"))
        return f"({parts})"

    def escape_bytes(self, value: bytes) -> str:
        return f"X'{value.hex()}'"

    def escape_time(self, value: datetime) -> str:
        return f"'{self.format_timestamp(value)}'"

    def placeholder(self, n: int) -> str:
        return "?"

    @staticmethod
    def _quote(text: str) -> str:
        escaped = text.replace("'", "''")
        return f"'{escaped}'"
