"""PostgreSQL dialect."""

from __future__ import annotations

from datetime import datetime

from placeql.compile.base import Dialect


class PostgresDialect(Dialect):
    """Escapes values for PostgreSQL.

    Parameter markers are numbered: ``$1``, ``$2``, ... (``asyncpg`` and
    server-side ``PREPARE`` style).

    String literals assume ``standard_conforming_strings = on`` (the default
    since 9.1), so backslashes are ordinary characters and only quotes are
    doubled.  PostgreSQL cannot store NUL characters in text values; such
    strings are passed through and rejected by the server.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def escape_ident(self, ident: str) -> str:
        escaped = ident.replace('"', '""')
        return f'"{escaped}"'

    def escape_bool(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"

    def escape_string(self, value: str) -> str:
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    def escape_bytes(self, value: bytes) -> str:
        return f"'\\x{value.hex()}'::bytea"

    def escape_time(self, value: datetime) -> str:
        return f"'{self.format_timestamp(value, with_offset=True)}'"

    def placeholder(self, n: int) -> str:
        return f"${n}"
