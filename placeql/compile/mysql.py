"""MySQL dialect."""

from __future__ import annotations

from datetime import datetime

from placeql.compile.base import Dialect

# See https://dev.mysql.com/doc/refman/8.0/en/string-literals.html
_ESCAPES: dict[int, str] = {
    0x00: "\\0",
    ord("'"): "\\'",
    ord('"'): '\\"',
    ord("\b"): "\\b",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
    0x1A: "\\Z",
    ord("\\"): "\\\\",
}


def _quote(text: str) -> str:
    return "'" + text.translate(_ESCAPES) + "'"


class MySQLDialect(Dialect):
    """Escapes values for MySQL and MariaDB.

    Strings are backslash-escaped, so the connection must not run with
    ``NO_BACKSLASH_ESCAPES``.  Byte sequences are prefixed with the
    ``_binary`` introducer.

    Note: :meth:`escape_time` ignores the time zone.  Convert aware
    datetimes to the connection's time zone first.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def escape_ident(self, ident: str) -> str:
        escaped = ident.replace("`", "``")
        return f"`{escaped}`"

    def escape_bool(self, value: bool) -> str:
        return "1" if value else "0"

    def escape_string(self, value: str) -> str:
        return _quote(value)

    def escape_bytes(self, value: bytes) -> str:
        if value.isascii():
            return "_binary" + _quote(value.decode("ascii"))
        # Non-ASCII bytes would be re-encoded with the query text.
        return f"X'{value.hex()}'"

    def escape_time(self, value: datetime) -> str:
        return f"'{self.format_timestamp(value)}'"

    def placeholder(self, n: int) -> str:
        return "?"
