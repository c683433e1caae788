"""Value escaping.

``ValueEscaper`` turns one Python value into dialect-safe literal text.
The set of escapable kinds is closed and enumerated by :class:`ValueKind`;
:func:`classify` is the only place a runtime type is mapped to a kind.  The
single open extension point is :class:`~placeql.schema.capabilities.SQLValuer`,
which lets a value convert itself to one of the closed kinds first.
"""
from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from placeql.compile.context import TranslationContext
from placeql.errors import EncodingError, UnsupportedValueTypeError
from placeql.schema.capabilities import SQLValuer

NULL = "NULL"


class ValueKind(Enum):
    """The escapable kinds of value."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    TIMESTAMP = "timestamp"


def classify(value: Any) -> ValueKind | None:
    """Return the kind of ``value``, or ``None`` if it cannot be escaped.

    ``bool`` is tested before ``int`` because it is a subclass of it.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BYTES
    if isinstance(value, datetime):
        return ValueKind.TIMESTAMP
    return None


def format_float(value: float) -> str:
    """Return the shortest round-trip positional decimal for ``value``.

    ``repr`` gives the shortest digits that round-trip; ``Decimal`` turns
    them into positional notation (``1e-07`` -> ``0.0000001``).
    """
    return format(Decimal(repr(value)).normalize(), "f")


class ValueEscaper:
    """Escapes scalar values with the context's dialect.

    Args:
        ctx: Translation context supplying the dialect.
    """

    def __init__(self, ctx: TranslationContext) -> None:
        self._ctx = ctx

    def escape(self, value: Any, placeholder: str | None = None) -> str:
        """Return the SQL literal for ``value``.

        A :class:`SQLValuer` is unwrapped first; exceptions raised by its
        ``sql_value`` propagate unchanged.

        Args:
            value: The value to escape.
            placeholder: Placeholder reported in errors.

        Raises:
            UnsupportedValueTypeError: If the value's kind is not escapable,
                or it is a NaN or infinite float.
            EncodingError: If a string cannot be encoded as UTF-8.
        """
        if isinstance(value, SQLValuer) and not isinstance(value, type):
            value = value.sql_value()

        kind = classify(value)
        if kind is None:
            raise UnsupportedValueTypeError(
                f"invalid argument type: {type(value).__name__}", placeholder=placeholder
            )
        return self._render(kind, value, placeholder)

    def _render(self, kind: ValueKind, value: Any, placeholder: str | None) -> str:
        dialect = self._ctx.dialect
        if kind is ValueKind.NULL:
            return NULL
        if kind is ValueKind.BOOL:
            return dialect.escape_bool(value)
        if kind is ValueKind.INT:
            return int.__str__(int(value))
        if kind is ValueKind.FLOAT:
            if not math.isfinite(value):
                raise UnsupportedValueTypeError(
                    f"non-finite float {value!r} has no SQL literal", placeholder=placeholder
                )
            return format_float(value)
        if kind is ValueKind.STRING:
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise EncodingError(
                    f"argument is not a valid UTF-8 string: {exc.reason} at {exc.start}",
                    placeholder=placeholder,
                ) from exc
            return dialect.escape_string(str.__str__(value))
        if kind is ValueKind.BYTES:
            return dialect.escape_bytes(bytes(value))
        if kind is ValueKind.TIMESTAMP:
            return dialect.escape_time(value)
        raise UnsupportedValueTypeError(f"no renderer for {kind}", placeholder=placeholder)
