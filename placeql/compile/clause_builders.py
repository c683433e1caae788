"""Clause-level SQL builders.

Each class renders exactly one placeholder form from one argument.
Column lists come from :mod:`placeql.schema.columns`; values are escaped by
the shared :class:`~placeql.compile.escaper.ValueEscaper`.

Classes
-------
ValueListBuilder          ``?...``        ``v, v, …``
IdentListBuilder          ``?ident...``   ``col, col, …``
ValuesClauseBuilder       ``?values``     ``(col, …) VALUES (v, …)``
MultiValuesClauseBuilder  ``?values...``  ``(col, …) VALUES (v, …), (v, …)``
SetClauseBuilder          ``?set``        ``SET col = v, …``
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from placeql.compile.context import TranslationContext
from placeql.compile.escaper import NULL, ValueEscaper
from placeql.errors import EmptyInputError, NoColumnsDerivedError, TypeMismatchError
from placeql.schema.columns import Purpose, column_specs, derive_values, is_record_type

_NOT_SPREADABLE = (str, bytes, bytearray, memoryview)


def is_spreadable(value: Any) -> bool:
    """Return ``True`` for sequences an expand placeholder may spread.

    Strings and byte sequences are sequences too, but are single values.
    """
    return isinstance(value, Sequence) and not isinstance(value, _NOT_SPREADABLE)


class ValueListBuilder:
    """Builds the comma-separated value list of ``?...``.

    An empty sequence renders ``NULL`` so ``x IN (?...)`` stays valid SQL and
    matches no row.
    """

    placeholder = "?..."

    def __init__(self, escaper: ValueEscaper) -> None:
        self._esc = escaper

    def build(self, values: Any) -> str:
        if not is_spreadable(values):
            raise TypeMismatchError(
                f"{self.placeholder} expects the argument to be a sequence, "
                f"got {type(values).__name__}",
                placeholder=self.placeholder,
            )
        if not values:
            return NULL
        return ", ".join(self._esc.escape(v, self.placeholder) for v in values)


class IdentListBuilder:
    """Builds the comma-separated identifier list of ``?ident...``."""

    placeholder = "?ident..."

    def __init__(self, ctx: TranslationContext) -> None:
        self._ctx = ctx

    def build(self, idents: Any) -> str:
        if not is_spreadable(idents) or not all(isinstance(i, str) for i in idents):
            raise TypeMismatchError(
                f"{self.placeholder} expects the argument to be a sequence of strings",
                placeholder=self.placeholder,
            )
        if not idents:
            raise EmptyInputError(
                f"empty sequence passed to {self.placeholder}", placeholder=self.placeholder
            )
        quote = self._ctx.dialect.escape_ident
        return ", ".join(quote(i) for i in idents)


class _ColumnClauseBuilder:
    """Shared plumbing for the builders that derive columns."""

    placeholder = ""

    def __init__(self, ctx: TranslationContext, escaper: ValueEscaper) -> None:
        self._ctx = ctx
        self._esc = escaper

    def _derive(self, value: Any, purpose: Purpose) -> tuple[list[str], list[Any]]:
        return derive_values(
            value,
            purpose,
            mapper=self._ctx.mapper,
            tag_key=self._ctx.tag_key,
            placeholder=self.placeholder,
        )

    def _column_list(self, cols: Sequence[str]) -> str:
        quote = self._ctx.dialect.escape_ident
        return ", ".join(quote(c) for c in cols)

    def _value_tuple(self, vals: Sequence[Any]) -> str:
        return "(" + ", ".join(self._esc.escape(v, self.placeholder) for v in vals) + ")"


class ValuesClauseBuilder(_ColumnClauseBuilder):
    """Builds ``(col, …) VALUES (v, …)`` from one record or mapping."""

    placeholder = "?values"

    def build(self, value: Any) -> str:
        cols, vals = self._derive(value, Purpose.INSERT)
        return f"({self._column_list(cols)}) VALUES {self._value_tuple(vals)}"


class SetClauseBuilder(_ColumnClauseBuilder):
    """Builds ``SET col = v, …`` from one record or mapping.

    Columns tagged ``selectonly`` are kept; ``omitupdate`` ones are not.
    """

    placeholder = "?set"

    def build(self, value: Any) -> str:
        cols, vals = self._derive(value, Purpose.UPDATE)
        quote = self._ctx.dialect.escape_ident
        pairs = [
            f"{quote(c)} = {self._esc.escape(v, self.placeholder)}" for c, v in zip(cols, vals)
        ]
        return "SET " + ", ".join(pairs)


class MultiValuesClauseBuilder(_ColumnClauseBuilder):
    """Builds a multi-row ``VALUES`` list from a sequence of records.

    Every element must be an instance of the same record type; the column
    header is derived once from that type.
    """

    placeholder = "?values..."

    def build(self, rows: Any) -> str:
        if not is_spreadable(rows):
            raise TypeMismatchError(
                f"{self.placeholder} expects the argument to be a sequence of records",
                placeholder=self.placeholder,
            )
        if not rows:
            raise EmptyInputError(
                f"empty sequence passed to {self.placeholder}", placeholder=self.placeholder
            )
        record_type = type(rows[0])
        if not is_record_type(record_type):
            raise TypeMismatchError(
                f"{self.placeholder} expects the argument to be a sequence of records, "
                f"got {record_type.__name__} elements",
                placeholder=self.placeholder,
            )
        for row in rows:
            if type(row) is not record_type:
                raise TypeMismatchError(
                    f"{self.placeholder} expects elements of one type, "
                    f"got {record_type.__name__} and {type(row).__name__}",
                    placeholder=self.placeholder,
                )

        specs = column_specs(
            record_type, Purpose.INSERT, mapper=self._ctx.mapper, tag_key=self._ctx.tag_key
        )
        if not specs:
            raise NoColumnsDerivedError(
                f"no columns derived from {record_type.__name__}", placeholder=self.placeholder
            )
        tuples = ", ".join(self._value_tuple([s.value_of(r) for s in specs]) for r in rows)
        return f"({self._column_list([s.name for s in specs])}) VALUES {tuples}"
