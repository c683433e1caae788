"""Column derivation from records and mappings.

A *record* is a dataclass or a pydantic model.  Its fields are walked in
declaration order; each public field becomes a column unless its tag says
otherwise.  A field whose type is itself a record is flattened depth-first,
unless the nested type is a *leaf*:

* a timestamp type,
* when writing (``INSERT`` / ``UPDATE``), a :class:`SQLValuer`,
* when reading (``SELECT``), a :class:`SQLScanner`.

Field tags use the ``"name,option"`` syntax and live under the tag key
(``"db"`` by default)::

    @dataclass
    class User:
        id: int = column("id,selectonly")
        name: str = column("user_name")
        cache: dict = column("-", default_factory=dict)

    class Account(BaseModel):
        id: int = Field(json_schema_extra={"db": ",omitupdate"})

Options: ``selectonly`` (alias ``omitinsert``) drops the column from
``INSERT`` derivation, ``omitupdate`` drops it from ``UPDATE`` derivation.
``-`` drops the field everywhere.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
import typing
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from placeql.errors import EmptyInputError, NoColumnsDerivedError, TypeMismatchError
from placeql.schema.capabilities import SQLScanner, SQLValuer
from placeql.schema.naming import to_underscore

logger = logging.getLogger(__name__)

#: Types never flattened, whatever capabilities they expose.
TIMESTAMP_TYPES: tuple[type, ...] = (datetime,)


class Purpose(str, Enum):
    """What the derived columns are used for."""

    INSERT = "insert"
    UPDATE = "update"
    SELECT = "select"

    @property
    def reading(self) -> bool:
        return self is Purpose.SELECT


# ---------------------------------------------------------------------------
# Field tags
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldProps:
    """A parsed ``"name,option"`` field tag.

    Attributes:
        column: Explicit column name; empty means "use the mapper".
        ignore: The field is excluded everywhere (tag ``-``).
        omit_insert: Excluded from ``INSERT`` columns.
        omit_update: Excluded from ``UPDATE`` columns.
    """

    column: str = ""
    ignore: bool = False
    omit_insert: bool = False
    omit_update: bool = False

    @classmethod
    def parse(cls, tag: str | None) -> FieldProps:
        if not tag:
            return cls()
        name, *options = tag.split(",")
        if name == "-":
            return cls(ignore=True)
        opts = {o.strip() for o in options}
        return cls(
            column=name,
            omit_insert=bool(opts & {"selectonly", "omitinsert"}),
            omit_update="omitupdate" in opts,
        )


def column(tag: str, tag_key: str = "db", **field_kwargs: Any) -> Any:
    """Return a dataclass field carrying ``tag`` under ``tag_key``.

    Extra keyword arguments go to :func:`dataclasses.field`.
    """
    metadata = {**field_kwargs.pop("metadata", {}), tag_key: tag}
    return dataclasses.field(metadata=metadata, **field_kwargs)


# ---------------------------------------------------------------------------
# Column specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnSpec:
    """One derived column.

    Attributes:
        name: Column name.
        path: Attribute names leading from the record to the value.
        insertable: Kept in ``INSERT`` derivation.
        updatable: Kept in ``UPDATE`` derivation.
    """

    name: str
    path: tuple[str, ...]
    insertable: bool = True
    updatable: bool = True

    def accepts(self, purpose: Purpose) -> bool:
        if purpose is Purpose.INSERT:
            return self.insertable
        if purpose is Purpose.UPDATE:
            return self.updatable
        return True

    def value_of(self, record: Any) -> Any:
        """Follow :attr:`path` from ``record``; a missing nested record yields ``None``."""
        value = record
        for attr in self.path:
            if value is None:
                return None
            value = getattr(value, attr)
        return value


@dataclass(frozen=True)
class _RecordField:
    name: str
    hint: Any
    tag: str | None


def is_record_type(tp: Any) -> bool:
    """Return ``True`` for dataclass and pydantic model classes."""
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def _default_record_type(f: dataclasses.Field) -> type | None:
    if f.default_factory is not dataclasses.MISSING and is_record_type(f.default_factory):
        return f.default_factory
    if f.default is not dataclasses.MISSING and is_record_type(type(f.default)):
        return type(f.default)
    return None


def _field_hint(record_type: type, f: dataclasses.Field) -> Any:
    """Resolve the annotation of a single field.

    String annotations are evaluated against the defining module's globals.
    A name that is not visible there (a class defined inside a function)
    falls back to the record type of the field's default or default
    factory.  Anything else keeps its raw annotation and is a leaf.
    """
    if not isinstance(f.type, str):
        return f.type
    module = sys.modules.get(record_type.__module__)
    globalns = vars(module) if module is not None else {}
    try:
        return eval(f.type, globalns, dict(vars(record_type)))  # noqa: S307
    except (NameError, AttributeError, SyntaxError, TypeError) as exc:
        nested = _default_record_type(f)
        if nested is None:
            logger.debug(
                "cannot resolve type hint of %s.%s: %s", record_type.__qualname__, f.name, exc
            )
            return f.type
        return nested


def _type_hints(record_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        return {f.name: _field_hint(record_type, f) for f in dataclasses.fields(record_type)}


def _record_fields(record_type: type, tag_key: str) -> list[_RecordField]:
    if issubclass(record_type, BaseModel):
        fields = []
        for name, info in record_type.model_fields.items():
            extra = info.json_schema_extra
            tag = extra.get(tag_key) if isinstance(extra, dict) else None
            fields.append(_RecordField(name, info.annotation, tag))
        return fields
    hints = _type_hints(record_type)
    return [
        _RecordField(f.name, hints.get(f.name, f.type), f.metadata.get(tag_key))
        for f in dataclasses.fields(record_type)
    ]


def _nested_record_type(hint: Any) -> type | None:
    candidate = typing.get_origin(hint) or hint
    return candidate if is_record_type(candidate) else None


def _is_leaf(record_type: type, reading: bool) -> bool:
    if issubclass(record_type, TIMESTAMP_TYPES):
        return True
    if reading:
        return issubclass(record_type, SQLScanner)
    return issubclass(record_type, SQLValuer)


def _walk(
    record_type: type,
    base: tuple[str, ...],
    reading: bool,
    tag_key: str,
    mapper: Callable[[str], str],
    seen: tuple[type, ...],
) -> Iterator[ColumnSpec]:
    for f in _record_fields(record_type, tag_key):
        if f.name.startswith("_"):
            continue
        props = FieldProps.parse(f.tag)
        if props.ignore:
            continue
        path = (*base, f.name)
        nested = _nested_record_type(f.hint)
        if nested is not None and not _is_leaf(nested, reading):
            if nested in seen:
                raise TypeMismatchError(
                    f"recursive record type {nested.__name__} in field "
                    f"{'.'.join(path)} cannot be flattened"
                )
            yield from _walk(nested, path, reading, tag_key, mapper, (*seen, nested))
            continue
        yield ColumnSpec(
            name=props.column or mapper(f.name),
            path=path,
            insertable=not props.omit_insert,
            updatable=not props.omit_update,
        )


@lru_cache(maxsize=1024)
def _cached_specs(
    record_type: type,
    reading: bool,
    tag_key: str,
    mapper: Callable[[str], str],
) -> tuple[ColumnSpec, ...]:
    return tuple(_walk(record_type, (), reading, tag_key, mapper, (record_type,)))


def column_specs(
    record_type: type,
    purpose: Purpose,
    *,
    mapper: Callable[[str], str] = to_underscore,
    tag_key: str = "db",
) -> tuple[ColumnSpec, ...]:
    """Return the columns of ``record_type`` used for ``purpose``.

    Specs depend only on the type, so the walk is cached per type, mode,
    tag key and mapper.

    Raises:
        TypeMismatchError: If ``record_type`` is not a record type or nests
            itself.
    """
    if not is_record_type(record_type):
        raise TypeMismatchError(
            f"{getattr(record_type, '__name__', record_type)!s} is not a dataclass "
            "or a pydantic model"
        )
    specs = _cached_specs(record_type, purpose.reading, tag_key, mapper)
    return tuple(s for s in specs if s.accepts(purpose))


def column_names(
    record: Any,
    purpose: Purpose = Purpose.SELECT,
    *,
    mapper: Callable[[str], str] = to_underscore,
    tag_key: str = "db",
) -> list[str]:
    """Return the column names of a record type or instance.

    Handy for select lists::

        translate("SELECT ?ident... FROM [user]", column_names(User))

    Raises:
        TypeMismatchError: If ``record`` is not a record type or instance.
        NoColumnsDerivedError: If no column survives.
    """
    record_type = record if isinstance(record, type) else type(record)
    names = [s.name for s in column_specs(record_type, purpose, mapper=mapper, tag_key=tag_key)]
    if not names:
        raise NoColumnsDerivedError(f"no columns derived from {record_type.__name__}")
    return names


# ---------------------------------------------------------------------------
# Column restriction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OnlyCols:
    """A record or mapping restricted to some of its columns.

    Build with :func:`only_cols`.
    """

    value: Any
    cols: frozenset[str]


def only_cols(value: Any, *cols: str) -> OnlyCols:
    """Use only ``cols`` when ``value`` is interpolated by ``?values`` or ``?set``::

        user.group_id = 5
        compile_template("UPDATE [user] ?set WHERE [id] = ?",
                         only_cols(user, "group_id"), user.id)

    Raises:
        EmptyInputError: If no column is given.
    """
    if not cols:
        raise EmptyInputError("no columns passed to only_cols")
    return OnlyCols(value=value, cols=frozenset(cols))


# ---------------------------------------------------------------------------
# Value-level derivation
# ---------------------------------------------------------------------------


def derive_values(
    value: Any,
    purpose: Purpose,
    *,
    mapper: Callable[[str], str] = to_underscore,
    tag_key: str = "db",
    placeholder: str | None = None,
) -> tuple[list[str], list[Any]]:
    """Derive parallel column and value lists from one record or mapping.

    Mapping keys are sorted so the output does not depend on insertion
    order.

    Args:
        value: A record instance, a ``str``-keyed mapping, or an
            :class:`OnlyCols` wrapper of either.
        purpose: Which columns to keep.
        mapper: Column name function for untagged fields.
        tag_key: Metadata key of field tags.
        placeholder: Placeholder reported in errors.

    Returns:
        ``(columns, values)`` of equal, non-zero length.

    Raises:
        TypeMismatchError: If ``value`` is neither a record nor a mapping,
            or a mapping has a non-``str`` key.
        NoColumnsDerivedError: If no column survives.
    """
    if isinstance(value, OnlyCols):
        cols, vals = derive_values(
            value.value, purpose, mapper=mapper, tag_key=tag_key, placeholder=placeholder
        )
        missing = sorted(value.cols.difference(cols))
        if missing:
            raise NoColumnsDerivedError(
                f"columns {missing} not derived from {type(value.value).__name__}",
                placeholder=placeholder,
            )
        pairs = [(c, v) for c, v in zip(cols, vals) if c in value.cols]
        return [c for c, _ in pairs], [v for _, v in pairs]

    if isinstance(value, Mapping):
        bad = [k for k in value if not isinstance(k, str)]
        if bad:
            raise TypeMismatchError(
                f"{placeholder or 'mapping'} expects str keys, got {type(bad[0]).__name__}",
                placeholder=placeholder,
            )
        cols = sorted(value)
        vals = [value[c] for c in cols]
    elif is_record_type(type(value)):
        specs = column_specs(type(value), purpose, mapper=mapper, tag_key=tag_key)
        cols = [s.name for s in specs]
        vals = [s.value_of(value) for s in specs]
    else:
        raise TypeMismatchError(
            f"{placeholder or 'argument'} expects a record or a mapping, "
            f"got {type(value).__name__}",
            placeholder=placeholder,
        )

    if not cols:
        raise NoColumnsDerivedError(
            f"no columns derived from {type(value).__name__}", placeholder=placeholder
        )
    return cols, vals
