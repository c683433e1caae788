"""Unit tests for column derivation from records and mappings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import pytest

from placeql.errors import EmptyInputError, NoColumnsDerivedError, TypeMismatchError
from placeql.schema.capabilities import Nullable
from placeql.schema.columns import (
    FieldProps,
    Purpose,
    _cached_specs,
    column,
    column_names,
    column_specs,
    derive_values,
    only_cols,
)
from tests.fixtures import Account, Audit, Event, User


@dataclass
class _Point:
    """Scans but does not produce values."""

    x: int = 0
    y: int = 0

    def sql_scan(self, value) -> None:
        self.x, self.y = value


@dataclass
class _Pin:
    label: str = ""
    at: _Point = field(default_factory=_Point)


@dataclass
class _Coords:
    lat: float = 0.0
    lng: float = 0.0

    def sql_value(self) -> str:
        return f"{self.lat},{self.lng}"


@dataclass
class _Place:
    name: str = ""
    coords: _Coords = field(default_factory=_Coords)


@dataclass
class _Node:
    value: int = 0
    parent: _Node = None  # type: ignore[assignment]


@dataclass
class _Tree:
    label: str = ""
    node: _Node = field(default_factory=_Node)


@dataclass
class _Hidden:
    _internal: int = 0
    skip: int = column("-", default=0)


@dataclass
class _Stamped:
    id: int = 0
    audit: Audit = field(default_factory=Audit)
    extra: Missing = None  # type: ignore[name-defined]  # noqa: F821


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("tag", "props"),
    [
        (None, FieldProps()),
        ("", FieldProps()),
        ("-", FieldProps(ignore=True)),
        ("name", FieldProps(column="name")),
        ("id,selectonly", FieldProps(column="id", omit_insert=True)),
        ("id,omitinsert", FieldProps(column="id", omit_insert=True)),
        (",omitupdate", FieldProps(omit_update=True)),
        ("x,selectonly,omitupdate", FieldProps(column="x", omit_insert=True, omit_update=True)),
    ],
)
def test_field_props_parse(tag, props):
    assert FieldProps.parse(tag) == props


# ---------------------------------------------------------------------------
# Column specs
# ---------------------------------------------------------------------------


def test_user_columns_per_purpose():
    assert column_names(User, Purpose.SELECT) == ["id", "name", "user_id"]
    assert column_names(User, Purpose.INSERT) == ["name", "user_id"]
    assert column_names(User, Purpose.UPDATE) == ["id", "name"]


def test_column_names_accepts_instances():
    assert column_names(User(name="x")) == ["id", "name", "user_id"]


def test_nested_record_is_flattened_depth_first():
    specs = column_specs(Event, Purpose.INSERT)
    assert [s.name for s in specs] == ["id", "created_by", "created_at", "finished"]
    assert specs[1].path == ("audit", "created_by")


def test_nullable_field_is_a_leaf_both_ways():
    assert column_names(Event, Purpose.SELECT)[-1] == "finished"
    assert column_names(Event, Purpose.UPDATE)[-1] == "finished"


def test_valuer_is_a_leaf_only_when_writing():
    assert column_names(_Place, Purpose.INSERT) == ["name", "coords"]
    assert column_names(_Place, Purpose.SELECT) == ["name", "lat", "lng"]


def test_datetime_is_always_a_leaf():
    assert column_names(Audit, Purpose.SELECT) == ["created_by", "created_at"]


def test_pydantic_model_fields():
    assert column_names(Account, Purpose.SELECT) == ["id", "display_name", "mail"]
    assert column_names(Account, Purpose.INSERT) == ["display_name", "mail"]


def test_custom_mapper_and_tag_key():
    @dataclass
    class Thing:
        someField: int = 0
        other: int = column("renamed", tag_key="sql", default=0)

    specs = column_specs(Thing, Purpose.SELECT, mapper=str.upper, tag_key="sql")
    assert [s.name for s in specs] == ["SOMEFIELD", "renamed"]


def test_recursive_record_is_rejected():
    with pytest.raises(TypeMismatchError, match="recursive record type _Node"):
        column_specs(_Tree, Purpose.INSERT)


def test_specs_are_deterministic():
    first = column_specs(Event, Purpose.SELECT)
    assert column_specs(Event, Purpose.SELECT) == first


def test_bad_annotation_does_not_stop_flattening():
    assert column_names(_Stamped) == ["id", "created_by", "created_at", "extra"]


def test_local_nested_record_is_flattened():
    @dataclass
    class Inner:
        a: int = 1
        b: int = 2

    @dataclass
    class Outer:
        id: int = 0
        inner: Inner = field(default_factory=Inner)

    assert column_names(Outer) == ["id", "a", "b"]
    assert derive_values(Outer(), Purpose.INSERT)[1] == [0, 1, 2]


def test_spec_cache_is_bounded():
    assert _cached_specs.cache_info().maxsize == 1024


def test_non_record_type_rejected():
    with pytest.raises(TypeMismatchError, match="not a dataclass or a pydantic model"):
        column_specs(dict, Purpose.SELECT)


def test_no_columns():
    with pytest.raises(NoColumnsDerivedError, match="_Hidden"):
        column_names(_Hidden)


def test_scanner_is_a_leaf_only_when_reading():
    assert column_names(_Pin, Purpose.SELECT) == ["label", "at"]
    assert column_names(_Pin, Purpose.INSERT) == ["label", "x", "y"]


# ---------------------------------------------------------------------------
# Value derivation
# ---------------------------------------------------------------------------


def test_derive_values_from_record():
    cols, vals = derive_values(User(id=1, name="Bob", user_id=9), Purpose.INSERT)
    assert cols == ["name", "user_id"]
    assert vals == ["Bob", 9]


def test_derive_values_nested_none_is_null():
    event = Event(id=1, audit=None)  # type: ignore[arg-type]
    cols, vals = derive_values(event, Purpose.INSERT)
    assert cols == ["id", "created_by", "created_at", "finished"]
    assert vals[1:3] == [None, None]


def test_mapping_keys_are_sorted():
    cols, vals = derive_values({"b": 2, "a": 1, "c": None}, Purpose.INSERT)
    assert cols == ["a", "b", "c"]
    assert vals == [1, 2, None]


def test_mapping_with_non_str_key():
    with pytest.raises(TypeMismatchError, match="expects str keys"):
        derive_values({1: "x"}, Purpose.INSERT, placeholder="?values")


def test_empty_mapping():
    with pytest.raises(NoColumnsDerivedError) as exc:
        derive_values({}, Purpose.UPDATE, placeholder="?set")
    assert exc.value.placeholder == "?set"


def test_scalar_is_not_derivable():
    with pytest.raises(TypeMismatchError, match="expects a record or a mapping, got int"):
        derive_values(5, Purpose.INSERT, placeholder="?values")


def test_only_cols_keeps_derived_order():
    user = User(id=1, name="Bob", user_id=9)
    cols, vals = derive_values(only_cols(user, "user_id", "name"), Purpose.INSERT)
    assert cols == ["name", "user_id"]
    assert vals == ["Bob", 9]


def test_only_cols_unknown_column():
    with pytest.raises(NoColumnsDerivedError, match=r"\['id'\]"):
        derive_values(only_cols(User(), "id"), Purpose.INSERT)


def test_only_cols_needs_a_column():
    with pytest.raises(EmptyInputError):
        only_cols(User())


def test_nullable_value_passes_through():
    when = Nullable.of(datetime(2020, 1, 1))
    _, vals = derive_values(Event(finished=when), Purpose.UPDATE)
    assert vals[-1] is when
