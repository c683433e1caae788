"""Test fixtures: a transparent fake dialect and sample record types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from placeql.compile.base import Dialect
from placeql.compile.context import TranslationContext
from placeql.compile.translator import Translator
from placeql.schema.capabilities import Nullable
from placeql.schema.columns import column

USERS_DDL = """
CREATE TABLE "user" (
    "id"      INTEGER PRIMARY KEY AUTOINCREMENT,
    "name"    TEXT NOT NULL,
    "user_id" INTEGER,
    "active"  INTEGER NOT NULL DEFAULT 1,
    "avatar"  BLOB,
    "seen_at" TEXT
);
"""


class FakeDialect(Dialect):
    """Dialect whose output shows exactly which escape ran.

    Identifiers render as ``{x}``, strings as ``'x'`` (unescaped), bytes
    between backticks, times as ``'<isoformat>'`` and markers as ``&N``.
    """

    @property
    def dialect_name(self) -> str:
        return "fake"

    def escape_ident(self, ident: str) -> str:
        return "{" + ident + "}"

    def escape_bool(self, value: bool) -> str:
        return "true" if value else "false"

    def escape_string(self, value: str) -> str:
        return f"'{value}'"

    def escape_bytes(self, value: bytes) -> str:
        return "`" + value.decode("latin-1") + "`"

    def escape_time(self, value: datetime) -> str:
        return f"'{value.isoformat()}'"

    def placeholder(self, n: int) -> str:
        return f"&{n}"


def fake_translator(prepared: bool = False) -> Translator:
    ctx = TranslationContext(dialect=FakeDialect(), prepared=prepared)
    return Translator(ctx)


def translate(template: str, *args: Any) -> str:
    """Translate with the fake dialect in full-interpolation mode."""
    return fake_translator().translate(template, args)


def prepare(template: str, *args: Any) -> str:
    """Translate with the fake dialect in prepared-statement mode."""
    return fake_translator(prepared=True).translate(template, args)


# ---------------------------------------------------------------------------
# Sample records
# ---------------------------------------------------------------------------


@dataclass
class User:
    id: int = column("id,selectonly", default=0)
    name: str = ""
    user_id: int = column("user_id,omitupdate", default=0)
    cache: dict = column("-", default_factory=dict)
    _secret: str = "hidden"


@dataclass
class Audit:
    created_by: str = ""
    created_at: datetime = datetime(2020, 1, 2, 3, 4, 5)


@dataclass
class Event:
    id: int = 0
    audit: Audit = field(default_factory=Audit)
    finished: Nullable[datetime] = field(default_factory=Nullable)


@dataclass
class Row:
    id: int
    name: str


class Account(BaseModel):
    id: int = Field(default=0, json_schema_extra={"db": "id,omitinsert"})
    display_name: str = ""
    email: str = Field(default="", json_schema_extra={"db": "mail"})
