"""Capability protocols recognised by the translator.

``SQLValuer``
    Value-producing: the object converts itself to an escapable value.
    Returning ``None`` means SQL ``NULL``.

``SQLScanner``
    Value-consuming: the object can be filled from a result column.  The
    translator never calls it; it only decides whether a nested record is
    flattened when columns are derived for reading.

``SQLMarshaler``
    Fragment-producing: the object renders its own SQL for the ``?sql``
    placeholder, usually by translating a sub-template with the translator
    it is given.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from placeql.compile.translator import Translator

T = TypeVar("T")


@runtime_checkable
class SQLValuer(Protocol):
    def sql_value(self) -> Any:
        """Return the value to escape in place of ``self``."""


@runtime_checkable
class SQLScanner(Protocol):
    def sql_scan(self, value: Any) -> None:
        """Load ``value`` read from the database into ``self``."""


@runtime_checkable
class SQLMarshaler(Protocol):
    def marshal_sql(self, translator: Translator) -> str:
        """Return this fragment's SQL text.

        Args:
            translator: A child translator sharing the caller's dialect and
                prepared-statement mode, with its own argument cursor.
        """


@dataclass
class Nullable(Generic[T]):
    """A value that may be SQL ``NULL``.

    Usable both as an argument and as a record field type; as a field it is
    never flattened because it is both a valuer and a scanner::

        @dataclass
        class Event:
            name: str
            finished: Nullable[datetime] = field(default_factory=Nullable)

    Attributes:
        value: The wrapped value; ignored unless ``valid``.
        valid: ``False`` means ``NULL``.
    """

    value: T | None = None
    valid: bool = False

    @classmethod
    def of(cls, value: T | None) -> Nullable[T]:
        """Wrap ``value``; ``None`` becomes an invalid (``NULL``) instance."""
        return cls(value=value, valid=value is not None)

    def sql_value(self) -> T | None:
        return self.value if self.valid else None

    def sql_scan(self, value: Any) -> None:
        self.value, self.valid = value, value is not None
