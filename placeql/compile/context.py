"""Translation context value objects.

``TranslationContext`` packages the static settings every sub-builder of a
translation needs (dialect, naming and prepared-statement mode).
``PlaceholderCounter`` is the mutable marker numbering shared by a
translator and the child translators it hands to nested fragments.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from placeql.compile.base import Dialect
from placeql.schema.naming import to_underscore


@dataclass(frozen=True)
class TranslationContext:
    """Immutable context for translations.

    Attributes:
        dialect: Dialect used for every escape.
        mapper: Column name function for fields without an explicit name.
        tag_key: Metadata key holding the ``"name,option"`` field tag.
        prepared: Prepared-statement mode: bare ``?`` becomes a positional
            marker and value-interpolating placeholders are refused.
    """

    dialect: Dialect
    mapper: Callable[[str], str] = to_underscore
    tag_key: str = "db"
    prepared: bool = False

    def for_prepared(self) -> TranslationContext:
        """Return a copy of this context in prepared-statement mode."""
        return replace(self, prepared=True)


@dataclass
class PlaceholderCounter:
    """Numbers positional markers emitted in prepared-statement mode.

    One instance is shared by a translator and all of its children, so a
    marker inside a nested fragment continues the parent's numbering.
    """

    count: int = 0

    def next(self) -> int:
        """Advance and return the 1-based number of the next marker."""
        self.count += 1
        return self.count
