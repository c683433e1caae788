"""Template scanner.

Splits a template into literal text, bracket identifiers and placeholder
tokens.  The grammar::

    template    := ( literal | bracket | placeholder )*
    bracket     := "[" <any text without "]"> "]"
    placeholder := "?" [a-z]* [ "..." ]

Scanning is lazy, so a syntax error late in the template is only reported
once the tokens before it have been consumed.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from placeql.errors import TemplateSyntaxError

_SPECIAL = "[?"
_EXPAND = "..."


@dataclass(frozen=True)
class LiteralText:
    """Template text copied to the output unchanged."""

    text: str


@dataclass(frozen=True)
class BracketIdent:
    """A ``[name]`` identifier, escaped without consuming an argument."""

    name: str


@dataclass(frozen=True)
class Placeholder:
    """A ``?name`` or ``?name...`` token.

    Attributes:
        name: Lowercase name; empty for a bare ``?``.
        expand: A trailing ``...`` was present.
        offset: Position of the ``?`` in the template.
    """

    name: str
    expand: bool
    offset: int

    def __str__(self) -> str:
        return f"?{self.name}{_EXPAND if self.expand else ''}"


Token = Union[LiteralText, BracketIdent, Placeholder]


def _is_name_char(ch: str) -> bool:
    return "a" <= ch <= "z"


def scan(template: str) -> Iterator[Token]:
    """Yield the tokens of ``template`` in order.

    Raises:
        TemplateSyntaxError: On a ``[`` with no closing ``]``.
    """
    pos = 0
    length = len(template)
    while pos < length:
        start = pos
        while pos < length and template[pos] not in _SPECIAL:
            pos += 1
        if pos > start:
            yield LiteralText(template[start:pos])
            continue

        if template[pos] == "[":
            end = template.find("]", pos + 1)
            if end == -1:
                raise TemplateSyntaxError(f"identifier not terminated at offset {pos}")
            yield BracketIdent(template[pos + 1 : end])
            pos = end + 1
            continue

        offset = pos
        pos += 1
        name_start = pos
        while pos < length and _is_name_char(template[pos]):
            pos += 1
        name = template[name_start:pos]
        expand = template.startswith(_EXPAND, pos)
        if expand:
            pos += len(_EXPAND)
        yield Placeholder(name=name, expand=expand, offset=offset)
