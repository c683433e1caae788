"""Template translation.

``Translator`` is the top-level driver.  It scans a template, consumes one
argument per placeholder (bracket identifiers consume none) and dispatches
each placeholder to a focused builder.  All dialect-specific behaviour is
delegated to the context's :class:`~placeql.compile.base.Dialect`.

Dispatch table
--------------
=============  ===============================  ==================================
placeholder    non-expand                       expand (``...``)
=============  ===============================  ==================================
``?``          one escaped value                escaped values, comma-joined
``?ident``     one identifier                   identifiers, comma-joined
``?values``    ``(cols) VALUES (vals)``         one header, one tuple per record
``?set``       ``SET col = val, …``             n/a
``?sql``       raw text or a marshaled fragment n/a
``?raw``       alias of ``?sql``                n/a
=============  ===============================  ==================================

Prepared-statement mode
-----------------------
A bare ``?`` becomes the dialect's next positional marker and consumes no
argument.  ``?...``, ``?values``, ``?values...`` and ``?set`` are refused.

Fragments
---------
A :class:`~placeql.schema.capabilities.SQLMarshaler` passed to ``?sql``
receives a *child* translator: same context, same marker counter, but each
``translate`` call has its own argument cursor.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from placeql.compile.clause_builders import (
    IdentListBuilder,
    MultiValuesClauseBuilder,
    SetClauseBuilder,
    ValueListBuilder,
    ValuesClauseBuilder,
)
from placeql.compile.context import PlaceholderCounter, TranslationContext
from placeql.compile.escaper import ValueEscaper
from placeql.compile.scanner import BracketIdent, LiteralText, Placeholder, scan
from placeql.errors import (
    ArgumentCountError,
    ExpandUnsupportedError,
    TranslationError,
    TypeMismatchError,
    UnknownPlaceholderError,
    UsageRestrictionError,
)
from placeql.schema.capabilities import SQLMarshaler

logger = logging.getLogger(__name__)

Handler = Callable[[Any, str], str]

#: Placeholders that need the argument's shape at build time.
_REFUSED_WHEN_PREPARED = frozenset(
    {("", True), ("values", False), ("values", True), ("set", False)}
)


class _ArgumentCursor:
    """Hands out the arguments of one ``translate`` call left to right."""

    def __init__(self, args: Sequence[Any]) -> None:
        self._args = tuple(args)
        self._index = 0

    def next(self, placeholder: str) -> Any:
        if self._index >= len(self._args):
            raise ArgumentCountError(
                f"not enough arguments for placeholders: {placeholder} needs "
                f"argument #{self._index + 1}, got {len(self._args)}",
                given=len(self._args),
                placeholder=placeholder,
            )
        value = self._args[self._index]
        self._index += 1
        return value

    def finish(self) -> None:
        if self._index < len(self._args):
            raise ArgumentCountError(
                f"only {self._index} args are expected, got {len(self._args)}",
                expected=self._index,
                given=len(self._args),
            )


class Translator:
    """Translates templates to SQL text.

    Args:
        ctx: Dialect, naming and prepared-statement mode.
        counter: Positional marker counter; pass the parent's counter to
            continue its numbering.  Defaults to a fresh counter.
    """

    def __init__(
        self,
        ctx: TranslationContext,
        counter: PlaceholderCounter | None = None,
    ) -> None:
        self._ctx = ctx
        self._counter = counter if counter is not None else PlaceholderCounter()
        escaper = ValueEscaper(ctx)
        self._escaper = escaper
        self._value_list = ValueListBuilder(escaper)
        self._ident_list = IdentListBuilder(ctx)
        self._values = ValuesClauseBuilder(ctx, escaper)
        self._multi_values = MultiValuesClauseBuilder(ctx, escaper)
        self._set = SetClauseBuilder(ctx, escaper)
        self._handlers: dict[tuple[str, bool], Handler] = {
            ("", False): self._escaper.escape,
            ("", True): lambda arg, _: self._value_list.build(arg),
            ("ident", False): self._ident,
            ("ident", True): lambda arg, _: self._ident_list.build(arg),
            ("values", False): lambda arg, _: self._values.build(arg),
            ("values", True): lambda arg, _: self._multi_values.build(arg),
            ("set", False): lambda arg, _: self._set.build(arg),
            ("sql", False): self._splice,
            ("raw", False): self._splice,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def context(self) -> TranslationContext:
        return self._ctx

    @property
    def prepared(self) -> bool:
        return self._ctx.prepared

    @property
    def placeholders(self) -> int:
        """Number of positional markers emitted so far, children included."""
        return self._counter.count

    def child(self) -> Translator:
        """Return a translator for a nested fragment.

        The child shares this translator's context and marker counter.
        """
        return Translator(self._ctx, self._counter)

    def translate(self, template: str, args: Sequence[Any] = ()) -> str:
        """Translate ``template`` consuming ``args`` in placeholder order.

        Args:
            template: SQL text with bracket identifiers and placeholders.
            args: Exactly one argument per argument-consuming placeholder.

        Returns:
            The translated SQL text.

        Raises:
            TranslationError: (or subclass) on the first problem found.
                Translation stops there; no partial text is returned.
        """
        logger.debug(
            "translating template (%d chars, %d args, prepared=%s)",
            len(template),
            len(args),
            self._ctx.prepared,
        )
        cursor = _ArgumentCursor(args)
        parts: list[str] = []
        try:
            for token in scan(template):
                if isinstance(token, LiteralText):
                    parts.append(token.text)
                elif isinstance(token, BracketIdent):
                    parts.append(self._ctx.dialect.escape_ident(token.name))
                else:
                    parts.append(self._interpolate(token, cursor))
            cursor.finish()
        except TranslationError as exc:
            if exc.template is None:
                exc.template = template
            raise
        return "".join(parts)

    # ------------------------------------------------------------------
    # Placeholder dispatch
    # ------------------------------------------------------------------

    def _interpolate(self, token: Placeholder, cursor: _ArgumentCursor) -> str:
        key = (token.name, token.expand)
        placeholder = str(token)
        handler = self._handlers.get(key)
        if handler is None:
            if token.expand:
                raise ExpandUnsupportedError(
                    f"?{token.name} cannot be expanded (...) or doesn't exist",
                    placeholder=placeholder,
                )
            raise UnknownPlaceholderError(
                f"unknown placeholder {placeholder}", placeholder=placeholder
            )

        if self._ctx.prepared:
            if key == ("", False):
                return self._ctx.dialect.placeholder(self._counter.next())
            if key in _REFUSED_WHEN_PREPARED:
                raise UsageRestrictionError(
                    f"{placeholder} cannot be used in prepared statements",
                    placeholder=placeholder,
                )

        return handler(cursor.next(placeholder), placeholder)

    def _ident(self, arg: Any, placeholder: str) -> str:
        if not isinstance(arg, str):
            raise TypeMismatchError(
                f"{placeholder} expects the argument to be a string, got {type(arg).__name__}",
                placeholder=placeholder,
            )
        return self._ctx.dialect.escape_ident(arg)

    def _splice(self, arg: Any, placeholder: str) -> str:
        if isinstance(arg, SQLMarshaler):
            return arg.marshal_sql(self.child())
        if isinstance(arg, str):
            return arg
        raise TypeMismatchError(
            f"{placeholder} expects the argument to be a string or SQLMarshaler, "
            f"got {type(arg).__name__}",
            placeholder=placeholder,
        )
