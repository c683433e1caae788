"""Reusable SQL fragments for the ``?sql`` placeholder.

Both classes implement :class:`~placeql.schema.capabilities.SQLMarshaler`,
so their sub-templates are translated by the caller's child translator and
follow its dialect and prepared-statement mode::

    where = Where().and_("[name] = ?", name).and_("[age] > ?", 18)
    compile_template("SELECT * FROM [user] WHERE ?sql", where)
    # SELECT * FROM `user` WHERE (`name` = 'Bob') AND (`age` > 18)
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from placeql.errors import EmptyInputError

if TYPE_CHECKING:
    from placeql.compile.translator import Translator


class Fragment:
    """A sub-template with its own arguments.

    Args:
        template: Template text, translated when the fragment is marshaled.
        *args: Arguments for the template's placeholders.
    """

    def __init__(self, template: str, *args: Any) -> None:
        self.template = template
        self.args = args

    def marshal_sql(self, translator: Translator) -> str:
        return translator.translate(self.template, self.args)

    def __repr__(self) -> str:
        return f"Fragment({self.template!r}, {len(self.args)} args)"


class Where:
    """Conjunction of conditions, each wrapped in parentheses.

    ``and_`` returns ``self`` so conditions chain.  Marshaling an empty
    ``Where`` raises :class:`~placeql.errors.EmptyInputError`.
    """

    def __init__(self) -> None:
        self._conditions: list[Fragment] = []

    def and_(self, template: str, *args: Any) -> Where:
        self._conditions.append(Fragment(template, *args))
        return self

    def __len__(self) -> int:
        return len(self._conditions)

    def marshal_sql(self, translator: Translator) -> str:
        if not self._conditions:
            raise EmptyInputError("no conditions in Where")
        return " AND ".join(f"({c.marshal_sql(translator)})" for c in self._conditions)
