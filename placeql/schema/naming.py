"""Default field-name to column-name mapping."""
from __future__ import annotations


def to_underscore(name: str) -> str:
    """Transform ``CamelCASEString`` to ``camel_case_string``.

    Runs of capitals are treated as one word, except that the last capital
    of a run followed by a lowercase letter starts a new word::

        >>> to_underscore("userID")
        'user_id'
        >>> to_underscore("UIDCode")
        'uid_code'
        >>> to_underscore("Old_BookID")
        'old_book_id'
    """
    out: list[str] = []
    prev_is_upper = True
    for i, ch in enumerate(name):
        if ch.isupper():
            if not prev_is_upper:
                out.append("_")
            ch = ch.lower()
            prev_is_upper = True
        elif ch == "_":
            prev_is_upper = True
        else:
            # "UIDCode": move the "c" of "Code" behind a new underscore.
            if prev_is_upper and i >= 2 and name[i - 1].isupper() and name[i - 2].isupper():
                last = out.pop()
                out.extend(("_", last))
            prev_is_upper = False
        out.append(ch)
    return "".join(out)
