"""Custom exception hierarchy for placeQL.

All public errors inherit from PlaceQLError so callers can catch the base
class for any placeQL-specific failure.  Every failure while translating a
template is a :class:`TranslationError`; the subclass names the kind of
misuse.  None of them are transient, so nothing here is worth retrying.
"""
from __future__ import annotations


class PlaceQLError(Exception):
    """Base exception for all placeQL errors."""


class ConfigurationError(PlaceQLError):
    """Raised when a dialect or preprocessor is misconfigured.

    Args:
        message: Human-readable description.
        registered: Dialect targets known at the time of the error.
    """

    def __init__(self, message: str, registered: list[str] | None = None) -> None:
        super().__init__(message)
        self.registered = registered or []


class TranslationError(PlaceQLError):
    """Raised when a template cannot be translated with the given arguments.

    Args:
        message: Human-readable description.
        placeholder: The placeholder token being processed (e.g. ``?ident...``).

    Attributes:
        template: The template being translated.  Filled in by
            :meth:`~placeql.compile.translator.Translator.translate`; for
            errors raised inside a nested fragment this is the fragment's
            own template.
    """

    def __init__(self, message: str, placeholder: str | None = None) -> None:
        super().__init__(message)
        self.placeholder = placeholder
        self.template: str | None = None

    def to_error_response(self) -> dict[str, str | None]:
        """Returns a structured description suitable for logs or API responses."""
        return {
            "error": type(self).__name__,
            "message": str(self),
            "placeholder": self.placeholder,
            "template": self.template,
        }


class TemplateSyntaxError(TranslationError):
    """Raised when a ``[`` bracket identifier is not terminated."""


class ArgumentCountError(TranslationError):
    """Raised when the arguments don't match the placeholders of a template.

    Args:
        message: Human-readable description.
        expected: Number of arguments the template consumed, when known.
        given: Number of arguments supplied.
        placeholder: The placeholder that was starved of an argument, if any.
    """

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        given: int | None = None,
        placeholder: str | None = None,
    ) -> None:
        super().__init__(message, placeholder=placeholder)
        self.expected = expected
        self.given = given


class UnknownPlaceholderError(TranslationError):
    """Raised when a ``?name`` placeholder is not recognised."""


class ExpandUnsupportedError(TranslationError):
    """Raised when ``...`` follows a placeholder with no expand form."""


class TypeMismatchError(TranslationError):
    """Raised when an argument's kind doesn't fit its placeholder."""


class UnsupportedValueTypeError(TranslationError):
    """Raised when a value is outside the set of escapable kinds."""


class EncodingError(TranslationError):
    """Raised when a string argument cannot be encoded as UTF-8."""


class EmptyInputError(TranslationError):
    """Raised when a non-empty sequence was required but an empty one was given."""


class NoColumnsDerivedError(TranslationError):
    """Raised when a record or mapping yields no usable columns."""


class UsageRestrictionError(TranslationError):
    """Raised when a placeholder is used where it is not permitted.

    Prepared statements only allow build-time placeholders (``[ident]``,
    ``?ident``, ``?ident...``, ``?sql``) plus the bare ``?`` marker.
    """
