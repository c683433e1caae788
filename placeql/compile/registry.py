"""Dialect registry (Open/Closed Principle).

``DialectFactory``
    Central registry for :class:`~placeql.compile.base.Dialect`
    implementations.  Register a new dialect once; preprocessors and the
    configuration layer look it up by target name.

Usage::

    from placeql.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(Dialect):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from placeql.compile.base import Dialect
from placeql.errors import ConfigurationError

logger = logging.getLogger(__name__)


class DialectFactory:
    """Registry mapping dialect target names to :class:`Dialect` classes.

    Example::

        @DialectFactory.register("mysql")
        class MySQLDialect(Dialect):
            ...

        dialect = DialectFactory.create("mysql")
    """

    _dialects: ClassVar[dict[str, type[Dialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[Dialect]], type[Dialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect target name (e.g. ``"mysql"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[Dialect]) -> type[Dialect]:
            cls.register_class(name, dialect_cls)
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[Dialect]) -> None:
        """Register a dialect class without using the decorator form.

        Args:
            name: The dialect target name.
            dialect_cls: The :class:`Dialect` subclass to register.
        """
        logger.debug("registering dialect %r as %s", name, dialect_cls.__name__)
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str) -> Dialect:
        """Instantiate the dialect registered for ``name``.

        Args:
            name: The dialect target name.

        Returns:
            A :class:`Dialect` instance.

        Raises:
            ConfigurationError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name)
        if dialect_cls is None:
            registered = cls.registered_targets()
            raise ConfigurationError(
                f"Unsupported dialect target: '{name}'. Registered targets: {registered}.",
                registered=registered,
            )
        return dialect_cls()

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Return ``True`` when a dialect is registered under ``name``."""
        return name in cls._dialects

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect target names."""
        return sorted(cls._dialects)
