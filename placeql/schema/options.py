"""Pydantic model for preprocessor configuration.

Configuration is validated once, when the model is built; a
:class:`~placeql.preprocessor.Preprocessor` built from it never sees an
unknown dialect::

    from placeql import Preprocessor, PreprocessorConfig

    config = PreprocessorConfig(dialect="postgres", tag_key="sql")
    pre = Preprocessor.from_config(config)
"""
from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from placeql.compile.registry import DialectFactory
from placeql.schema.naming import to_underscore


class PreprocessorConfig(BaseModel):
    """Settings of a :class:`~placeql.preprocessor.Preprocessor`.

    Attributes:
        dialect: Registered dialect target name.
        tag_key: Metadata key holding ``"name,option"`` field tags.
        mapper: Column name function for fields without an explicit name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dialect: str = "mysql"
    tag_key: str = Field(default="db", min_length=1)
    mapper: Callable[[str], str] = to_underscore

    @field_validator("dialect")
    @classmethod
    def _dialect_registered(cls, value: str) -> str:
        if not DialectFactory.is_registered(value):
            raise ValueError(
                f"unknown dialect {value!r}; registered targets: "
                f"{DialectFactory.registered_targets()}"
            )
        return value
