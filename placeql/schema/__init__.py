"""placeQL record schema: column derivation, capabilities and fragments."""
from placeql.schema.capabilities import Nullable, SQLMarshaler, SQLScanner, SQLValuer
from placeql.schema.columns import (
    ColumnSpec,
    OnlyCols,
    Purpose,
    column,
    column_names,
    column_specs,
    only_cols,
)
from placeql.schema.fragments import Fragment, Where
from placeql.schema.naming import to_underscore

__all__ = [
    "Nullable",
    "SQLMarshaler",
    "SQLScanner",
    "SQLValuer",
    "ColumnSpec",
    "OnlyCols",
    "Purpose",
    "column",
    "column_names",
    "column_specs",
    "only_cols",
    "Fragment",
    "Where",
    "to_underscore",
]
