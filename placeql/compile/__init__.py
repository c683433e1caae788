"""placeQL translation layer: template + arguments → SQL text."""
from placeql.compile.base import CompiledSQL, Dialect
from placeql.compile.context import PlaceholderCounter, TranslationContext
from placeql.compile.mysql import MySQLDialect
from placeql.compile.postgres import PostgresDialect
from placeql.compile.sqlite import SQLiteDialect
from placeql.compile.translator import Translator

__all__ = [
    "CompiledSQL",
    "Dialect",
    "PlaceholderCounter",
    "TranslationContext",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "Translator",
]
