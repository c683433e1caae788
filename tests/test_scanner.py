"""Unit tests for the template scanner."""

from __future__ import annotations

import pytest

from placeql.compile.scanner import BracketIdent, LiteralText, Placeholder, scan
from placeql.errors import TemplateSyntaxError


def test_plain_text_is_one_literal():
    assert list(scan("SELECT 1")) == [LiteralText("SELECT 1")]


def test_empty_template_yields_nothing():
    assert list(scan("")) == []


def test_bracket_identifier():
    assert list(scan("SELECT [a b]")) == [LiteralText("SELECT "), BracketIdent("a b")]


def test_bare_and_named_placeholders():
    tokens = list(scan("? ?ident ?values..."))
    assert tokens == [
        Placeholder(name="", expand=False, offset=0),
        LiteralText(" "),
        Placeholder(name="ident", expand=False, offset=2),
        LiteralText(" "),
        Placeholder(name="values", expand=True, offset=9),
    ]


def test_name_stops_at_non_lowercase():
    tokens = list(scan("?identX"))
    assert tokens == [Placeholder("ident", False, 0), LiteralText("X")]


def test_two_dots_are_not_an_expand():
    tokens = list(scan("?.."))
    assert tokens == [Placeholder("", False, 0), LiteralText("..")]


def test_adjacent_placeholders():
    tokens = list(scan("??"))
    assert [str(t) for t in tokens] == ["?", "?"]


def test_placeholder_str():
    assert str(Placeholder("ident", True, 0)) == "?ident..."
    assert str(Placeholder("", False, 0)) == "?"


def test_unterminated_bracket_raises():
    with pytest.raises(TemplateSyntaxError, match="identifier not terminated at offset 7"):
        list(scan("SELECT [name FROM x"))


def test_scan_is_lazy():
    tokens = scan("ok [bad")
    assert next(tokens) == LiteralText("ok ")
    with pytest.raises(TemplateSyntaxError):
        next(tokens)
