from __future__ import annotations

import pytest

from iniplus.classifier import (
    apply_context,
    classify,
    is_value,
    looks_like_boundary,
    looks_like_header,
    looks_like_key_value,
    looks_like_map_header,
    parse_key_value,
    parse_map_header,
    parse_section,
)
from iniplus.models import LineKind, ParserContext, ParserState


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("[map.texts]", ("texts", None)),
        ("[ map.Press | ABC ]", ("Press", "ABC")),
        ("[map.Press|employers-start]", ("Press", "employers-start")),
        ("[map.vegies.grow | carrot.is.king]", ("vegies.grow", "carrot.is.king")),
        ("[map.Press | ]", ("Press", None)),
        ("[map.Press | *]", ("Press", "*")),
    ],
)
def test_parse_map_header(line: str, expected: tuple[str, str | None]):
    assert parse_map_header(line) == expected


@pytest.mark.parametrize("line", ["[map]", "[map.]", "[map.bad name]", "map.texts", "[server]"])
def test_parse_map_header_rejects(line: str):
    assert parse_map_header(line) is None


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("[server]", "server"),
        ("[ server.http ]", "server.http"),
        ("[map]", "map"),
        ("[snake_case]", "snake_case"),
    ],
)
def test_parse_section(line: str, expected: str):
    assert parse_section(line) == expected


@pytest.mark.parametrize("line", ["[]", "[bad header!]", "[a b]", "server", "[server] x"])
def test_parse_section_rejects(line: str):
    assert parse_section(line) is None


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("port = 8080", ("port", "8080", False)),
        ("port   =    8080", ("port", "8080", False)),
        ("blurb += Hello", ("blurb", "Hello", True)),
        ("random = s=f(x)", ("random", "s=f(x)", False)),
        ("^bed/bye$ += lko", ("^bed/bye$", "lko", True)),
        ("two words = value", ("two words", "value", False)),
        ("keys =", ("keys", "", False)),
        ("c = ######", ("c", "######", False)),
    ],
)
def test_parse_key_value(line: str, expected: tuple[str, str, bool]):
    assert parse_key_value(line) == expected


@pytest.mark.parametrize("line", ["a=b", "= value", "plain text", "key= value"])
def test_parse_key_value_rejects(line: str):
    assert parse_key_value(line) is None


def test_classify_map_header():
    classified = classify("[map.Press | ABC]", line_number=7)

    assert classified.kind is LineKind.MAP_HEADER
    assert classified.name == "Press"
    assert classified.sub_key == "ABC"
    assert classified.line_number == 7


def test_classify_map_header_wins_over_section():
    assert classify("[map.texts]").kind is LineKind.MAP_HEADER
    assert classify("[map]").kind is LineKind.SECTION


def test_classify_key_value_and_continuation():
    key_value = classify("port = 8080")
    continuation = classify("blurb += Hello")

    assert (key_value.kind, key_value.name, key_value.value) == (LineKind.KEY_VALUE, "port", "8080")
    assert (continuation.kind, continuation.name, continuation.value) == (
        LineKind.CONTINUATION,
        "blurb",
        "Hello",
    )


@pytest.mark.parametrize(
    ("lookahead", "expected"),
    [
        ("keyOne", LineKind.LIST_START),
        ("a=b", LineKind.LIST_START),
        (None, LineKind.KEY_VALUE),
        ("", LineKind.KEY_VALUE),
        ("[server]", LineKind.KEY_VALUE),
        ("[map.texts]", LineKind.KEY_VALUE),
        ("other = 1", LineKind.KEY_VALUE),
        ("other += 1", LineKind.KEY_VALUE),
    ],
)
def test_classify_list_start_depends_on_lookahead(lookahead: str | None, expected: LineKind):
    classified = classify("keys =", lookahead)

    assert classified.kind is expected
    assert classified.name == "keys"


def test_classify_list_start_requires_empty_value():
    assert classify("keys = one", "two").kind is LineKind.KEY_VALUE


def test_classify_value():
    classified = classify("classA")

    assert classified.kind is LineKind.VALUE
    assert classified.value == "classA"


@pytest.mark.parametrize("line", ["[bad header!]", "[map.bad name]", "[a b]"])
def test_classify_bracketed_non_header_is_value(line: str):
    classified = classify(line)

    assert classified.kind is LineKind.VALUE
    assert classified.value == line


def test_bracketed_non_header_lookahead_starts_list():
    assert classify("supporting =", "[not a header!]").kind is LineKind.LIST_START


def test_is_value():
    assert is_value("classA") is True
    assert is_value("a = b") is False
    assert is_value("[a]") is False
    assert is_value("[map.a | b]") is False


def test_loose_recognizers():
    assert looks_like_header("[server.http]") is True
    assert looks_like_header("[bad header!]") is True
    assert looks_like_header("[x] trailing") is False
    assert looks_like_header("") is False
    assert looks_like_map_header("[map.bad name]") is True
    assert looks_like_map_header("[server]") is False
    assert looks_like_key_value("a = b") is True
    assert looks_like_key_value("a += b") is True
    assert looks_like_key_value("a=b") is False
    assert looks_like_key_value("<li>") is False


def test_looks_like_boundary():
    assert looks_like_boundary("next = 1") is True
    assert looks_like_boundary("[map.Press | XYZ]") is True
    assert looks_like_boundary("Append ABC Second line.") is False


def test_apply_context_downgrades_list_start_in_map():
    classified = classify("keywords =", "apples")
    ctx = ParserContext(state=ParserState.IN_MAP, map_name="Press", sub_map_key="ABC")

    downgraded = apply_context(classified, ctx)

    assert downgraded.kind is LineKind.KEY_VALUE
    assert downgraded.name == "keywords"
    assert downgraded.value == ""


def test_apply_context_keeps_list_start_in_section():
    classified = classify("keywords =", "apples")

    assert apply_context(classified, ParserContext(state=ParserState.IN_SECTION, section="a")) is classified
