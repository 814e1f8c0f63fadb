"""Line classification for the extended INI dialect.

Two families of recognizers live here. Strict recognizers decide which
production a line is and extract its parts; they drive the parser's semantics.
Loose recognizers only answer "does this look like the start of a new
construct" and are used to decide where a ``+=`` join stops. Every loose
recognizer accepts a superset of its strict counterpart.
"""

from __future__ import annotations

from dataclasses import replace

from .constants import (
    KEY_VALUE_PATTERN,
    LIKE_HEADER_PATTERN,
    LIKE_KEY_VALUE_PATTERN,
    LIKE_MAP_HEADER_PATTERN,
    MAP_HEADER_PATTERN,
    SECTION_PATTERN,
)
from .models import ClassifiedLine, LineKind, ParserContext, ParserState


def looks_like_header(line: str) -> bool:
    """Loosely detect any bracketed header.

    Examples:
        looks_like_header("[server.http]")  # True
        looks_like_header("[bad header!]")  # True
    """
    return bool(line) and line[0] == "[" and LIKE_HEADER_PATTERN.match(line) is not None


def looks_like_map_header(line: str) -> bool:
    """Loosely detect a bracketed header starting with ``map.``."""
    return bool(line) and line[0] == "[" and LIKE_MAP_HEADER_PATTERN.match(line) is not None


def looks_like_key_value(line: str) -> bool:
    """Loosely detect ``key = value`` or ``key += value``."""
    return LIKE_KEY_VALUE_PATTERN.match(line) is not None


def looks_like_boundary(line: str) -> bool:
    """Tell whether `line` would end a continuation join."""
    return looks_like_key_value(line) or looks_like_header(line) or looks_like_map_header(line)


def parse_map_header(line: str) -> tuple[str, str | None] | None:
    """Extract the map name and optional sub-map key from a map header.

    An empty sub-key (``[map.name | ]``) counts as no sub-key.

    Examples:
        parse_map_header("[map.Press | ABC]")  # ("Press", "ABC")
        parse_map_header("[map.texts]")  # ("texts", None)
    """
    match = MAP_HEADER_PATTERN.match(line)
    if match is None:
        return None
    return match.group("name"), match.group("subkey") or None


def parse_section(line: str) -> str | None:
    """Extract the section name from a ``[section]`` header."""
    if not line or line[0] != "[":
        return None
    match = SECTION_PATTERN.match(line)
    if match is None:
        return None
    return match.group("name")


def parse_key_value(line: str) -> tuple[str, str, bool] | None:
    """Split a ``key [+]= value`` line.

    Returns:
        tuple[str, str, bool] | None: Key, value, and whether the operator was
            ``+=``; None when the line is not a key/value line.

    Examples:
        parse_key_value("port = 8080")  # ("port", "8080", False)
        parse_key_value("blurb += Hello")  # ("blurb", "Hello", True)
        parse_key_value("random = s=f(x)")  # ("random", "s=f(x)", False)
    """
    match = KEY_VALUE_PATTERN.match(line)
    if match is None:
        return None
    key = match.group("key").strip()
    if not key:
        return None
    return key, match.group("value"), match.group("operator") == "+="


def is_value(line: str) -> bool:
    """A bare value is anything that is not a header or a key/value line."""
    return (
        parse_map_header(line) is None
        and parse_section(line) is None
        and parse_key_value(line) is None
    )


def classify(line: str, lookahead: str | None = None, line_number: int | None = None) -> ClassifiedLine:
    """Classify a trimmed line into exactly one production.

    Recognizers are tried in priority order: map header, section, list start,
    key/value (or continuation), bare value. Anything that is not a header or
    a key/value line is a bare value, including bracketed text such as
    ``[not a header!]``.

    Args:
        line: Trimmed, non-empty line to classify.
        lookahead: Next meaningful line, or None at end of input. Only used to
            tell a list start from a key with an empty value.
        line_number: Physical line number stored on the result.

    Returns:
        ClassifiedLine: The tagged line.

    Examples:
        classify("[map.Press | ABC]").kind  # LineKind.MAP_HEADER
        classify("keys =", "keyOne").kind  # LineKind.LIST_START
        classify("keys =", "[other]").kind  # LineKind.KEY_VALUE
    """
    map_header = parse_map_header(line)
    if map_header is not None:
        name, sub_key = map_header
        return ClassifiedLine(
            LineKind.MAP_HEADER, line, name=name, sub_key=sub_key, line_number=line_number
        )

    section = parse_section(line)
    if section is not None:
        return ClassifiedLine(LineKind.SECTION, line, name=section, line_number=line_number)

    key_value = parse_key_value(line)
    if key_value is not None:
        key, value, is_continuation = key_value
        if is_continuation:
            return ClassifiedLine(
                LineKind.CONTINUATION, line, name=key, value=value, line_number=line_number
            )
        if value == "" and lookahead and is_value(lookahead):
            return ClassifiedLine(LineKind.LIST_START, line, name=key, line_number=line_number)
        return ClassifiedLine(
            LineKind.KEY_VALUE, line, name=key, value=value, line_number=line_number
        )

    return ClassifiedLine(LineKind.VALUE, line, value=line, line_number=line_number)


def apply_context(classified: ClassifiedLine, ctx: ParserContext) -> ClassifiedLine:
    """Reinterpret a classification in light of the parser context.

    Map blocks never hold lists, and an empty value is legal there, so a list
    start inside a map becomes a key with an empty value.
    """
    if ctx.state is ParserState.IN_MAP and classified.kind is LineKind.LIST_START:
        return replace(classified, kind=LineKind.KEY_VALUE, value="")
    return classified
