"""Data models for iniplus."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from .exceptions import UnsupportedConstructError


class LineKind(Enum):
    """Grammar productions a single logical line can represent.

    Attributes:
        SECTION: ``[dotted.name]`` header.
        MAP_HEADER: ``[map.name]`` or ``[map.name | subkey]`` header.
        LIST_START: ``key =`` followed by a bare value line.
        KEY_VALUE: ``key = value``, including an empty value.
        CONTINUATION: ``key += value``, possibly joined over several lines.
        VALUE: Bare value line (list item).
    """

    SECTION = auto()
    MAP_HEADER = auto()
    LIST_START = auto()
    KEY_VALUE = auto()
    CONTINUATION = auto()
    VALUE = auto()


@dataclass(frozen=True)
class ClassifiedLine:
    """A trimmed line tagged with the production it matched.

    Attributes:
        kind: Matched production.
        text: Trimmed line text.
        name: Section name, map name, or key, depending on `kind`.
        value: Value text for key/value, continuation, and bare value lines.
        sub_key: Sub-map key of a map header, if any.
        line_number: One-based physical line number, when known.
    """

    kind: LineKind
    text: str
    name: str | None = None
    value: str | None = None
    sub_key: str | None = None
    line_number: int | None = None


class ParserState(Enum):
    """Block the parser is currently inside.

    Attributes:
        ROOT: Before any header; keys bind at the destination root.
        IN_SECTION: Inside a ``[section]`` block.
        IN_MAP: Inside a ``[map.name]`` block.
    """

    ROOT = auto()
    IN_SECTION = auto()
    IN_MAP = auto()


@dataclass
class ParserContext:
    """Encapsulate parser state while walking configuration lines.

    Attributes:
        state: Current parser state.
        section: Active section name as written in the file, if any.
        map_name: Active map name as written in the file, if any.
        sub_map_key: Active sub-map key, if any.
        list_key: Key of the list currently collecting bare values, if any.
        line_number: Physical line number of the line being processed.
    """

    state: ParserState = ParserState.ROOT
    section: str | None = None
    map_name: str | None = None
    sub_map_key: str | None = None
    list_key: str | None = None
    line_number: int | None = None

    def describe(self) -> str:
        return (
            f"section={self.section!r}, map={self.map_name!r}, "
            f"submap={self.sub_map_key!r}, list={self.list_key!r}"
        )


@dataclass(frozen=True)
class SetScalar:
    """Bind ``value`` to ``key`` inside ``path`` (empty path is the root)."""

    path: str
    key: str
    value: str
    line_number: int | None = field(default=None, compare=False)
    context: str | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class AppendListItem:
    """Append ``value`` to the ordered sequence at ``path``/``key``."""

    path: str
    key: str
    value: str
    line_number: int | None = field(default=None, compare=False)
    context: str | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class SetMapEntry:
    """Insert ``key: value`` into map ``map_name``, under ``sub_key`` when set."""

    map_name: str
    sub_key: str | None
    key: str
    value: str
    line_number: int | None = field(default=None, compare=False)
    context: str | None = field(default=None, compare=False, repr=False)


Event = Union[SetScalar, AppendListItem, SetMapEntry]


@dataclass
class ParseResult:
    """Structured result of parsing configuration text.

    Attributes:
        events: Semantic events in file order.
        diagnostics: Non-fatal problems that caused lines to be skipped.
    """

    events: list[Event]
    diagnostics: list[UnsupportedConstructError]
