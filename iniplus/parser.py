"""Extended INI parsing: context state machine and public entry points."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from .binder import Binder, make_binder
from .classifier import apply_context, classify, parse_key_value
from .config import IniPlusConfig, validate_config
from .continuation import assemble_continuation
from .exceptions import (
    BindingError,
    EmptyInputError,
    IniSyntaxError,
    NoMatchingFileError,
    UnsupportedConstructError,
)
from .filesystem import collect_file_stat, enforce_file_size, list_matching_files, safe_read
from .models import (
    AppendListItem,
    ClassifiedLine,
    Event,
    LineKind,
    ParseResult,
    ParserContext,
    ParserState,
    SetMapEntry,
    SetScalar,
)
from .naming import to_field_name
from .reader import LineSource

LOGGER = logging.getLogger("iniplus.parser")

Stream = Iterable[str] | Iterable[bytes]
Reporter = Callable[[UnsupportedConstructError], None]


def _enter_section(ctx: ParserContext, name: str) -> None:
    """Switch to a ``[section]`` block, closing any map and list.

    Examples:
        ctx = ParserContext(state=ParserState.IN_MAP, map_name="texts", list_key="keys")
        _enter_section(ctx, "server.http")
    """
    ctx.state = ParserState.IN_SECTION
    ctx.section = name
    ctx.map_name = None
    ctx.sub_map_key = None
    ctx.list_key = None


def _enter_map(ctx: ParserContext, name: str, sub_key: str | None) -> None:
    """Switch to a ``[map.name | subkey]`` block, closing any section and list."""
    ctx.state = ParserState.IN_MAP
    ctx.map_name = name
    ctx.sub_map_key = sub_key
    ctx.section = None
    ctx.list_key = None


def _start_list(ctx: ParserContext, key: str) -> None:
    ctx.list_key = key


def _key_value_event(ctx: ParserContext, classified: ClassifiedLine) -> Event:
    """Close any open list and build the event for a key/value line.

    Inside a map the raw key becomes a map entry; anywhere else the key and
    section are normalized into a scalar location.
    """
    ctx.list_key = None
    key = classified.name or ""
    value = classified.value or ""

    if ctx.state is ParserState.IN_MAP:
        return SetMapEntry(
            to_field_name(ctx.map_name),
            ctx.sub_map_key,
            key,
            value,
            line_number=classified.line_number,
            context=ctx.describe(),
        )

    return SetScalar(
        to_field_name(ctx.section or ""),
        to_field_name(key),
        value,
        line_number=classified.line_number,
        context=ctx.describe(),
    )


def _value_event(
    ctx: ParserContext, classified: ClassifiedLine, strict: bool, report: Reporter
) -> Event | None:
    """Turn a bare value line into a list item.

    Returns:
        Event | None: The list item, or None when the line was reported as
            unsupported and dropped.

    Raises:
        UnsupportedConstructError: In strict mode, for a bare value inside a map.
        IniSyntaxError: For a bare value with neither list nor map open.
    """
    value = classified.value or classified.text

    if ctx.list_key is not None:
        return AppendListItem(
            to_field_name(ctx.section or ""),
            to_field_name(ctx.list_key),
            value,
            line_number=classified.line_number,
            context=ctx.describe(),
        )

    if ctx.state is ParserState.IN_MAP:
        error = UnsupportedConstructError(value, classified.line_number, ctx.describe())
        if strict:
            raise error
        report(error)
        return None

    raise IniSyntaxError(classified.text, classified.line_number, ctx.describe())


def _process_line(
    ctx: ParserContext, classified: ClassifiedLine, strict: bool, report: Reporter
) -> Event | None:
    kind = classified.kind

    if kind is LineKind.SECTION:
        _enter_section(ctx, classified.name or "")
        LOGGER.debug("Line %s: section %r", classified.line_number, ctx.section)
        return None

    if kind is LineKind.MAP_HEADER:
        _enter_map(ctx, classified.name or "", classified.sub_key)
        LOGGER.debug(
            "Line %s: map %r, submap %r", classified.line_number, ctx.map_name, ctx.sub_map_key
        )
        return None

    if kind is LineKind.LIST_START:
        _start_list(ctx, classified.name or "")
        LOGGER.debug("Line %s: list %r", classified.line_number, ctx.list_key)
        return None

    if kind in (LineKind.KEY_VALUE, LineKind.CONTINUATION):
        return _key_value_event(ctx, classified)

    return _value_event(ctx, classified, strict, report)


def _iter_events(stream: Stream, config: IniPlusConfig, report: Reporter) -> Iterator[Event]:
    source = LineSource(
        stream, encoding=config.encoding, max_line_length=config.max_line_length
    )

    line = source.next_line()
    if line is None:
        raise EmptyInputError()

    ctx = ParserContext()
    while line is not None:
        line_number = source.line_number
        ctx.line_number = line_number

        classified = classify(line, source.peek(), line_number)
        if classified.kind is LineKind.CONTINUATION:
            classified = assemble_continuation(classified, source)
        classified = apply_context(classified, ctx)

        event = _process_line(ctx, classified, config.strict, report)
        if event is not None:
            LOGGER.debug("Line %s: %r", line_number, event)
            yield event

        line = source.next_line()


def _warning_reporter(warn: Callable[[str], None] | None) -> Reporter:
    if warn is None:
        return lambda error: LOGGER.warning("Skipping line: %s", error)
    return lambda error: warn(f"Warning: skipping line: {error}")


def iter_events(
    stream: Stream,
    config: IniPlusConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> Iterator[Event]:
    """Yield the semantic events of a configuration stream in file order.

    Args:
        stream: Open text or binary stream (or any iterable of lines). It is
            not closed.
        config: Parsing configuration; defaults to a new `IniPlusConfig`.
        warn: Optional callback for non-fatal diagnostics. Without one they
            go to the ``iniplus.parser`` logger.

    Returns:
        Iterator[Event]: `SetScalar`, `AppendListItem`, and `SetMapEntry` events.

    Raises:
        ConfigError: If the configuration fails validation.
        EmptyInputError: If the stream holds no meaningful line.
        IniSyntaxError: If a line cannot be classified in its context.
        LineTooLongError: If a physical line exceeds the configured limit.
        UnsupportedConstructError: In strict mode only.

    Examples:
        list(iter_events(io.StringIO("[map.texts]\\nhello = Hey there !\\n")))
    """
    config = config or IniPlusConfig()
    validate_config(config)
    return _iter_events(stream, config, _warning_reporter(warn))


def parse_text(content: str, config: IniPlusConfig | None = None) -> ParseResult:
    """Parse configuration text into events without binding them.

    Diagnostics are collected on the result instead of being reported.

    Examples:
        result = parse_text("supporting =\\n  classA\\n  classB\\n")
        [event.value for event in result.events]  # ["classA", "classB"]
    """
    config = config or IniPlusConfig()
    validate_config(config)

    diagnostics: list[UnsupportedConstructError] = []
    events = list(_iter_events(content.splitlines(keepends=True), config, diagnostics.append))
    return ParseResult(events=events, diagnostics=diagnostics)


def apply_event(binder: Binder, event: Event) -> None:
    """Dispatch one event to the matching binder operation."""
    if isinstance(event, SetScalar):
        binder.set_scalar(event.path, event.key, event.value)
    elif isinstance(event, AppendListItem):
        binder.append_list_item(event.path, event.key, event.value)
    elif isinstance(event, SetMapEntry):
        if event.sub_key is None:
            binder.set_map_entry(event.map_name, event.key, event.value)
        else:
            binder.set_submap_entry(event.map_name, event.sub_key, event.key, event.value)
    else:
        raise TypeError(f"Unknown event: {event!r}")


def parse(
    destination: object,
    stream: Stream,
    config: IniPlusConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> None:
    """Parse a whole stream into a destination.

    Events are applied as they are produced, so a failure part-way leaves the
    destination holding everything bound before it. There is no rollback.

    Args:
        destination: Dataclass instance, dict, or `Binder`.
        stream: Open text or binary stream; left open.
        config: Parsing configuration; defaults to a new `IniPlusConfig`.
        warn: Optional callback for non-fatal diagnostics.

    Raises:
        SchemaError: If the destination type cannot be bound to.
        BindingError: If the destination lacks a location or its shape differs.
        ParseError: For any other parsing failure (see `iter_events`).

    Examples:
        config = AppConfig()
        with open("app.ini", encoding="utf-8") as handle:
            parse(config, handle)
    """
    binder = make_binder(destination)
    for event in iter_events(stream, config, warn):
        try:
            apply_event(binder, event)
        except BindingError as error:
            raise error.with_location(event.line_number, event.context) from error


def parse_file(
    destination: object,
    filepath: Path | str,
    config: IniPlusConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> None:
    """Open a configuration file and parse it into a destination.

    The file size is checked against `config.max_file_size` before reading,
    and the handle is closed on every exit path.

    Raises:
        IOError: If the file is missing, unreadable, not regular, or too large.
        UnicodeDecodeError: If the file is not valid in the configured encoding.
        EmptyInputError: If the file holds no meaningful line.
        ParseError: For any other parsing or binding failure.

    Examples:
        parse_file(AppConfig(), Path("conf/app.ini"))
    """
    config = config or IniPlusConfig()
    validate_config(config)
    filepath = Path(filepath)

    stat_result = collect_file_stat(filepath)
    enforce_file_size(stat_result, config.max_file_size, filepath)

    with safe_read(filepath, config.encoding) as stream:
        try:
            parse(destination, stream, config, warn)
        except EmptyInputError as error:
            raise EmptyInputError(str(filepath)) from error


def seek_key_in_stream(
    stream: Stream, key: str, config: IniPlusConfig | None = None
) -> str | None:
    """Return the value of the first line starting with `key`.

    A cheap scan with no sections, maps, lists, or continuations.

    Returns:
        str | None: The value, or None when no line starts with `key`.

    Raises:
        EmptyInputError: If the stream holds no meaningful line.
        IniSyntaxError: If the first line starting with `key` is not a
            key/value line.

    Examples:
        seek_key_in_stream(io.StringIO("id = /home\\n"), "id")  # "/home"
    """
    config = config or IniPlusConfig()
    source = LineSource(
        stream, encoding=config.encoding, max_line_length=config.max_line_length
    )

    empty = True
    for line in source:
        empty = False
        if line.startswith(key):
            key_value = parse_key_value(line)
            if key_value is None:
                raise IniSyntaxError(line, source.line_number)
            return key_value[1]

    if empty:
        raise EmptyInputError()
    return None


def seek_key(
    filepath: Path | str, key: str, config: IniPlusConfig | None = None
) -> str | None:
    """Open a file and return the value of the first line starting with `key`.

    Raises:
        IOError: If the file is missing or unreadable.
        EmptyInputError: If the file holds no meaningful line.
        IniSyntaxError: If the matching line is not a key/value line.

    Examples:
        seek_key(Path("conf/site_a.ini"), "id")
    """
    config = config or IniPlusConfig()
    validate_config(config)
    filepath = Path(filepath)

    with safe_read(filepath, config.encoding) as stream:
        try:
            return seek_key_in_stream(stream, key, config)
        except EmptyInputError as error:
            raise EmptyInputError(str(filepath)) from error


def parse_directory(
    destination: object,
    directory: Path | str,
    pattern: str,
    id_key: str,
    matcher: Callable[[str], bool],
    config: IniPlusConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> Path:
    """Parse the first file in `directory` whose `id_key` value satisfies `matcher`.

    Candidates are regular files matching the wildcard `pattern`, visited in
    name order. Each is pre-filtered with `seek_key`; files without `id_key`
    are skipped. Files are processed one after another, and the first match is
    parsed fully into `destination`.

    Args:
        destination: Dataclass instance, dict, or `Binder`.
        directory: Directory to scan (not recursive).
        pattern: File name pattern where ``*`` matches any run of characters.
        id_key: Key whose value identifies a file.
        matcher: Predicate over the `id_key` value.
        config: Parsing configuration; defaults to a new `IniPlusConfig`.
        warn: Optional callback for non-fatal diagnostics.

    Returns:
        Path: The file that was parsed.

    Raises:
        NoMatchingFileError: If no candidate satisfies `matcher`.
        IOError: If the directory cannot be listed or a candidate cannot be read.
        ParseError: If seeking or parsing a candidate fails.

    Examples:
        parse_directory(AppConfig(), "conf", "site_*.ini", "id", lambda v: v == "/home")
    """
    directory = Path(directory)

    for candidate in list_matching_files(directory, pattern):
        value = seek_key(candidate, id_key, config)
        LOGGER.debug("Candidate %s: %s = %r", candidate, id_key, value)
        if value is not None and matcher(value):
            parse_file(destination, candidate, config, warn)
            return candidate

    raise NoMatchingFileError(
        f"No matching configuration file found in {directory} for pattern {pattern!r}"
    )
