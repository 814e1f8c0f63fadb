"""Joining of ``key += value`` lines with the lines that follow them."""

from __future__ import annotations

import logging
from dataclasses import replace

from .classifier import looks_like_boundary
from .constants import CONTINUATION_SEPARATOR
from .models import ClassifiedLine, LineKind
from .reader import LineSource

LOGGER = logging.getLogger("iniplus.continuation")


def assemble_continuation(classified: ClassifiedLine, source: LineSource) -> ClassifiedLine:
    """Absorb the lines following a ``+=`` line into a single value.

    Lines are consumed while they do not loosely look like a key/value line,
    a section header, or a map header; the joined parts are separated by a
    single space. The line that stops the join is left in `source` as the
    next line to classify.

    Args:
        classified: A line classified as `LineKind.CONTINUATION`.
        source: Line source positioned right after `classified`.

    Returns:
        ClassifiedLine: Continuation line whose value is the joined text.

    Raises:
        ValueError: If `classified` is not a continuation line.

    Examples:
        source = LineSource(io.StringIO("second\\nthird\\nnext = 1\\n"))
        line = classify("blurb += first")
        assemble_continuation(line, source).value  # "first second third"
        source.next_line()  # "next = 1"
    """
    if classified.kind is not LineKind.CONTINUATION:
        raise ValueError(f"Not a continuation line: {classified.text!r}")

    parts = [classified.value] if classified.value else []
    while True:
        line = source.next_line()
        if line is None:
            break
        if looks_like_boundary(line):
            source.push_back(line)
            break
        parts.append(line)

    joined = CONTINUATION_SEPARATOR.join(parts)
    if len(parts) > 1:
        LOGGER.debug("Joined %d lines for key %r", len(parts), classified.name)
    return replace(classified, value=joined)
