"""Line source: meaningful lines with one-line lookahead."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .constants import COMMENT_PREFIXES, DEFAULT_ENCODING
from .exceptions import LineTooLongError


def is_skippable(line: str) -> bool:
    """Tell whether a trimmed line carries no content (blank or comment).

    Examples:
        is_skippable("")  # True
        is_skippable("; note")  # True
        is_skippable("key = value")  # False
    """
    return not line or line.startswith(COMMENT_PREFIXES)


class LineSource:
    """Yield trimmed, non-blank, non-comment lines from a stream.

    The stream may produce `str` or `bytes`; bytes are decoded with
    `encoding`. The source never closes the stream it reads from.

    Args:
        stream: Any iterable of lines, typically an open text or binary file.
        encoding: Encoding used for binary input.
        max_line_length: Optional limit on physical line length, excluding the
            line ending.

    Examples:
        source = LineSource(io.StringIO("a = 1\\n\\n# note\\nb = 2\\n"))
        source.next_line()  # "a = 1"
        source.peek()  # "b = 2"
    """

    def __init__(
        self,
        stream: Iterable[str] | Iterable[bytes],
        *,
        encoding: str = DEFAULT_ENCODING,
        max_line_length: int | None = None,
    ):
        self._lines: Iterator[str | bytes] = iter(stream)
        self._encoding = encoding
        self._max_line_length = max_line_length
        self._pending: list[tuple[str, int]] = []
        self._physical_line_number = 0
        self.line_number = 0

    def next_line(self) -> str | None:
        """Consume and return the next meaningful line, or None at end of input."""
        if self._pending:
            line, self.line_number = self._pending.pop()
            return line

        entry = self._read()
        if entry is None:
            return None
        line, self.line_number = entry
        return line

    def peek(self) -> str | None:
        """Return the next meaningful line without consuming it."""
        if not self._pending:
            entry = self._read()
            if entry is None:
                return None
            self._pending.append(entry)
        return self._pending[-1][0]

    def push_back(self, line: str, line_number: int | None = None) -> None:
        """Re-inject `line` so the next `next_line` call returns it."""
        self._pending.append((line, self.line_number if line_number is None else line_number))

    def __iter__(self) -> Iterator[str]:
        while (line := self.next_line()) is not None:
            yield line

    def _read(self) -> tuple[str, int] | None:
        for raw in self._lines:
            self._physical_line_number += 1
            text = raw.decode(self._encoding) if isinstance(raw, bytes) else raw
            self._enforce_length(text)
            line = text.strip()
            if is_skippable(line):
                continue
            return line, self._physical_line_number
        return None

    def _enforce_length(self, text: str) -> None:
        if self._max_line_length is None:
            return
        line_len = len(text.rstrip("\r\n"))
        if line_len > self._max_line_length:
            raise LineTooLongError(self._physical_line_number, self._max_line_length)
