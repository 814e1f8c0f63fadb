"""Package-specific exception types."""

from __future__ import annotations


class ParseError(ValueError):
    """Base class for parsing-related errors.

    Represents errors encountered while reading, classifying, or binding
    configuration lines.
    """


class EmptyInputError(ParseError):
    """Raised when the input holds no meaningful line at all."""

    def __init__(self, source: str | None = None):
        self.source = source
        message = "Input is empty" if source is None else f"{source} is empty"
        super().__init__(message)


class LineTooLongError(ParseError):
    """Raised when a line exceeds the configured maximum length.

    Args:
        line_number: One-based index of the offending line.
        max_line_length: Maximum allowed line length in characters.
    """

    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Line {self.line_number} exceeds maximum allowed length "
            f"of {self.max_line_length} characters"
        )


class IniSyntaxError(ParseError):
    """Raised when a line matches none of the dialect's productions.

    Args:
        line: Trimmed text of the offending line.
        line_number: One-based index of the offending line, when known.
        context: Rendered parser context (section, map, sub-map, list).
    """

    def __init__(self, line: str, line_number: int | None = None, context: str | None = None):
        self.line = line
        self.line_number = line_number
        self.context = context
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        where = f"Line {self.line_number}" if self.line_number is not None else "Line"
        message = f"{where}: unrecognized expression: {self.line!r}"
        if self.context:
            message += f" ({self.context})"
        return message


class UnsupportedConstructError(ParseError):
    """Reported when a bare value shows up inside a map block with no open list.

    The parser treats this as a diagnostic and drops the line unless strict
    mode is enabled, in which case it is raised.
    """

    def __init__(self, value: str, line_number: int | None = None, context: str | None = None):
        self.value = value
        self.line_number = line_number
        self.context = context
        where = f"Line {self.line_number}" if self.line_number is not None else "Line"
        message = f"{where}: bare values are not supported inside a map: {self.value!r}"
        if self.context:
            message += f" ({self.context})"
        super().__init__(message)


class BindingError(ParseError):
    """Raised when a destination cannot receive a value.

    Either the destination has no such location, or the location it has does
    not match the requested shape (scalar, sequence, map, nested map).

    Args:
        path: Normalized section or map name; empty for the root.
        key: Normalized key (or raw map key) being bound.
        expected_shape: Shape the operation needed.
        reason: Human-readable cause.
    """

    def __init__(
        self,
        path: str,
        key: str | None,
        expected_shape: str,
        reason: str,
        line_number: int | None = None,
        context: str | None = None,
    ):
        self.path = path
        self.key = key
        self.expected_shape = expected_shape
        self.reason = reason
        self.line_number = line_number
        self.context = context
        super().__init__(self._build_message())

    @property
    def location(self) -> str:
        parts = [part for part in (self.path, self.key) if part]
        return ".".join(parts) or "<root>"

    def with_location(self, line_number: int | None, context: str | None) -> "BindingError":
        """Return a copy of the error annotated with the line that triggered it."""
        return BindingError(
            self.path,
            self.key,
            self.expected_shape,
            self.reason,
            line_number=line_number,
            context=context,
        )

    def _build_message(self) -> str:
        message = f"Cannot bind {self.location} (expected {self.expected_shape}): {self.reason}"
        if self.line_number is not None:
            message = f"Line {self.line_number}: {message}"
        if self.context:
            message += f" ({self.context})"
        return message


class SchemaError(TypeError):
    """Raised when a destination type cannot be described by a binding schema."""


class NoMatchingFileError(FileNotFoundError):
    """Raised when no file in a directory satisfies the caller's matcher."""
