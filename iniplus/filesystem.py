"""Filesystem helpers for iniplus."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_ENCODING, DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_LINE_LENGTH
from .naming import wildcard_regex

MAX_FILE_SIZE_ENV_VAR = "INIPLUS_MAX_FILE_SIZE"
MAX_LINE_LENGTH_ENV_VAR = "INIPLUS_MAX_LINE_LENGTH"


def _positive_int_from_env(env_var: str, default: int) -> int:
    env_value = os.environ.get(env_var)
    if env_value is None:
        return default

    try:
        value = int(env_value)
    except ValueError as error:
        error_message = f"Invalid value for {env_var}: {env_value} (expected positive integer)"
        raise ValueError(error_message) from error

    if value <= 0:
        error_message = f"{env_var} must be a positive integer, got {value}."
        raise ValueError(error_message)

    return value


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["INIPLUS_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    return _positive_int_from_env(MAX_FILE_SIZE_ENV_VAR, default)


def get_max_line_length(default: int = DEFAULT_MAX_LINE_LENGTH) -> int:
    """Resolve the maximum allowed line length.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    return _positive_int_from_env(MAX_LINE_LENGTH_ENV_VAR, default)


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata.

    Raises:
        IOError: If the path is inaccessible or not a regular file.

    Examples:
        stat_result = collect_file_stat(Path("app.ini"))
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.

    Examples:
        enforce_file_size(os.stat("app.ini"), 102400, Path("app.ini"))
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path, encoding: str = DEFAULT_ENCODING) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.
        encoding: Text encoding of the file.

    Returns:
        TextIO: File handle opened for reading.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("app.ini")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding=encoding)
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def list_matching_files(directory: Path, pattern: str) -> list[Path]:
    """List regular files in `directory` whose names match a wildcard pattern.

    Only ``*`` is special in `pattern`; matching is anchored on the whole file
    name. Results are sorted by name.

    Raises:
        IOError: If the directory cannot be listed.

    Examples:
        list_matching_files(Path("conf"), "site_*.ini")
    """
    regex = wildcard_regex(pattern)
    try:
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError as error:
        error_message = f"Error scanning directory {directory}: {error}"
        raise IOError(error_message) from error

    return [entry for entry in entries if entry.is_file() and regex.match(entry.name)]
