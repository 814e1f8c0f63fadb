"""Configuration loading and management."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib


@dataclass
class IniPlusConfig:
    """Configuration for reading extended INI files.

    Attributes:
        encoding: Encoding used to decode binary streams and files.
        max_line_length: Maximum physical line length allowed during parsing.
        max_file_size: Maximum file size in bytes that will be processed.
        strict: Raise on bare values inside map blocks instead of skipping them.

    Examples:
        IniPlusConfig(max_line_length=512, strict=True)
    """

    encoding: str = "utf-8"

    # Limits
    max_line_length: int = 10_000
    max_file_size: int = 10 * 1024 * 1024

    # Behavior
    strict: bool = False


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_line_length` must be a positive integer")
    """


def load_config(search_path: Path) -> IniPlusConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.iniplus]`` table from `pyproject.toml` and the ``[iniplus]`` or
    ``[tool.iniplus]`` table from `.iniplus.toml` when present. Returns default
    values when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        IniPlusConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("conf"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "iniplus")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".iniplus.toml",
            table_paths=[("iniplus",), ("tool", "iniplus")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return IniPlusConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> IniPlusConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> IniPlusConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return IniPlusConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return IniPlusConfig()

    try:
        return IniPlusConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: IniPlusConfig) -> None:
    """Validate an `IniPlusConfig` instance.

    Raises:
        ConfigError: If the encoding is unknown, numeric limits are not
            positive integers, or `strict` is not a boolean.

    Examples:
        validate_config(IniPlusConfig(max_file_size=4096))
    """
    if not isinstance(config.encoding, str) or not config.encoding:
        raise ConfigError("`encoding` must be a non-empty string")
    try:
        codecs.lookup(config.encoding)
    except LookupError as error:
        raise ConfigError(f"Unknown `encoding`: {config.encoding}") from error

    _ensure_integers(
        {
            "max_line_length": config.max_line_length,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "max_line_length": config.max_line_length,
            "max_file_size": config.max_file_size,
        }
    )

    if not isinstance(config.strict, bool):
        raise ConfigError("`strict` must be a boolean")


def apply_overrides(config: IniPlusConfig, **overrides: object) -> IniPlusConfig:
    """Apply override values to an `IniPlusConfig`.

    Values set to None are ignored. The original configuration is returned
    when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `IniPlusConfig`.

    Examples:
        updated = apply_overrides(config, strict=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> IniPlusConfig:
    """Load, override, and validate configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), strict=True)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
