"""
iniplus: parser for an extended INI dialect.

On top of ``key = value`` and ``[section]`` the dialect supports keyed map
blocks (``[map.name]``, ``[map.name | subkey]``), implicit lists (``key =``
followed by bare value lines), and ``key += value`` continuations.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    iniplus show app.ini

Library Usage:
    from dataclasses import dataclass, field
    from iniplus import parse_file

    @dataclass
    class AppConfig:
        id: str = ""
        supporting: list[str] = field(default_factory=list)
        texts: dict[str, str] = field(default_factory=dict)

    config = AppConfig()
    parse_file(config, "app.ini")
"""

from .binder import Binder, DataclassBinder, DictBinder, Schema, SlotShape, make_binder
from .config import ConfigError, IniPlusConfig
from .exceptions import (
    BindingError,
    EmptyInputError,
    IniSyntaxError,
    LineTooLongError,
    NoMatchingFileError,
    ParseError,
    SchemaError,
    UnsupportedConstructError,
)
from .models import AppendListItem, ParseResult, SetMapEntry, SetScalar
from .naming import to_field_name
from .parser import (
    apply_event,
    iter_events,
    parse,
    parse_directory,
    parse_file,
    parse_text,
    seek_key,
    seek_key_in_stream,
)

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse",
    "parse_file",
    "parse_text",
    "parse_directory",
    "iter_events",
    "apply_event",
    "seek_key",
    "seek_key_in_stream",
    "to_field_name",
    # Binding
    "Binder",
    "DataclassBinder",
    "DictBinder",
    "Schema",
    "SlotShape",
    "make_binder",
    # Data models
    "AppendListItem",
    "ParseResult",
    "SetMapEntry",
    "SetScalar",
    # Configuration
    "IniPlusConfig",
    # Exceptions
    "BindingError",
    "ConfigError",
    "EmptyInputError",
    "IniSyntaxError",
    "LineTooLongError",
    "NoMatchingFileError",
    "ParseError",
    "SchemaError",
    "UnsupportedConstructError",
    # Version
    "__version__",
]
