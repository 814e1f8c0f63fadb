"""Constants used across the iniplus package."""

from __future__ import annotations

import re

from .config import IniPlusConfig

DEFAULT_CONFIG = IniPlusConfig()

DEFAULT_ENCODING = DEFAULT_CONFIG.encoding
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAX_LINE_LENGTH = DEFAULT_CONFIG.max_line_length

COMMENT_PREFIXES = ("#", ";")
CONTINUATION_SEPARATOR = " "

# Strict patterns: drive semantics.
# [map.name] or [map.name | subkey]
MAP_HEADER_PATTERN = re.compile(
    r"^\[\s*map\.(?P<name>[A-Za-z0-9_.]+)(?:\s*\|\s*(?P<subkey>[A-Za-z0-9_\-.*]*))?\s*\]$"
)
# [dotted.section]
SECTION_PATTERN = re.compile(r"^\[\s*(?P<name>[A-Za-z0-9_.]+)\s*\]$")
# key = value, key += value
KEY_VALUE_PATTERN = re.compile(r"^(?P<key>[^=]+?)\s+(?P<operator>\+?=)\s*(?P<value>.*)$")

# Loose patterns: only used to stop continuation joins, must accept a superset
# of the strict ones.
LIKE_HEADER_PATTERN = re.compile(r"^\[[^\[\]]+\]$")
LIKE_MAP_HEADER_PATTERN = re.compile(r"^\[\s*map\..*\]$")
LIKE_KEY_VALUE_PATTERN = re.compile(r"^[^=]+\s+\+?=.*$")
