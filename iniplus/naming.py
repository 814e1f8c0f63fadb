"""Name normalization for destination lookups."""

from __future__ import annotations

import re


def to_field_name(name: str) -> str:
    """Convert a dotted dialect identifier into a destination field name.

    Capitalizes the first character and every character following a dot, then
    drops the dots.

    Args:
        name: Section name, map name, or key as written in the file.

    Returns:
        str: Normalized field name; empty when `name` is empty.

    Examples:
        to_field_name("server.http")  # "ServerHttp"
        to_field_name("logDir")  # "LogDir"
    """
    if not name:
        return ""

    out = [name[0].upper()]
    after_dot = False
    for character in name[1:]:
        if character == ".":
            after_dot = True
            continue
        out.append(character.upper() if after_dot else character)
        after_dot = False
    return "".join(out)


def attribute_to_field_name(attribute: str) -> str:
    """Map a snake_case attribute into the same space as `to_field_name`.

    Examples:
        attribute_to_field_name("server_http")  # "ServerHttp"
        attribute_to_field_name("id")  # "Id"
    """
    return "".join(part[:1].upper() + part[1:] for part in attribute.split("_") if part)


def wildcard_regex(pattern: str) -> re.Pattern[str]:
    """Compile a shell-style filename pattern where only `*` is special.

    Examples:
        wildcard_regex("config_*.ini").match("config_a.ini")  # match
        wildcard_regex("*.ini").match("a.ini.bak")  # None
    """
    parts = [".*" if character == "*" else re.escape(character) for character in pattern]
    return re.compile("^" + "".join(parts) + "$")
