"""
Inspects extended INI files from the command line.
Parses a file into JSON, looks up a single key, or finds the first file in a
directory whose identifying key matches a value.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path

import click

from .config import ConfigError, IniPlusConfig, apply_overrides, build_config
from .exceptions import ParseError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    safe_read,
)
from .models import Event
from .parser import iter_events, parse_directory, parse_file, seek_key

__all__ = ["cli"]

LOGGER = logging.getLogger("iniplus.cli")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _warn(message: str) -> None:
    click.echo(message, err=True)


def _resolve_config(search_path: Path, strict: bool | None) -> IniPlusConfig:
    try:
        config = build_config(search_path, strict=strict)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    return apply_overrides(config, max_file_size=max_file_size, max_line_length=max_line_length)


def _format_event(event: Event) -> str:
    fields = {
        item.name: getattr(event, item.name)
        for item in dataclasses.fields(event)
        if item.name != "context"
    }
    return json.dumps({"event": type(event).__name__, **fields}, ensure_ascii=False)


def _dump(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


@click.group()
@click.version_option()
@click.option("-v", "--verbose", is_flag=True, help="Log parser activity to stderr")
def cli(verbose: bool = False):
    """
    Parse extended INI files (sections, [map.name | key] blocks, lists, += joins).
    """
    _configure_logging(verbose)


@cli.command()
@click.option("--events", "show_events", is_flag=True, help="Print one event per line")
@click.option(
    "--strict/--lenient",
    default=None,
    help="Fail on bare values inside map blocks instead of skipping them",
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(filepath: Path, show_events: bool = False, strict: bool | None = None):
    """
    Print the parsed content of FILEPATH as JSON.

    Examples:
        iniplus show app.ini
        iniplus show --events --strict app.ini
    """
    config = _resolve_config(filepath.parent, strict)

    try:
        if show_events:
            stat_result = collect_file_stat(filepath)
            enforce_file_size(stat_result, config.max_file_size, filepath)
            with safe_read(filepath, config.encoding) as stream:
                for event in iter_events(stream, config, warn=_warn):
                    click.echo(_format_event(event))
            return

        data: dict = {}
        parse_file(data, filepath, config, warn=_warn)
    except (ParseError, OSError, UnicodeDecodeError) as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    click.echo(_dump(data))


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
def seek(filepath: Path, key: str):
    """
    Print the value of the first KEY line in FILEPATH.

    Examples:
        iniplus seek app.ini id
    """
    config = _resolve_config(filepath.parent, None)

    try:
        value = seek_key(filepath, key, config)
    except (ParseError, OSError, UnicodeDecodeError) as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    if value is None:
        raise click.ClickException(f"{key} not found in {filepath}")
    click.echo(value)


@cli.command()
@click.option(
    "--strict/--lenient",
    default=None,
    help="Fail on bare values inside map blocks instead of skipping them",
)
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("pattern")
@click.argument("key")
@click.argument("value")
def find(directory: Path, pattern: str, key: str, value: str, strict: bool | None = None):
    """
    Parse the first file in DIRECTORY matching PATTERN whose KEY equals VALUE.

    Prints the matched path, then its content as JSON.

    Examples:
        iniplus find conf "site_*.ini" id /home
    """
    config = _resolve_config(directory, strict)

    data: dict = {}
    try:
        matched = parse_directory(
            data, directory, pattern, key, lambda found: found == value, config, warn=_warn
        )
    except (ParseError, OSError, UnicodeDecodeError) as error:
        raise click.ClickException(str(error)) from error

    LOGGER.debug("Matched %s", matched)
    click.echo(str(matched))
    click.echo(_dump(data))


if __name__ == "__main__":
    cli()
