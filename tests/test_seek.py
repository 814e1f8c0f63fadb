from __future__ import annotations

import io
import textwrap
from pathlib import Path

import pytest

from iniplus.exceptions import EmptyInputError, IniSyntaxError, NoMatchingFileError
from iniplus.parser import parse_directory, seek_key, seek_key_in_stream


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def test_seek_key_in_stream_returns_first_value():
    stream = io.StringIO("# header\nname = demo\nid = /home\nid = /other\n")

    assert seek_key_in_stream(stream, "id") == "/home"


def test_seek_key_ignores_sections_and_maps():
    stream = io.StringIO("[map.texts]\nhello = Hey there !\n")

    assert seek_key_in_stream(stream, "hello") == "Hey there !"


def test_seek_key_missing_returns_none():
    assert seek_key_in_stream(io.StringIO("name = demo\n"), "id") is None


def test_seek_key_unparsable_line_raises():
    with pytest.raises(IniSyntaxError) as excinfo:
        seek_key_in_stream(io.StringIO("name = demo\nid\n"), "id")

    assert excinfo.value.line_number == 2


def test_seek_key_empty_stream_raises():
    with pytest.raises(EmptyInputError):
        seek_key_in_stream(io.StringIO("\n# nothing\n"), "id")


def test_seek_key_reads_file(tmp_path: Path):
    target = _write(tmp_path, "app.ini", "id = /home\n")

    assert seek_key(target, "id") == "/home"


def test_seek_key_missing_file(tmp_path: Path):
    with pytest.raises(IOError):
        seek_key(tmp_path / "missing.ini", "id")


def test_seek_key_empty_file_names_the_file(tmp_path: Path):
    target = _write(tmp_path, "empty.ini", "")

    with pytest.raises(EmptyInputError, match="empty.ini"):
        seek_key(target, "id")


def _populate(tmp_path: Path) -> None:
    _write(tmp_path, "test_config_a.ini", "id = /other\nport = 1\n")
    _write(tmp_path, "test_config_b.ini", "id = /home\nport = 2\n")
    _write(tmp_path, "test_config_c.ini", "id = /home\nport = 3\n")
    _write(tmp_path, "notes.txt", "id = /home\nport = 4\n")
    (tmp_path / "test_config_dir.ini").mkdir()


def test_parse_directory_parses_first_match(tmp_path: Path):
    _populate(tmp_path)
    data: dict = {}

    matched = parse_directory(data, tmp_path, "test_config_*.ini", "id", lambda v: v == "/home")

    assert matched == tmp_path / "test_config_b.ini"
    assert data == {"Id": "/home", "Port": "2"}


def test_parse_directory_passes_values_to_matcher(tmp_path: Path):
    _populate(tmp_path)
    seen: list[str] = []

    def matcher(value: str) -> bool:
        seen.append(value)
        return False

    with pytest.raises(NoMatchingFileError):
        parse_directory({}, tmp_path, "test_config_*.ini", "id", matcher)

    assert seen == ["/other", "/home", "/home"]


def test_parse_directory_skips_files_without_key(tmp_path: Path):
    _write(tmp_path, "a.ini", "name = no id here\n")
    _write(tmp_path, "b.ini", "id = wanted\n")
    data: dict = {}

    matched = parse_directory(data, tmp_path, "*.ini", "id", lambda v: v == "wanted")

    assert matched.name == "b.ini"
    assert data == {"Id": "wanted"}


def test_parse_directory_no_candidates(tmp_path: Path):
    with pytest.raises(NoMatchingFileError):
        parse_directory({}, tmp_path, "*.ini", "id", lambda v: True)


def test_parse_directory_missing_directory(tmp_path: Path):
    with pytest.raises(IOError):
        parse_directory({}, tmp_path / "missing", "*.ini", "id", lambda v: True)


def test_parse_directory_propagates_seek_errors(tmp_path: Path):
    _write(tmp_path, "a.ini", "")
    _write(tmp_path, "b.ini", "id = wanted\n")

    with pytest.raises(EmptyInputError):
        parse_directory({}, tmp_path, "*.ini", "id", lambda v: True)
