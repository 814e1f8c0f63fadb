from __future__ import annotations

from pathlib import Path

import pytest

from iniplus.filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    list_matching_files,
    safe_read,
)


def test_get_max_file_size_uses_default(monkeypatch):
    monkeypatch.delenv("INIPLUS_MAX_FILE_SIZE", raising=False)

    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_env(monkeypatch):
    monkeypatch.setenv("INIPLUS_MAX_FILE_SIZE", "4096")

    assert get_max_file_size(default=123) == 4096


@pytest.mark.parametrize("value", ["invalid", "0", "-3"])
def test_get_max_file_size_rejects_bad_values(monkeypatch, value: str):
    monkeypatch.setenv("INIPLUS_MAX_FILE_SIZE", value)

    with pytest.raises(ValueError, match="INIPLUS_MAX_FILE_SIZE"):
        get_max_file_size()


@pytest.mark.parametrize("value", ["invalid", "0"])
def test_get_max_line_length_rejects_bad_values(monkeypatch, value: str):
    monkeypatch.setenv("INIPLUS_MAX_LINE_LENGTH", value)

    with pytest.raises(ValueError, match="INIPLUS_MAX_LINE_LENGTH"):
        get_max_line_length()


def test_collect_file_stat_rejects_directories(tmp_path: Path):
    with pytest.raises(IOError, match="not a regular file"):
        collect_file_stat(tmp_path)


def test_collect_file_stat_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        collect_file_stat(tmp_path / "missing.ini")


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "app.ini"
    target.write_text("id = 1\n", encoding="utf-8")
    stat_result = collect_file_stat(target)

    enforce_file_size(stat_result, 100, target)
    with pytest.raises(IOError):
        enforce_file_size(stat_result, 3, target)


def test_safe_read_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        safe_read(tmp_path / "missing.ini")


def test_safe_read_directory(tmp_path: Path):
    with pytest.raises(IOError):
        safe_read(tmp_path)


def test_list_matching_files_filters_and_sorts(tmp_path: Path):
    for name in ["site_b.ini", "site_a.ini", "site_a.ini.bak", "other.ini"]:
        (tmp_path / name).write_text("id = 1\n", encoding="utf-8")
    (tmp_path / "site_dir.ini").mkdir()

    matches = list_matching_files(tmp_path, "site_*.ini")

    assert [path.name for path in matches] == ["site_a.ini", "site_b.ini"]


def test_list_matching_files_missing_directory(tmp_path: Path):
    with pytest.raises(IOError, match="Error scanning directory"):
        list_matching_files(tmp_path / "missing", "*.ini")
