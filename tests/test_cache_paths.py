from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from lyricbar.cache.paths import cached_filename, mkpath


def test_cached_filename_joins_artist_and_title(tmp_path):
    assert cached_filename(tmp_path, "Foo", "Bar") == tmp_path / "Foo-Bar"


def test_cached_filename_replaces_path_separators(tmp_path):
    path = cached_filename(tmp_path, "Foo/Bar", "Baz")
    assert path == tmp_path / "Foo_Bar-Baz"
    assert path.parent == tmp_path


def test_cached_filename_keeps_other_characters(tmp_path):
    path = cached_filename(tmp_path, "AC:DC?", "T.N.T. *live*")
    assert path.name == "AC:DC?-T.N.T. *live*"


def test_cached_filename_is_case_sensitive(tmp_path):
    assert cached_filename(tmp_path, "abba", "SOS") != cached_filename(tmp_path, "ABBA", "SOS")


@pytest.mark.parametrize(
    "a, b",
    [
        (("Foo", "Bar"), ("Foo", "Baz")),
        (("Foo", "Bar"), ("Fo", "Bar")),
        (("Foo ", "Bar"), ("Foo", "Bar")),
        (("Café", "x"), ("Cafe", "x")),
    ],
)
def test_cached_filename_distinct_keys_get_distinct_paths(tmp_path, a, b):
    assert cached_filename(tmp_path, *a) != cached_filename(tmp_path, *b)


def test_cached_filename_is_stable(tmp_path):
    assert cached_filename(tmp_path, "Foo", "Bar") == cached_filename(tmp_path, "Foo", "Bar")


def test_mkpath_creates_all_missing_directories(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    assert mkpath(target, 0o755) == 0
    assert target.is_dir()


def test_mkpath_existing_directories_are_fine(tmp_path):
    target = tmp_path / "a" / "b"
    assert mkpath(target) == 0
    assert mkpath(target) == 0
    assert mkpath(tmp_path) == 0


def test_mkpath_applies_mode(tmp_path):
    old_umask = os.umask(0o022)
    try:
        target = tmp_path / "cache"
        assert mkpath(target, 0o755) == 0
        assert (target.stat().st_mode & 0o777) == 0o755
    finally:
        os.umask(old_umask)


def test_mkpath_returns_errno_when_a_file_is_in_the_way(tmp_path):
    blocker = tmp_path / "a"
    blocker.write_text("not a dir", encoding="utf-8")
    assert mkpath(blocker / "b" / "c") == errno.ENOTDIR
    assert not (tmp_path / "a" / "b").exists()


def test_mkpath_stops_at_first_failure_without_rollback(tmp_path, monkeypatch):
    real_mkdir = os.mkdir
    calls: list[Path] = []

    def _mkdir(path, mode=0o777):
        calls.append(Path(path))
        if Path(path).name == "locked":
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return real_mkdir(path, mode)

    monkeypatch.setattr(os, "mkdir", _mkdir)
    target = tmp_path / "made" / "locked" / "never"

    assert mkpath(target) == errno.EACCES
    assert (tmp_path / "made").is_dir()
    assert calls[-1].name == "locked"
