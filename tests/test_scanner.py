import os

import pytest

from msftool.errors import ArchiveIOError, NameTooLong
from msftool.scanner import scan_directory


def test_lists_regular_files_with_relative_names(sample_tree):
    entries = scan_directory(sample_tree)
    assert sorted((e.name, e.length) for e in entries) == [(b"readme.txt", 11), (b"sub/data.bin", 3)]
    assert all(e.offset == 0 for e in entries)


def test_hidden_entries_are_skipped_at_any_depth(sample_tree):
    (sample_tree / ".hidden").write_bytes(b"x")
    (sample_tree / "sub" / ".hidden").write_bytes(b"x")
    (sample_tree / ".git").mkdir()
    (sample_tree / ".git" / "config").write_bytes(b"x")
    names = [e.path for e in scan_directory(sample_tree)]
    assert not any(".hidden" in n or ".git" in n for n in names)
    assert len(names) == 2


def test_depth_first_order(tmp_path):
    for d in ("a", "b"):
        (tmp_path / d / "deep").mkdir(parents=True)
        (tmp_path / d / "deep" / "f").write_bytes(b"")
        (tmp_path / d / "g").write_bytes(b"")
    names = [e.path for e in scan_directory(tmp_path, sort_entries=True)]
    assert names == ["a/deep/f", "a/g", "b/deep/f", "b/g"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
def test_symlinks_are_ignored(sample_tree):
    os.symlink(sample_tree / "readme.txt", sample_tree / "link.txt")
    os.symlink(sample_tree / "sub", sample_tree / "linkdir")
    names = sorted(e.path for e in scan_directory(sample_tree))
    assert names == ["readme.txt", "sub/data.bin"]


def test_missing_root_fails(tmp_path):
    with pytest.raises(ArchiveIOError):
        scan_directory(tmp_path / "nope")


def test_long_name_is_rejected_or_truncated(tmp_path, caplog):
    deep = tmp_path / ("d" * 200)
    deep.mkdir()
    (deep / ("f" * 100)).write_bytes(b"x")
    with pytest.raises(NameTooLong):
        scan_directory(tmp_path)
    entries = scan_directory(tmp_path, name_policy="truncate")
    assert len(entries[0].name) == 255
    assert "truncating" in caplog.text


def test_truncation_keeps_whole_utf8_characters(tmp_path):
    # the 255-byte cut lands in the middle of a two-byte character
    deep = tmp_path / ("d" * 201)
    deep.mkdir()
    (deep / ("é" * 40)).write_bytes(b"x")
    entries = scan_directory(tmp_path, name_policy="truncate")
    assert len(entries[0].name) == 254
    assert entries[0].name.decode("utf-8") == "d" * 201 + "/" + "é" * 26


def test_truncated_name_collision_is_reported(tmp_path, caplog):
    deep = tmp_path / ("d" * 250)
    deep.mkdir()
    (deep / "same_prefix_1").write_bytes(b"1")
    (deep / "same_prefix_2").write_bytes(b"2")
    entries = scan_directory(tmp_path, name_policy="truncate")
    assert entries[0].name == entries[1].name
    assert "more than one file" in caplog.text
