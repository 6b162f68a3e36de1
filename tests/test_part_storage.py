"""Tests for part directory file handling."""

import pytest

from common.exceptions import IOFailureError
from engine.part_storage import PartDirectory, metadata_file_name, part_file_name


def test_file_names():
    assert part_file_name("movie.mkv", 3) == "movie.mkv.part3"
    assert metadata_file_name("movie.mkv") == "movie.mkv.split_metadata"


def test_create_is_exclusive(tmp_path):
    directory = PartDirectory(tmp_path)
    with directory.create("a.part1") as f:
        f.write(b"data")

    with pytest.raises(IOFailureError, match="already exists"):
        directory.create("a.part1")
    with directory.open_read("a.part1") as f:
        assert f.read() == b"data"


@pytest.mark.parametrize("name", ["", ".", "..", "../x", "sub/x"])
def test_resolve_rejects_paths(tmp_path, name):
    with pytest.raises(IOFailureError):
        PartDirectory(tmp_path).resolve(name)


def test_exists_and_size(tmp_path):
    directory = PartDirectory(tmp_path)
    (tmp_path / "a.part1").write_bytes(b"12345")
    (tmp_path / "folder").mkdir()

    assert directory.exists("a.part1")
    assert not directory.exists("a.part2")
    assert not directory.exists("folder")
    assert directory.size_of("a.part1") == 5
    with pytest.raises(IOFailureError):
        directory.size_of("a.part2")


def test_delete(tmp_path):
    directory = PartDirectory(tmp_path)
    (tmp_path / "a.part1").write_bytes(b"x")

    assert directory.delete("a.part1") is True
    assert directory.delete("a.part1") is False


def test_list_names_by_suffix(tmp_path):
    directory = PartDirectory(tmp_path)
    for name in ("b.part2", "b.part1", "b.split_metadata"):
        (tmp_path / name).write_bytes(b"")

    assert directory.list_names(".split_metadata") == ["b.split_metadata"]
    assert directory.list_names() == ["b.part1", "b.part2", "b.split_metadata"]
    assert PartDirectory(tmp_path / "missing").list_names() == []


def test_write_and_read_text(tmp_path):
    directory = PartDirectory(tmp_path / "new")
    directory.ensure_exists()

    directory.write_text("m.split_metadata", "{\"k\": \"é\"}", encoding="utf-8")

    assert directory.read_text("m.split_metadata", encoding="utf-8") == "{\"k\": \"é\"}"
    with pytest.raises(IOFailureError):
        directory.write_text("m.split_metadata", "{}", encoding="utf-8")
