from __future__ import annotations

from pathlib import Path

import pytest

from fs_toolkit import (
    ErrorKind,
    FsError,
    WalkRequest,
    copy_file_safe,
    insert_counter,
    is_subdirectory_of,
    move_file,
    move_file_safe,
    read_directory,
    same_directory,
)


def create_file(path: Path, content: str = "12345") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture()
def t_dir(tmp_path: Path) -> Path:
    root = tmp_path / "t"
    create_file(root / "a.txt")
    create_file(root / "b.txt")
    create_file(root / "s" / "c.txt")
    return root


def test_read_directory_scenarios(t_dir: Path) -> None:
    flat = read_directory(t_dir, WalkRequest(include_subdirectories=False))
    deep = read_directory(t_dir, WalkRequest(include_subdirectories=True))
    capped = read_directory(t_dir, WalkRequest(include_subdirectories=True, max_files=2))

    assert [r.name for r in flat] == ["a.txt", "b.txt"]
    assert [r.name for r in deep] == ["a.txt", "b.txt", "c.txt"]
    assert [r.name for r in capped] == ["a.txt", "b.txt"]
    assert all(r.size_bytes == 5 for r in deep)


def test_insert_counter_before_last_dot() -> None:
    assert insert_counter("archive.tar.gz", 2) == "archive.tar(2).gz"


def test_directory_relationships(t_dir: Path) -> None:
    sub = t_dir / "s"
    assert is_subdirectory_of(sub, sub) is False
    assert is_subdirectory_of(sub, t_dir) is True
    assert is_subdirectory_of(sub, t_dir.parent) is True
    assert same_directory(sub, sub) is True

    empty1 = t_dir / "e1"
    empty2 = t_dir / "e2"
    empty1.mkdir()
    empty2.mkdir()
    assert same_directory(empty1, empty2) is False


def test_enumerate_then_relocate_without_clobbering(t_dir: Path, tmp_path: Path) -> None:
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    create_file(inbox / "a.txt", "already here")

    records = read_directory(t_dir, WalkRequest(include_subdirectories=True))
    placed = [move_file_safe(r.full_path, inbox / "a.txt", 10) for r in records]

    assert [p.name for p in placed] == ["a(1).txt", "a(2).txt", "a(3).txt"]
    assert (inbox / "a.txt").read_text(encoding="utf-8") == "already here"
    assert read_directory(t_dir, WalkRequest(include_subdirectories=True)) == []


def test_copy_round_trip_keeps_source(t_dir: Path, tmp_path: Path) -> None:
    src = t_dir / "a.txt"
    result = copy_file_safe(src, tmp_path / "copy.txt", 3)
    assert result.read_bytes() == src.read_bytes()
    assert src.exists()


def test_move_onto_itself_is_rejected(t_dir: Path) -> None:
    src = t_dir / "a.txt"
    with pytest.raises(FsError) as exc_info:
        move_file(src, src)
    assert exc_info.value.kind is ErrorKind.SOURCE_DESTINATION_IDENTICAL
