# tests/integrations/test_file_store.py
"""Tests for reading and writing documents through `FileStore`."""

import os
from pathlib import Path

import pytest

from tuiedit.integrations.FileStore import FileStore, FileStoreError, split_lines


@pytest.fixture
def store() -> FileStore:
    return FileStore()


def test_round_trip(store: FileStore, tmp_path: Path) -> None:
    path = tmp_path / "doc.txt"
    store.save(path, ["first", "  second", "", "日本語"])
    assert path.read_bytes() == "first\n  second\n\n日本語\n".encode("utf-8")
    assert store.load(path) == ["first", "  second", "", "日本語"]


def test_line_endings_are_normalized(store: FileStore, tmp_path: Path) -> None:
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"a\r\nb\r\n")
    assert store.load(path) == ["a", "b"]


def test_latin1_file_is_decoded_and_written_back(store: FileStore, tmp_path: Path) -> None:
    text = "Le café de la gare était fermé; déjà vu à l'hôtel près du marché.\n" * 20
    path = tmp_path / "latin.txt"
    path.write_bytes(text.encode("latin-1"))

    lines = store.load(path)
    assert lines[0] == "Le café de la gare était fermé; déjà vu à l'hôtel près du marché."
    assert store.encoding_for(path).lower() != "utf-8"

    store.save(path, ["crème brûlée"])
    assert path.read_bytes() == "crème brûlée\n".encode("latin-1")


def test_empty_file_is_one_empty_line(store: FileStore, tmp_path: Path) -> None:
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")
    assert store.load(path) == [""]


def test_saving_empty_document_writes_empty_file(store: FileStore, tmp_path: Path) -> None:
    path = tmp_path / "blank.txt"
    store.save(path, [""])
    assert path.read_bytes() == b""


def test_missing_file(store: FileStore, tmp_path: Path) -> None:
    with pytest.raises(FileStoreError) as excinfo:
        store.load(tmp_path / "nope.txt")
    assert excinfo.value.reason == "file not found"
    assert "nope.txt" in str(excinfo.value)


def test_directory_is_rejected(store: FileStore, tmp_path: Path) -> None:
    with pytest.raises(FileStoreError, match="is a directory"):
        store.load(tmp_path)


def test_save_into_missing_directory_fails_cleanly(store: FileStore, tmp_path: Path) -> None:
    target = tmp_path / "missing" / "file.txt"
    with pytest.raises(FileStoreError):
        store.save(target, ["x"])
    assert not target.parent.exists()


def test_save_keeps_permissions_and_leaves_no_temp_files(store: FileStore, tmp_path: Path) -> None:
    path = tmp_path / "script.sh"
    path.write_text("old\n", encoding="utf-8")
    os.chmod(path, 0o640)

    store.save(path, ["new"])

    assert path.read_text(encoding="utf-8") == "new\n"
    assert path.stat().st_mode & 0o777 == 0o640
    assert sorted(p.name for p in tmp_path.iterdir()) == ["script.sh"]


@pytest.mark.parametrize(
    "content, lines",
    [
        ("", [""]),
        ("a", ["a"]),
        ("a\n", ["a"]),
        ("a\n\nb", ["a", "", "b"]),
        ("a\r\nb\r\n", ["a", "b"]),
        ("\n", [""]),
        ("x\x0cy\u2028z\x85", ["x\x0cy\u2028z\x85"]),
    ],
)
def test_split_lines(content: str, lines: list) -> None:
    assert split_lines(content) == lines


def test_ascii_file_keeps_non_ascii_text_on_save(store: FileStore, tmp_path: Path) -> None:
    path = tmp_path / "plain.txt"
    path.write_bytes(b"hello world\n")
    assert store.load(path) == ["hello world"]
    assert store.encoding_for(path) == "utf-8"

    store.save(path, ["hello world café 日本"])
    assert path.read_bytes() == "hello world café 日本\n".encode("utf-8")


def test_unrepresentable_text_is_saved_as_utf8(store: FileStore, tmp_path: Path) -> None:
    text = "Le café de la gare était fermé; déjà vu à l'hôtel près du marché.\n" * 20
    path = tmp_path / "latin.txt"
    path.write_bytes(text.encode("latin-1"))
    store.load(path)

    store.save(path, ["café 日本"])
    assert path.read_bytes() == "café 日本\n".encode("utf-8")
    assert store.encoding_for(path) == "utf-8"


def test_form_feed_and_unicode_separators_stay_in_line(store: FileStore, tmp_path: Path) -> None:
    original = "int a;\n\x0c\nint b; //\u2028 sep\n".encode("utf-8")
    path = tmp_path / "source.c"
    path.write_bytes(original)

    lines = store.load(path)
    assert len(lines) == 3
    assert lines[1] == "\x0c"

    store.save(path, lines)
    assert path.read_bytes() == original
