"""
Tests for the flat on-disk FileStore.
"""

import pytest

from uploader.errors import FileMissing, StorageError, UploadRejected
from uploader.storage import FileStore, client_basename, file_url, is_plain_name


@pytest.fixture
def store(tmp_path):
    store = FileStore(tmp_path / "store")
    store.ensure_directory()
    return store


def test_save_writes_bytes_verbatim(store):
    data = b"\x00\x01binary\r\n\xff"
    saved = store.save("blob.pdf", data)

    assert saved.filename == "blob.pdf"
    assert saved.size == len(data)
    assert saved.url == "/files/blob.pdf"
    assert (store.directory / "blob.pdf").read_bytes() == data


def test_save_overwrites_existing_name(store):
    store.save("same.txt", b"old content")
    store.save("same.txt", b"new")

    assert store.resolve("same.txt").read_bytes() == b"new"
    assert store.list_names() == ["same.txt"]


def test_list_names_includes_every_entry(store):
    for name in ("a.txt", "b.pdf", "c.txt"):
        store.save(name, b"x")

    assert sorted(store.list_names()) == ["a.txt", "b.pdf", "c.txt"]


def test_list_names_on_missing_directory_raises(tmp_path):
    with pytest.raises(StorageError):
        FileStore(tmp_path / "absent").list_names()


def test_save_into_missing_directory_raises(tmp_path):
    with pytest.raises(StorageError):
        FileStore(tmp_path / "absent").save("a.txt", b"x")


def test_resolve_missing_raises(store):
    with pytest.raises(FileMissing):
        store.resolve("ghost.txt")


@pytest.mark.parametrize("name", ["", ".", "..", "../up.txt", "a/b.txt", "a\\b.txt", "nul\x00.txt"])
def test_unusable_names(store, name):
    assert not is_plain_name(name)
    with pytest.raises(UploadRejected):
        store.save(name, b"x")
    with pytest.raises(FileMissing):
        store.resolve(name)


def test_names_with_spaces_and_dots_are_plain():
    assert is_plain_name("my file.v2.txt")
    assert is_plain_name(".hidden.txt")
    assert is_plain_name("...txt")


def test_file_url_matches_encode_uri_component():
    assert file_url("notes.txt") == "/files/notes.txt"
    assert file_url("a b&c?.pdf") == "/files/a%20b%26c%3F.pdf"
    assert file_url("it's (1)!*~.txt") == "/files/it's%20(1)!*~.txt"
    assert file_url("résumé.pdf") == "/files/r%C3%A9sum%C3%A9.pdf"


def test_resolve_overlong_name_is_missing(store):
    with pytest.raises(FileMissing):
        store.resolve("a" * 300 + ".txt")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("notes.txt", "notes.txt"),
        ("../escape.txt", "escape.txt"),
        ("/etc/passwd", "passwd"),
        ("C:\\Users\\me\\report.pdf", "report.pdf"),
        ("folder/", ""),
        ("a/..", ".."),
    ],
)
def test_client_basename(raw, expected):
    assert client_basename(raw) == expected
