"""
Tests for the shared .txt/.pdf type filter.
"""

import pytest

from uploader.filters import is_allowed


@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("notes.txt", "text/plain"),
        ("report.pdf", "application/pdf"),
        ("REPORT.PDF", "application/octet-stream"),
        ("Notes.TxT", None),
        ("no-extension", "text/plain"),
        ("no-extension", "text/plain; charset=utf-8"),
        ("scan", "Application/PDF"),
    ],
)
def test_allowed(filename, content_type):
    assert is_allowed(filename, content_type)


@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("photo.png", "image/png"),
        ("archive.zip", "application/zip"),
        ("page.html", "text/html"),
        ("notes.txt.exe", "application/octet-stream"),
        ("pdf", None),
        ("", None),
    ],
)
def test_rejected(filename, content_type):
    assert not is_allowed(filename, content_type)
