"""Tests for path-segment helpers."""

import pytest

from unires.resources.paths import (
    apply_relative_path,
    clean_path,
    escapes_root,
    get_filename,
    get_filename_extension,
    is_absolute_path,
    strip_filename_extension,
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("a/b/../c.txt", "a/c.txt"),
        ("a/./b/./c.txt", "a/b/c.txt"),
        ("a//b", "a/b"),
        ("../a/b", "../a/b"),
        ("a/../../b", "../b"),
        ("/a/../../b", "/b"),
        ("a\\b\\..\\c", "a/c"),
        ("file:/tmp/../x.txt", "file:/x.txt"),
        ("file:///tmp/./x.txt", "file:///tmp/x.txt"),
        ("C:\\dir\\..\\x.txt", "C:/x.txt"),
        ("a/b/", "a/b/"),
        ("", ""),
    ],
)
def test_clean_path(path, expected):
    """Test folding of dot segments and separators."""
    assert clean_path(path) == expected


class TestApplyRelativePath:
    def test_parent_segment(self):
        """Test the documented sibling example."""
        assert apply_relative_path("a/b/c.txt", "../d.txt") == "a/d.txt"

    def test_sibling(self):
        assert apply_relative_path("a/b/c.txt", "d.txt") == "a/b/d.txt"

    def test_base_folder(self):
        """Test that a trailing slash makes the base its own folder."""
        assert apply_relative_path("a/b/", "d.txt") == "a/b/d.txt"

    def test_base_without_folder(self):
        assert apply_relative_path("c.txt", "./d.txt") == "d.txt"

    def test_absolute_replaces_base(self):
        assert apply_relative_path("a/b/c.txt", "/x/../y.txt") == "/y.txt"

    def test_windows_separators(self):
        assert apply_relative_path("a\\b\\c.txt", "..\\d.txt") == "a/d.txt"

    def test_prefix_is_kept(self):
        assert apply_relative_path("file:/srv/app/a.txt", "../b.txt") == "file:/srv/b.txt"


def test_is_absolute_path():
    assert is_absolute_path("/a")
    assert is_absolute_path("C:\\a")
    assert not is_absolute_path("a/b")


def test_escapes_root():
    assert escapes_root("../a")
    assert escapes_root("a/../../b")
    assert not escapes_root("a/../b")


def test_filename_helpers():
    assert get_filename("a/b/c.txt") == "c.txt"
    assert get_filename("a\\b.txt") == "b.txt"
    assert get_filename("a/b/") is None
    assert get_filename(None) is None
    assert get_filename_extension("a/b.tar.gz") == "gz"
    assert get_filename_extension("a/.hidden") is None
    assert strip_filename_extension("a/b.txt") == "a/b"
    assert strip_filename_extension("a/b") == "a/b"
