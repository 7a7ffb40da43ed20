"""Unit tests for atomic file publication."""

import pytest

from lazyview.utils import files
from lazyview.utils.files import atomic_write_text


@pytest.mark.unit
def test_atomic_write_creates_parents(tmp_path):
    """Test writing into a directory tree that doesn't exist yet."""
    target = tmp_path / "a" / "b" / "out.txt"

    assert atomic_write_text(target, "content") == target
    assert target.read_text(encoding="utf-8") == "content"
    assert [p.name for p in target.parent.iterdir()] == ["out.txt"]


@pytest.mark.unit
def test_atomic_write_replaces_existing(tmp_path):
    """Test that an existing file is replaced in one step."""
    target = tmp_path / "out.txt"
    target.write_text("old", encoding="utf-8")

    atomic_write_text(target, "new")

    assert target.read_text(encoding="utf-8") == "new"


@pytest.mark.unit
def test_atomic_write_failure_keeps_original(tmp_path, monkeypatch):
    """Test that a failed publish leaves the original and no temp file."""
    target = tmp_path / "out.txt"
    target.write_text("old", encoding="utf-8")

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(files.os, "replace", failing_replace)

    with pytest.raises(OSError, match="disk full"):
        atomic_write_text(target, "new")

    assert target.read_text(encoding="utf-8") == "old"
    assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]
