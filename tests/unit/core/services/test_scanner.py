from __future__ import annotations

"""
Unit tests for the directory listing service.
"""

import os
import sys
from pathlib import Path

import pytest

from docmirror.core.pipeline.components.filters import compile_patterns
from docmirror.core.services.scanner import list_directory
from docmirror.domain.errors import FileOperationError


def _names(paths):
    return [os.path.basename(p) for p in paths]


def test_listing_classifies_and_sorts(tmp_path: Path) -> None:
    for d in ("zeta", "alpha"):
        (tmp_path / d).mkdir()
    for f in ("b.md", "a.md", "z.png", "c.txt"):
        (tmp_path / f).write_text("x", encoding="utf-8")

    listing = list_directory(str(tmp_path), ".md", [])

    assert _names(listing.subdirectories) == ["alpha", "zeta"]
    assert _names(listing.documents) == ["a.md", "b.md"]
    assert _names(listing.assets) == ["c.txt", "z.png"]


def test_listing_applies_exclusions(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / "keep").mkdir()
    (tmp_path / "draft_notes.md").write_text("x", encoding="utf-8")
    (tmp_path / "final.md").write_text("x", encoding="utf-8")

    listing = list_directory(str(tmp_path), ".md", compile_patterns([r"^\.", r"^draft_"]))

    assert _names(listing.subdirectories) == ["keep"]
    assert _names(listing.documents) == ["final.md"]


@pytest.mark.skipif(sys.platform == "win32", reason="Symlinks need privileges on Windows")
def test_listing_does_not_follow_directory_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "real"
    target.mkdir()
    (tmp_path / "loop").symlink_to(target, target_is_directory=True)

    listing = list_directory(str(tmp_path), ".md", [])

    assert _names(listing.subdirectories) == ["real"]
    assert listing.assets == []


def test_listing_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileOperationError) as exc:
        list_directory(str(tmp_path / "absent"), ".md", [])
    assert exc.value.source == str(tmp_path / "absent")
