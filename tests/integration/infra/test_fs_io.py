from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates path normalization, containment checks and separator
conversion across different OS environments.
"""

import os
from unittest.mock import patch

from docmirror.infra.fs import is_within, normalize_path, to_posix

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_normalize_path_expansion() -> None:
    """TC-01: Verify expansion of environment variables and user shortcuts."""
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path(os.path.join("$TEST_VAR", "sub", "..", "docs"), fallback=".")

    assert path == os.path.abspath(os.path.join("my_folder", "docs"))


def test_normalize_path_fallback() -> None:
    """TC-02: Verify empty input resolves to the fallback directory."""
    assert normalize_path("  ", fallback=os.getcwd()) == os.getcwd()
    assert normalize_path(None, fallback=os.getcwd()) == os.getcwd()


def test_is_within(tmp_path) -> None:
    """TC-03: Verify containment checks on normalized paths."""
    root = str(tmp_path / "docs")

    assert is_within(root, root)
    assert is_within(os.path.join(root, "a", "b"), root)
    assert is_within(os.path.join(root, "a", "..", "b"), root)
    assert not is_within(str(tmp_path / "docs-site"), root)
    assert not is_within(str(tmp_path), root)


def test_to_posix() -> None:
    assert to_posix(os.path.join("a", "b", "c.html")) == "a/b/c.html"
