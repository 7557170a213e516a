from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures building small documentation trees on disk.
3. A factory for immutable SiteConfig values pointing at those trees.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from docmirror.domain.config import SiteConfig, get_default_config  # noqa: E402

# Minimal PNG signature plus a few bytes that are not valid UTF-8
LOGO_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x00\x01"


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_docs(tmp_path: Path) -> Path:
    """
    Create the reference documentation tree.

    Structure:
    /docs
      index.adoc          (title "Home")
      logo.png
      /guide
        setup.adoc        (title "Setup")
    """
    docs = tmp_path / "docs"
    (docs / "guide").mkdir(parents=True)

    (docs / "index.adoc").write_text("# Home\n\nWelcome to the manual.\n", encoding="utf-8")
    (docs / "guide" / "setup.adoc").write_text(
        "# Setup\n\n## Requirements\n\nA recent interpreter.\n\n## Install\n\nRun the installer.\n",
        encoding="utf-8",
    )
    (docs / "logo.png").write_bytes(LOGO_BYTES)
    return docs


@pytest.fixture
def markdown_docs(tmp_path: Path) -> Path:
    """
    Create a Markdown tree with nested sections and front matter.

    Structure:
    /src_docs
      intro.md
      style.css
      /api
        client.md
        server.md
        /internals
          cache.md
      /empty
    """
    docs = tmp_path / "src_docs"
    (docs / "api" / "internals").mkdir(parents=True)
    (docs / "empty").mkdir()

    (docs / "intro.md").write_text(
        "---\ntitle: Introduction\nauthor: Docs Team\n---\n\nSome *text*.\n",
        encoding="utf-8",
    )
    (docs / "style.css").write_text("body { color: black; }\n", encoding="utf-8")
    (docs / "api" / "client.md").write_text("# Client\n\nCalls the server.\n", encoding="utf-8")
    (docs / "api" / "server.md").write_text("Server\n======\n\nServes the client.\n", encoding="utf-8")
    (docs / "api" / "internals" / "cache.md").write_text("No heading here.\n", encoding="utf-8")
    return docs


@pytest.fixture
def make_site_config(tmp_path: Path) -> Callable[..., SiteConfig]:
    """
    Return a factory building a SiteConfig from default values plus overrides.

    The output root defaults to '<tmp>/out'.
    """

    def _factory(input_path: Path, **overrides: Any) -> SiteConfig:
        cfg = get_default_config()
        cfg["input_path"] = str(input_path)
        cfg["output_path"] = str(tmp_path / "out")
        cfg.update(overrides)
        return SiteConfig.from_dict(cfg)

    return _factory


def snapshot_tree(root: Path) -> dict:
    """Map every file below 'root' (POSIX relative path) to its bytes."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def snapshot() -> Callable[[Path], dict]:
    return snapshot_tree
