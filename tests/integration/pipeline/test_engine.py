from __future__ import annotations

"""
Integration tests for the generation engine.

Verifies:
1. Transactional deployment (staging, swap, rollback on failure).
2. In-place and dry-run modes.
3. Idempotence of repeated runs.
4. Result reporting (error kinds, paths, summary).
"""

import json
import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from docmirror.core.pipeline import engine
from docmirror.core.pipeline.engine import run_generation
from docmirror.domain.constants import BACKUP_PREFIX, STAGING_PREFIX


def _leftovers(directory: Path):
    return [
        p.name for p in directory.iterdir()
        if p.name.startswith(STAGING_PREFIX) or p.name.startswith(BACKUP_PREFIX)
    ]


@pytest.fixture
def stale_output(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    (out / "stale.html").write_text("<p>from an older build</p>", encoding="utf-8")
    return out


# -----------------------------------------------------------------------------
# Transactional Runs
# -----------------------------------------------------------------------------

def test_transactional_run_replaces_output(markdown_docs, stale_output, tmp_path, make_site_config) -> None:
    result = run_generation(make_site_config(markdown_docs))

    assert result.ok, result.error
    assert not (stale_output / "stale.html").exists()
    assert (stale_output / "intro.html").exists()
    assert (stale_output / "api" / "internals" / "cache.html").exists()
    assert _leftovers(tmp_path) == []


def test_transactional_run_creates_missing_output(markdown_docs, tmp_path, make_site_config) -> None:
    result = run_generation(make_site_config(markdown_docs))

    assert result.ok
    assert result.index_path == str(tmp_path / "out" / "index.html")
    assert os.path.isfile(result.index_path)
    assert oct(os.stat(tmp_path / "out").st_mode & 0o777) == oct(0o755)


def test_failed_run_leaves_previous_output_untouched(
        markdown_docs, stale_output, tmp_path, make_site_config, snapshot
) -> None:
    before = snapshot(stale_output)
    bad = markdown_docs / "zz_bad.md"
    bad.write_bytes(b"\xff\xfe\xfd")

    result = run_generation(make_site_config(markdown_docs))

    assert not result.ok
    assert result.error_kind == "render"
    assert result.error_path == str(bad)
    assert str(bad) in result.error
    assert snapshot(stale_output) == before
    assert _leftovers(tmp_path) == []


def test_failed_deploy_restores_previous_output(
        markdown_docs, stale_output, tmp_path, make_site_config, snapshot
) -> None:
    before = snapshot(stale_output)
    real_rename = os.rename
    calls = {"n": 0}

    def flaky_rename(src, dst):
        calls["n"] += 1
        # Second rename moves the staging directory into place
        if calls["n"] == 2:
            raise OSError("device busy")
        return real_rename(src, dst)

    with patch.object(engine.os, "rename", side_effect=flaky_rename):
        result = run_generation(make_site_config(markdown_docs))

    assert not result.ok
    assert result.error_kind == "io"
    assert "device busy" in result.error
    assert snapshot(stale_output) == before
    assert _leftovers(tmp_path) == []


def test_cancelled_run_reports_kind(markdown_docs, stale_output, make_site_config, snapshot) -> None:
    before = snapshot(stale_output)
    event = threading.Event()
    event.set()

    result = run_generation(make_site_config(markdown_docs), cancel_event=event)

    assert result.error_kind == "cancelled"
    assert snapshot(stale_output) == before


# -----------------------------------------------------------------------------
# In-Place and Dry Runs
# -----------------------------------------------------------------------------

def test_in_place_failure_keeps_written_files(markdown_docs, tmp_path, make_site_config) -> None:
    (markdown_docs / "broken.md").write_bytes(b"\xff\xfe")

    result = run_generation(make_site_config(markdown_docs, transactional=False))

    assert not result.ok
    assert result.error_path == str(markdown_docs / "broken.md")
    # Subdirectories are generated before the root documents
    assert (tmp_path / "out" / "api" / "client.html").exists()
    assert not (tmp_path / "out" / "intro.html").exists()


def test_in_place_keeps_unrelated_files(markdown_docs, stale_output, make_site_config) -> None:
    result = run_generation(make_site_config(markdown_docs, transactional=False))

    assert result.ok
    assert (stale_output / "stale.html").exists()
    assert result.summary["transactional"] is False


def test_dry_run_writes_nothing(markdown_docs, tmp_path, make_site_config) -> None:
    result = run_generation(make_site_config(markdown_docs), dry_run=True)

    assert result.ok
    assert result.dry_run is True
    assert result.summary["documents"] == 4
    assert result.navigation is not None
    assert not (tmp_path / "out").exists()
    assert _leftovers(tmp_path) == []


# -----------------------------------------------------------------------------
# Determinism and Reporting
# -----------------------------------------------------------------------------

def test_repeated_runs_are_byte_identical(markdown_docs, tmp_path, make_site_config, snapshot) -> None:
    config = make_site_config(markdown_docs)

    assert run_generation(config).ok
    first = snapshot(tmp_path / "out")
    assert run_generation(config).ok
    second = snapshot(tmp_path / "out")

    assert first == second
    assert "index.html" in first


def test_missing_input_is_an_input_error(tmp_path, make_site_config) -> None:
    result = run_generation(make_site_config(tmp_path / "absent"))

    assert result.error_kind == "input"
    assert result.error_path == str(tmp_path / "absent")
    assert not (tmp_path / "out").exists()


def test_output_overlapping_input_is_rejected(markdown_docs, make_site_config) -> None:
    result = run_generation(make_site_config(markdown_docs, output_path=str(markdown_docs / "site")))

    assert result.error_kind == "input"
    assert not (markdown_docs / "site").exists()


def test_output_path_that_is_a_file(markdown_docs, tmp_path, make_site_config) -> None:
    (tmp_path / "out").write_text("not a directory", encoding="utf-8")

    result = run_generation(make_site_config(markdown_docs))

    assert result.error_kind == "io"
    assert (tmp_path / "out").read_text(encoding="utf-8") == "not a directory"


def test_result_is_json_serializable(sample_docs, make_site_config) -> None:
    result = run_generation(make_site_config(sample_docs, document_extension=".adoc"))

    data = json.loads(json.dumps(result.to_dict()))

    assert data["ok"] is True
    assert data["summary"] == {
        "directories": 2,
        "documents": 2,
        "assets": 1,
        "index_generated": True,
        "transactional": True,
    }
    assert data["navigation"]["children"][0]["entries"] == [{"title": "Setup", "path": "guide/setup.html"}]
    assert data["index_path"].endswith("contents.html")


def test_unknown_markup_extension_is_a_render_error(
        markdown_docs, stale_output, tmp_path, make_site_config, snapshot
) -> None:
    before = snapshot(stale_output)

    result = run_generation(make_site_config(markdown_docs, markdown_extensions=["no_such_ext"]))

    assert not result.ok
    assert result.error_kind == "render"
    assert "no_such_ext" in result.error
    assert snapshot(stale_output) == before
    assert _leftovers(tmp_path) == []


def test_collision_reports_output_root_not_staging(tmp_path, make_site_config) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "guide.md").write_text("# Guide\n", encoding="utf-8")
    (docs / "guide.html").write_text("<p>hand written</p>", encoding="utf-8")

    result = run_generation(make_site_config(docs))

    assert result.error_kind == "io"
    assert STAGING_PREFIX not in result.error
    assert f"destination: {tmp_path / 'out' / 'guide.html'}" in result.error
    assert result.error_path == str(docs / "guide.html")
    assert _leftovers(tmp_path) == []
