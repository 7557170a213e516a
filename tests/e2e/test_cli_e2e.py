from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
module via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr), and the generated site on disk.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH to ensure the package
    is resolvable without being installed in site-packages.

    Args:
        args: List of command line arguments (excluding 'python -m docmirror.main').
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: The result object containing returncode, stdout, and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, "-m", "docmirror.main"] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8"
    )


def test_cli_happy_path_execution(tmp_path: Path, sample_docs: Path) -> None:
    """
    TC-01: Verify the reference tree produces the mirrored site (Exit Code 0).
    """
    out = tmp_path / "out"

    result = run_cli([str(sample_docs), str(out), "--ext", ".adoc"])

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    assert "GENERATION COMPLETE" in result.stdout

    assert "Home" in (out / "index.html").read_text(encoding="utf-8")
    setup = (out / "guide" / "setup.html").read_text(encoding="utf-8")
    assert "Setup" in setup
    assert 'href="../index.html"' in setup
    assert (out / "logo.png").read_bytes() == (sample_docs / "logo.png").read_bytes()
    assert (out / "contents.html").exists()


def test_cli_json_output(tmp_path: Path, markdown_docs: Path) -> None:
    """
    TC-02: Verify that --json returns a valid, parseable result object.
    """
    result = run_cli([str(markdown_docs), str(tmp_path / "out"), "--json"])

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["summary"]["documents"] == 4
    assert [c["title"] for c in data["navigation"]["children"]] == ["api", "empty"]


def test_cli_missing_input_fails(tmp_path: Path) -> None:
    """
    TC-03: Verify that a missing input directory exits with code 2 and names it.
    """
    absent = tmp_path / "ghost_folder"

    result = run_cli([str(absent), str(tmp_path / "out")])

    assert result.returncode == 2
    assert "ghost_folder" in result.stderr


def test_cli_render_failure_keeps_previous_site(tmp_path: Path, markdown_docs: Path) -> None:
    """
    TC-04: Verify that a failing document aborts the run without touching the old site.
    """
    out = tmp_path / "out"
    assert run_cli([str(markdown_docs), str(out)]).returncode == 0
    before = (out / "intro.html").read_bytes()

    bad = markdown_docs / "api" / "zz_bad.md"
    bad.write_bytes(b"\xff\xfe\xfd")
    (markdown_docs / "intro.md").write_text("# Changed\n", encoding="utf-8")

    result = run_cli([str(markdown_docs), str(out)])

    assert result.returncode == 1
    assert "zz_bad.md" in result.stderr
    assert (out / "intro.html").read_bytes() == before


def test_cli_debug_log_file(tmp_path: Path, markdown_docs: Path) -> None:
    """
    TC-05: Verify that --debug and --log-file persist the build log.
    """
    log_file = tmp_path / "logs" / "build.log"

    result = run_cli([str(markdown_docs), str(tmp_path / "out"), "--debug", "--log-file", str(log_file)])

    assert result.returncode == 0
    content = log_file.read_text(encoding="utf-8")
    assert "DEBUG" in content
    assert "Generation completed" in content
