from __future__ import annotations

"""
Generation Domain Data Models.

Defines the result structure and factory functions used to communicate
the outcome of a generation run between the engine and the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from docmirror.domain.errors import SiteGenerationError
from docmirror.domain.site_models import Node

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class GenerationResult:
    """
    Unified result object of a complete generation run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Failure category (input/render/template/io/cancelled).
        error_path: Path of the file or directory that caused the failure.
        input_path: Normalized input root.
        output_path: Normalized output root.
        dry_run: Whether the run discarded its output.
        navigation: Navigation tree rooted at the input directory.
        index_path: Absolute path of the generated index page, if any.
        summary: Execution counters and statistics.
    """
    ok: bool
    error: str

    input_path: str
    output_path: str

    error_kind: str = ""
    error_path: str = ""
    dry_run: bool = False

    navigation: Optional[Node] = None
    index_path: str = ""

    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "ok": self.ok,
            "error": self.error,
            "error_kind": self.error_kind,
            "error_path": self.error_path,
            "input_path": self.input_path,
            "output_path": self.output_path,
            "dry_run": self.dry_run,
            "index_path": self.index_path,
            "navigation": self.navigation.to_dict() if self.navigation else None,
            "summary": dict(self.summary),
        }

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: SiteGenerationError,
        input_path: str,
        output_path: str,
        dry_run: bool = False,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> GenerationResult:
    """
    Create a failed generation result from the aborting exception.

    Args:
        error: The exception that aborted the run.
        input_path: Normalized input root.
        output_path: Normalized output root.
        dry_run: Whether the run was a simulation.
        summary_extra: Counters collected before the failure.

    Returns:
        GenerationResult: An immutable error result object.
    """
    return GenerationResult(
        ok=False,
        error=str(error),
        error_kind=error.kind,
        error_path=error.path or "",
        input_path=input_path,
        output_path=output_path,
        dry_run=dry_run,
        summary=summary_extra or {},
    )


def create_success_result(
        input_path: str,
        output_path: str,
        navigation: Node,
        index_path: str = "",
        dry_run: bool = False,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> GenerationResult:
    """
    Create a successful generation result.

    Args:
        input_path: Normalized input root.
        output_path: Normalized output root.
        navigation: Completed navigation tree.
        index_path: Path of the generated index page.
        dry_run: Whether the output was discarded.
        summary_extra: Final execution counters.

    Returns:
        GenerationResult: An immutable success result object.
    """
    return GenerationResult(
        ok=True,
        error="",
        input_path=input_path,
        output_path=output_path,
        dry_run=dry_run,
        navigation=navigation,
        index_path=index_path,
        summary=summary_extra or {},
    )
