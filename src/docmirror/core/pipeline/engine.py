from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates a complete generation run:
1. Builds the collaborators from the immutable site configuration.
2. Validates the input and output roots.
3. Prepares a staging directory (transactional and dry runs).
4. Executes the site generator into the staging area or in place.
5. Swaps the staged site into the output root on full success.
6. Reports the outcome as a GenerationResult.
"""

import logging
import os
import shutil
import tempfile
import threading
from typing import Any, Dict, Optional

from docmirror.core.pipeline.generator import SiteGenerator, check_roots
from docmirror.core.pipeline.index_builder import IndexBuilder
from docmirror.core.rendering.document_renderer import MarkdownRenderer
from docmirror.core.rendering.template_engine import JinjaTemplateEngine
from docmirror.domain.config import SiteConfig
from docmirror.domain.constants import BACKUP_PREFIX, STAGING_PREFIX
from docmirror.domain.errors import FileOperationError, SiteGenerationError
from docmirror.domain.generation_models import (
    GenerationResult,
    create_error_result,
    create_success_result,
)
from docmirror.infra.fs import is_within

logger = logging.getLogger(__name__)

_SITE_DIR_MODE = 0o755


def build_generator(
        config: SiteConfig,
        cancel_event: Optional[threading.Event] = None,
) -> SiteGenerator:
    """
    Construct a SiteGenerator wired with the default collaborators.

    Args:
        config: Validated site configuration.
        cancel_event: Optional signal checked between traversal steps.

    Returns:
        SiteGenerator: Ready-to-run generator.
    """
    renderer = MarkdownRenderer(config.renderer)
    template_engine = JinjaTemplateEngine(config.template_dir or None)
    index_builder = None
    if config.build_index:
        index_builder = IndexBuilder(template_engine, config.index_template, config.site_title)
    return SiteGenerator(config, renderer, template_engine, index_builder, cancel_event)


def run_generation(
        config: SiteConfig,
        *,
        dry_run: bool = False,
        cancel_event: Optional[threading.Event] = None,
        generator: Optional[SiteGenerator] = None,
) -> GenerationResult:
    """
    Execute a full generation run.

    Transactional runs write into a staging directory next to the output
    root and replace the output root only once every page and asset has
    been produced; a failure leaves the previous output untouched.

    Args:
        config: Validated site configuration.
        dry_run: Generate into a throw-away directory and discard it.
        cancel_event: Optional cancellation signal.
        generator: Pre-built generator (defaults to build_generator()).

    Returns:
        GenerationResult: Object containing status, navigation and summary.
    """
    logger.info("Generation run started.")

    input_path = config.input_path
    output_path = config.output_path
    gen = generator or build_generator(config, cancel_event)

    staging_dir: Optional[str] = None
    # Directory the generator writes into while it is not the output root
    staged = ""
    try:
        # -------------------------------------------------------------------------
        # 1) Pre-flight checks
        # -------------------------------------------------------------------------
        check_roots(input_path, output_path)
        if os.path.exists(output_path) and not os.path.isdir(output_path):
            raise FileOperationError("Output path exists and is not a directory.", destination=output_path)

        # -------------------------------------------------------------------------
        # 2) Staging preparation
        # -------------------------------------------------------------------------
        if dry_run or config.transactional:
            staging_dir = _create_staging(output_path, dry_run)
            target = staged = staging_dir
            logger.debug(f"Using staging directory: {staging_dir}")
        else:
            target = output_path

        # -------------------------------------------------------------------------
        # 3) Generation
        # -------------------------------------------------------------------------
        site = gen.generate(input_path, target)

        index_path = ""
        if gen.index_path:
            index_path = os.path.join(output_path, os.path.relpath(gen.index_path, target))
        staged = ""

        # -------------------------------------------------------------------------
        # 4) Deployment
        # -------------------------------------------------------------------------
        if dry_run:
            logger.info("Dry run: generated site discarded.")
        elif staging_dir:
            _deploy(staging_dir, output_path)
            staging_dir = None

    except SiteGenerationError as e:
        if staged:
            _relocate_paths(e, staged, output_path)
        logger.error(f"Generation failed: {e}")
        return create_error_result(e, input_path, output_path, dry_run, _summary(gen, config))

    finally:
        if staging_dir:
            _discard_tree(staging_dir)

    summary = _summary(gen, config)
    logger.info(
        f"Generation completed: {summary['documents']} pages, "
        f"{summary['assets']} assets, {summary['directories']} directories."
    )
    return create_success_result(input_path, output_path, site, index_path, dry_run, summary)

# -----------------------------------------------------------------------------
# STAGING AND DEPLOYMENT
# -----------------------------------------------------------------------------

def _create_staging(output_path: str, dry_run: bool) -> str:
    """Create the staging directory (next to the output root unless dry run)."""
    try:
        if dry_run:
            return tempfile.mkdtemp(prefix=STAGING_PREFIX)
        parent = os.path.dirname(output_path)
        os.makedirs(parent, exist_ok=True)
        return tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=parent)
    except OSError as e:
        raise FileOperationError(f"Cannot create staging directory: {e}", destination=output_path) from e


def _deploy(staging_dir: str, output_path: str) -> None:
    """
    Move the staged site into place.

    The previous output root is parked in a sibling directory first and
    restored if the final rename fails.
    """
    parent = os.path.dirname(output_path)
    backup_dir: Optional[str] = None
    parked = ""

    try:
        os.chmod(staging_dir, _SITE_DIR_MODE)
        if os.path.exists(output_path):
            backup_dir = tempfile.mkdtemp(prefix=BACKUP_PREFIX, dir=parent)
            parked = os.path.join(backup_dir, os.path.basename(output_path))
            os.rename(output_path, parked)
    except OSError as e:
        raise FileOperationError(
            f"Cannot replace output directory: {e}", source=staging_dir, destination=output_path
        ) from e

    try:
        os.rename(staging_dir, output_path)
    except OSError as e:
        if parked:
            os.rename(parked, output_path)
            _discard_tree(backup_dir)
        raise FileOperationError(
            f"Cannot move staged site into place: {e}", source=staging_dir, destination=output_path
        ) from e

    if backup_dir:
        _discard_tree(backup_dir)
    logger.debug(f"Staged site deployed to {output_path}")


def _relocate_paths(error: SiteGenerationError, staged_root: str, output_path: str) -> None:
    """Rewrite the paths of 'error' that point into the staging area to the output root."""
    def relocate(path: Optional[str]) -> Optional[str]:
        if path and is_within(path, staged_root):
            return os.path.normpath(os.path.join(output_path, os.path.relpath(path, staged_root)))
        return path

    error.path = relocate(error.path)
    error.message = error.message.replace(staged_root, output_path)
    if isinstance(error, FileOperationError):
        error.source = relocate(error.source)
        error.destination = relocate(error.destination)


def _discard_tree(path: str) -> None:
    if not os.path.exists(path):
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning(f"Could not remove temporary directory '{path}': {e}")

# -----------------------------------------------------------------------------
# REPORTING
# -----------------------------------------------------------------------------

def _summary(gen: SiteGenerator, config: SiteConfig) -> Dict[str, Any]:
    counters = gen.counters or {}
    return {
        "directories": int(counters.get("directories", 0)),
        "documents": int(counters.get("documents", 0)),
        "assets": int(counters.get("assets", 0)),
        "index_generated": bool(gen.index_path),
        "transactional": bool(config.transactional),
    }
