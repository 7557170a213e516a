from __future__ import annotations

"""
Configuration Domain Management.

Handles the default session configuration, optional JSON configuration
files, and the immutable SiteConfig value that is handed to the generator
once the raw dictionary has been validated.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from docmirror.domain.constants import (
    DEFAULT_DOCUMENT_EXTENSION,
    DEFAULT_MARKDOWN_EXTENSIONS,
    DEFAULT_OUTPUT_EXTENSION,
    DEFAULT_SITE_TITLE,
    DEFAULT_TOC_DEPTH,
    INDEX_TEMPLATE,
    PAGE_TEMPLATE,
)
from docmirror.domain.errors import InputError
from docmirror.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.
    This dictionary drives the behavior of the generation engine.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "input_path": "",
        "output_path": "",

        # File Classification
        "document_extension": DEFAULT_DOCUMENT_EXTENSION,
        "output_extension": DEFAULT_OUTPUT_EXTENSION,
        "exclude_patterns": [],

        # Templates
        "template_dir": "",
        "page_template": PAGE_TEMPLATE,
        "index_template": INDEX_TEMPLATE,
        "site_title": DEFAULT_SITE_TITLE,
        "build_index": True,

        # Rendering
        "toc": True,
        "section_numbers": True,
        "toc_depth": DEFAULT_TOC_DEPTH,
        "markdown_extensions": list(DEFAULT_MARKDOWN_EXTENSIONS),

        # Output Safety
        "transactional": True,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a configuration file and merge it over the defaults.

    Unknown keys are kept so the validator can report them; missing keys
    fall back to the defaults.

    Args:
        config_file: Optional path to a JSON configuration file.

    Returns:
        Dict[str, Any]: The merged configuration.

    Raises:
        InputError: If the file cannot be read or is not a JSON object.
    """
    config = get_default_config()
    if not config_file:
        return config

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config '{config_file}': {e}")
        raise InputError(f"Unreadable configuration file: {e}", config_file) from e

    if not isinstance(data, dict):
        raise InputError("Configuration file must contain a JSON object.", config_file)

    config.update(data)
    logger.debug(f"Configuration loaded from {config_file}")
    return config


# -----------------------------------------------------------------------------
# Immutable Run Configuration
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RendererOptions:
    """
    Run-wide document rendering switches.

    Attributes:
        toc: Generate a per-document table of contents.
        section_numbers: Prefix section headings with hierarchical numbers.
        toc_depth: Heading range included in the table of contents.
        extensions: Additional Python-Markdown extensions.
    """
    toc: bool = True
    section_numbers: bool = True
    toc_depth: str = DEFAULT_TOC_DEPTH
    extensions: Tuple[str, ...] = tuple(DEFAULT_MARKDOWN_EXTENSIONS)


@dataclass(frozen=True)
class SiteConfig:
    """
    Validated, immutable configuration for one generation run.

    Attributes:
        input_path: Absolute input root.
        output_path: Absolute output root.
        document_extension: Suffix identifying documents.
        output_extension: Suffix given to rendered pages.
        template_dir: Optional directory overriding the built-in templates.
        page_template: Template used for each document page.
        index_template: Template used for the site index.
        site_title: Title shown on every page and on the index.
        build_index: Whether the site index page is generated.
        transactional: Stage output and swap it into place on success.
        exclude_patterns: Regexes of entry names skipped during traversal.
        renderer: Document rendering switches.
    """
    input_path: str
    output_path: str
    document_extension: str = DEFAULT_DOCUMENT_EXTENSION
    output_extension: str = DEFAULT_OUTPUT_EXTENSION
    template_dir: str = ""
    page_template: str = PAGE_TEMPLATE
    index_template: str = INDEX_TEMPLATE
    site_title: str = DEFAULT_SITE_TITLE
    build_index: bool = True
    transactional: bool = True
    exclude_patterns: Tuple[str, ...] = ()
    renderer: RendererOptions = field(default_factory=RendererOptions)

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> SiteConfig:
        """Build the immutable value from a validated configuration dictionary."""
        defaults = get_default_config()

        def pick(key: str) -> Any:
            return cfg.get(key, defaults[key])

        extensions: List[str] = list(pick("markdown_extensions"))
        return cls(
            input_path=normalize_path(pick("input_path"), os.getcwd()),
            output_path=normalize_path(pick("output_path"), os.getcwd()),
            document_extension=pick("document_extension"),
            output_extension=pick("output_extension"),
            template_dir=pick("template_dir"),
            page_template=pick("page_template"),
            index_template=pick("index_template"),
            site_title=pick("site_title"),
            build_index=bool(pick("build_index")),
            transactional=bool(pick("transactional")),
            exclude_patterns=tuple(pick("exclude_patterns")),
            renderer=RendererOptions(
                toc=bool(pick("toc")),
                section_numbers=bool(pick("section_numbers")),
                toc_depth=str(pick("toc_depth")),
                extensions=tuple(extensions),
            ),
        )
