from __future__ import annotations

"""
Domain Constants.

Centralizes file naming conventions, template identifiers and the
defaults shared by the configuration, generation and interface layers.
"""

import os
from typing import List

DEFAULT_DOCUMENT_EXTENSION = ".md"
DEFAULT_OUTPUT_EXTENSION = ".html"
DEFAULT_SITE_TITLE = "Documentation"

INDEX_FILENAME = "index.html"
FALLBACK_INDEX_FILENAME = "contents.html"
ROOT_NODE_TITLE = "Root"

PAGE_TEMPLATE = "page.html"
INDEX_TEMPLATE = "index.html"

DEFAULT_TOC_DEPTH = "2-4"
DEFAULT_MARKDOWN_EXTENSIONS: List[str] = ["fenced_code", "tables"]

STAGING_PREFIX = ".docmirror-staging-"
BACKUP_PREFIX = ".docmirror-previous-"

BUILTIN_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "resources",
    "templates",
)
