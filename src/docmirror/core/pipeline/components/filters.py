from __future__ import annotations

"""
File Filtering and Classification Engine.

Implements the document/asset classification predicate and the
regex-based exclusion rules applied to directory entries during traversal.
"""

import logging
import re
from typing import Iterable, List

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: Iterable[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are discarded with a warning instead of aborting
    the run; the validator reports them before generation starts.

    Args:
        patterns: Raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Ignoring invalid exclusion pattern '{p}': {e}")
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """
    Verify if a string matches at least one compiled regex pattern.

    Args:
        name: Filename or directory name to evaluate.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found, False otherwise.
    """
    return any(rx.search(name) for rx in compiled_patterns)

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION LOGIC
# -----------------------------------------------------------------------------

def is_document(file_name: str, document_extension: str) -> bool:
    """
    Classify a file as a markup document by its configured suffix.

    The comparison is case-insensitive and requires a non-empty stem, so a
    file literally named '.md' is treated as an asset.

    Args:
        file_name: Base filename.
        document_extension: Suffix including the leading dot (e.g. '.md').

    Returns:
        bool: True for documents, False for assets.
    """
    if not document_extension:
        return False
    name = file_name.lower()
    ext = document_extension.lower()
    return name.endswith(ext) and len(name) > len(ext)
