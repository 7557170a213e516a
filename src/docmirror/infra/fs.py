from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, containment checks and separator conversion
helpers shared by the configuration and generation layers. Acts as a thin
abstraction over the 'os' module to keep path handling uniform across
Windows and Unix-like systems.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path without '.' or '..' segments.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.normpath(os.path.abspath(p))


def is_within(path: str, root: str) -> bool:
    """
    Check whether 'path' equals 'root' or lies beneath it.

    Both arguments are normalized before comparison.
    """
    path_abs = os.path.normcase(os.path.abspath(path))
    root_abs = os.path.normcase(os.path.abspath(root))
    try:
        return os.path.commonpath([path_abs, root_abs]) == root_abs
    except ValueError:
        # Different drives on Windows
        return False


def to_posix(rel_path: str) -> str:
    """Convert an OS-specific relative path into URL-style separators."""
    return rel_path.replace(os.sep, "/")
