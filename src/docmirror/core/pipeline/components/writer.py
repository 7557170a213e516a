from __future__ import annotations

"""
Output Persistence.

Handles the physical writes of the generation run. Every page write and
asset copy goes to a temporary sibling first and is then moved over the
destination with os.replace, so an interrupted run never leaves a
half-written file behind.
"""

import logging
import os
import shutil
import tempfile
from typing import Optional

from docmirror.domain.errors import FileOperationError

logger = logging.getLogger(__name__)

_TEMP_SUFFIX = ".partial"
_PAGE_MODE = 0o644

# -----------------------------------------------------------------------------
# DIRECTORY MANAGEMENT
# -----------------------------------------------------------------------------

def ensure_directory(path: str, source: Optional[str] = None) -> None:
    """
    Create a directory and all missing ancestors.

    Args:
        path: Directory to create.
        source: Source file that triggered the creation (for error reports).

    Raises:
        FileOperationError: If the hierarchy cannot be created.
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FileOperationError(
            f"Cannot create directory: {e}", source=source, destination=path
        ) from e

# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

def write_text_atomic(path: str, content: str, source: Optional[str] = None) -> None:
    """
    Write UTF-8 text to 'path', fully replacing any existing file.

    Args:
        path: Destination file.
        content: Text to persist.
        source: Source document (for error reports).

    Raises:
        FileOperationError: If the write or the final rename fails.
    """
    ensure_directory(os.path.dirname(path), source)
    tmp_path = _reserve_temp(path, source)
    try:
        with open(tmp_path, "wb") as out:
            out.write(content.encode("utf-8"))
        os.chmod(tmp_path, _PAGE_MODE)
        os.replace(tmp_path, path)
    except OSError as e:
        _discard(tmp_path)
        raise FileOperationError(
            f"Cannot write page: {e}", source=source, destination=path
        ) from e


def copy_file_atomic(source: str, destination: str) -> None:
    """
    Copy 'source' byte-for-byte to 'destination', overwriting it if present.

    Raises:
        FileOperationError: If reading, writing or the final rename fails.
    """
    ensure_directory(os.path.dirname(destination), source)
    tmp_path = _reserve_temp(destination, source)
    try:
        shutil.copyfile(source, tmp_path)
        shutil.copymode(source, tmp_path)
        os.replace(tmp_path, destination)
    except OSError as e:
        _discard(tmp_path)
        raise FileOperationError(
            f"Cannot copy asset: {e}", source=source, destination=destination
        ) from e

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _reserve_temp(path: str, source: Optional[str]) -> str:
    """Create an empty temporary file next to 'path' and return its name."""
    directory, name = os.path.split(path)
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{name}.", suffix=_TEMP_SUFFIX, dir=directory)
    except OSError as e:
        raise FileOperationError(
            f"Cannot create temporary file: {e}", source=source, destination=path
        ) from e
    os.close(fd)
    return tmp_path


def _discard(tmp_path: str) -> None:
    try:
        os.remove(tmp_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove temporary file '{tmp_path}': {e}")
