from __future__ import annotations

"""
Directory Listing Service.

Lists a single directory and classifies its entries into subdirectories,
documents and assets. Every list is sorted by name so that repeated runs
over the same input produce identical output.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import List

from docmirror.core.pipeline.components.filters import is_document, matches_any
from docmirror.domain.errors import FileOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryListing:
    """
    Classified content of one directory (absolute paths, name order).

    Attributes:
        path: The listed directory.
        subdirectories: Immediate child directories.
        documents: Files matching the document extension.
        assets: Every other regular file.
    """
    path: str
    subdirectories: List[str] = field(default_factory=list)
    documents: List[str] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def list_directory(
        path: str,
        document_extension: str,
        exclude_rx: List[re.Pattern],
) -> DirectoryListing:
    """
    List and classify the immediate entries of a directory.

    Symbolic links to directories are not followed, which keeps the
    traversal finite on trees containing link cycles.

    Args:
        path: Directory to list.
        document_extension: Suffix identifying documents.
        exclude_rx: Compiled patterns of entry names to skip.

    Returns:
        DirectoryListing: Sorted, classified entries.

    Raises:
        FileOperationError: If the directory cannot be read.
    """
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise FileOperationError(f"Cannot list directory: {e}", source=path) from e

    listing = DirectoryListing(path=path)

    for entry in entries:
        if matches_any(entry.name, exclude_rx):
            logger.debug(f"Excluded by pattern: {entry.path}")
            continue

        try:
            if entry.is_dir(follow_symlinks=False):
                listing.subdirectories.append(entry.path)
            elif entry.is_file():
                if is_document(entry.name, document_extension):
                    listing.documents.append(entry.path)
                else:
                    listing.assets.append(entry.path)
            else:
                logger.warning(f"Skipping unsupported entry: {entry.path}")
        except OSError as e:
            raise FileOperationError(f"Cannot inspect entry: {e}", source=entry.path) from e

    return listing
