from __future__ import annotations

"""
Input/Output Path Mapping.

Maps source files under the input root to their mirrored location under
the output root and computes the relative prefixes a generated page needs
to link back to the site root.
"""

import os
from typing import Optional

from docmirror.core.pipeline.components.filters import is_document
from docmirror.domain.constants import DEFAULT_OUTPUT_EXTENSION, INDEX_FILENAME
from docmirror.infra.fs import to_posix


class PathMapper:
    """
    Stateless path rules for one (input root, output root) pair.

    Both roots are normalized at construction so every relativization below
    works on paths free of '.' and '..' segments.
    """

    def __init__(
            self,
            input_root: str,
            output_root: str,
            document_extension: str,
            output_extension: str = DEFAULT_OUTPUT_EXTENSION,
            index_filename: str = INDEX_FILENAME,
    ) -> None:
        self.input_root = _normalize(input_root)
        self.output_root = _normalize(output_root)
        self.document_extension = document_extension
        self.output_extension = output_extension
        self.index_filename = index_filename

    # -------------------------------------------------------------------------
    # SOURCE -> OUTPUT
    # -------------------------------------------------------------------------

    def output_path(self, source: str) -> str:
        """
        Compute the mirrored output path of a source file.

        Documents get their final extension replaced by the output extension
        ('notes.v2.md' -> 'notes.v2.html'); assets keep their name.

        Raises:
            ValueError: If 'source' is not located under the input root.
        """
        rel = _relative_to(_normalize(source), self.input_root, "input")
        directory, file_name = os.path.split(rel)
        if is_document(file_name, self.document_extension):
            stem, _ = os.path.splitext(file_name)
            file_name = stem + self.output_extension
        return os.path.join(self.output_root, directory, file_name)

    # -------------------------------------------------------------------------
    # OUTPUT -> LINKS
    # -------------------------------------------------------------------------

    def relative_output(self, output_file: str) -> str:
        """Return 'output_file' relative to the output root, with '/' separators."""
        return to_posix(_relative_to(_normalize(output_file), self.output_root, "output"))

    def root_prefix(self, output_file: str) -> str:
        """
        Compute the '../' chain leading from the file's directory to the output root.

        Returns an empty string for files placed directly in the output root.
        """
        parent = os.path.dirname(_normalize(output_file))
        rel = _relative_to(parent, self.output_root, "output")
        if rel == os.curdir:
            return ""
        depth = len(rel.split(os.sep))
        return "../" * depth

    def index_link(self, output_file: str) -> Optional[str]:
        """
        Compute the relative link to the site index page.

        Returns None for the index page itself so it never links to itself.
        """
        if self.relative_output(output_file) == self.index_filename:
            return None
        return self.root_prefix(output_file) + self.index_filename


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _normalize(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def _relative_to(path: str, root: str, label: str) -> str:
    rel = os.path.relpath(path, root)
    if rel == os.pardir or rel.startswith(os.pardir + os.sep) or os.path.isabs(rel):
        raise ValueError(f"Path '{path}' is outside the {label} root '{root}'.")
    return rel
