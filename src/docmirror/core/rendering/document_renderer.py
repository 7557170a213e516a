from __future__ import annotations

"""
Document Rendering Service.

Converts markup documents into HTML fragments plus a structured header.
The default implementation is backed by Python-Markdown and reads an
optional YAML front matter block for the title and page metadata.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple
from xml.etree.ElementTree import Element

import markdown
import yaml
from markdown.extensions import Extension
from markdown.extensions.toc import TocExtension
from markdown.treeprocessors import Treeprocessor

from docmirror.domain.config import RendererOptions
from docmirror.domain.errors import FileOperationError, RenderError

logger = logging.getLogger(__name__)

_FRONT_MATTER_RX = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_ATX_H1_RX = re.compile(r"^#[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
_SETEXT_H1_RX = re.compile(r"^(?!\s)([^\n]+?)[ \t]*\r?\n=+[ \t]*$", re.MULTILINE)
_FENCE_RX = re.compile(r"^(```|~~~).*?^\1[ \t]*$", re.MULTILINE | re.DOTALL)

_HEADING_TAGS = ("h2", "h3", "h4", "h5", "h6")

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DocumentHeader:
    """Title and front-matter metadata of a document."""
    title: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderedDocument:
    """
    Output of a single document conversion.

    Attributes:
        title: Resolved document title.
        html: Rendered HTML body fragment.
        toc: Table of contents fragment (empty when disabled).
        metadata: Front-matter values other than the title.
    """
    title: str
    html: str
    toc: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


class DocumentRenderer(Protocol):
    """Capability expected by the site generator."""

    def render(self, path: str) -> str:
        ...

    def read_header(self, path: str) -> DocumentHeader:
        ...

    def render_document(self, path: str) -> RenderedDocument:
        ...

# -----------------------------------------------------------------------------
# SECTION NUMBERING EXTENSION
# -----------------------------------------------------------------------------

class _SectionNumberProcessor(Treeprocessor):
    """Prefix h2-h6 headings with hierarchical numbers (1, 1.1, 1.1.1...)."""

    def run(self, root: Element) -> None:
        counters = [0] * len(_HEADING_TAGS)
        for el in root.iter():
            if el.tag not in _HEADING_TAGS:
                continue
            idx = _HEADING_TAGS.index(el.tag)
            counters[idx] += 1
            for deeper in range(idx + 1, len(counters)):
                counters[deeper] = 0
            number = ".".join(str(c) for c in counters[: idx + 1])
            el.text = f"{number} " + (el.text or "")


class SectionNumberExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # Runs after inline processing (20) and before the toc (5)
        md.treeprocessors.register(_SectionNumberProcessor(md), "section_numbers", 6)

# -----------------------------------------------------------------------------
# MARKDOWN IMPLEMENTATION
# -----------------------------------------------------------------------------

class MarkdownRenderer:
    """
    Python-Markdown backed DocumentRenderer.

    The options are fixed for the whole run; a fresh Markdown instance is
    created per document so no conversion state leaks between pages.
    """

    def __init__(self, options: Optional[RendererOptions] = None) -> None:
        self.options = options or RendererOptions()

    def render(self, path: str) -> str:
        return self.render_document(path).html

    def read_header(self, path: str) -> DocumentHeader:
        meta, body = _split_front_matter(_read_source(path), path)
        title, metadata = _resolve_title(meta, body, path)
        return DocumentHeader(title=title, metadata=metadata)

    def render_document(self, path: str) -> RenderedDocument:
        """
        Read, parse and convert one document.

        Raises:
            RenderError: On undecodable text, malformed front matter, an
                unusable markup extension, or a failure inside the converter.
            FileOperationError: If the file cannot be read.
        """
        meta, body = _split_front_matter(_read_source(path), path)
        title, metadata = _resolve_title(meta, body, path)

        md = self._create_parser(path)
        try:
            html = md.convert(body)
        except Exception as e:
            raise RenderError(f"Markup conversion failed: {e}", path) from e

        toc = getattr(md, "toc", "") if self.options.toc else ""
        logger.debug(f"Rendered '{title}' from {path}")
        return RenderedDocument(title=title, html=html, toc=toc, metadata=metadata)

    def _create_parser(self, path: str) -> markdown.Markdown:
        extensions: List[Any] = list(self.options.extensions)
        extensions.append(TocExtension(toc_depth=self.options.toc_depth))
        if self.options.section_numbers:
            extensions.append(SectionNumberExtension())
        try:
            return markdown.Markdown(extensions=extensions, output_format="html")
        except (ImportError, AttributeError, TypeError, ValueError) as e:
            raise RenderError(f"Cannot load markup extensions {list(self.options.extensions)}: {e}", path) from e

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _read_source(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise RenderError(f"Document is not valid UTF-8: {e}", path) from e
    except OSError as e:
        raise FileOperationError(f"Cannot read document: {e}", source=path) from e
    return text.lstrip("\ufeff")


def _split_front_matter(text: str, path: str) -> Tuple[Dict[str, Any], str]:
    """Separate a leading '---' YAML block from the markup body."""
    match = _FRONT_MATTER_RX.match(text)
    if not match:
        return {}, text

    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise RenderError(f"Malformed front matter: {e}", path) from e

    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise RenderError("Front matter must be a mapping.", path)
    return meta, text[match.end():]


def _resolve_title(meta: Dict[str, Any], body: str, path: str) -> Tuple[str, Dict[str, Any]]:
    """Title priority: front matter, first level-1 heading, file stem."""
    metadata = {k: v for k, v in meta.items() if k != "title"}

    title = meta.get("title")
    if title is not None and str(title).strip():
        return str(title).strip(), metadata

    prose = _FENCE_RX.sub("", body)
    candidates = [m for m in (_ATX_H1_RX.search(prose), _SETEXT_H1_RX.search(prose)) if m]
    if candidates:
        first = min(candidates, key=lambda m: m.start())
        return first.group(1).strip(), metadata

    stem, _ = os.path.splitext(os.path.basename(path))
    return stem, metadata
