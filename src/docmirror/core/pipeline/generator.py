from __future__ import annotations

"""
Site Generator.

Walks the input tree depth-first, rendering documents into templated
pages, copying assets verbatim, and accumulating the navigation tree.
Subdirectories are fully generated before the documents of their parent
are processed, so every Node's children describe complete subtrees by the
time its own entries are added.
"""

import logging
import os
import threading
from typing import Dict, List, Optional, Set, Tuple

from docmirror.core.pipeline.components.filters import compile_patterns
from docmirror.core.pipeline.components.path_mapper import PathMapper
from docmirror.core.pipeline.components.writer import copy_file_atomic, write_text_atomic
from docmirror.core.pipeline.index_builder import IndexBuilder
from docmirror.core.rendering.document_renderer import DocumentRenderer
from docmirror.core.rendering.template_engine import TemplateEngine
from docmirror.core.services.scanner import DirectoryListing, list_directory
from docmirror.domain.config import SiteConfig
from docmirror.domain.constants import (
    FALLBACK_INDEX_FILENAME,
    INDEX_FILENAME,
    ROOT_NODE_TITLE,
)
from docmirror.domain.errors import (
    FileOperationError,
    GenerationCancelled,
    InputError,
    TemplateError,
)
from docmirror.domain.site_models import Entry, Node
from docmirror.infra.fs import is_within, to_posix

logger = logging.getLogger(__name__)

# Work stack frame: (directory, parent node, listing once the directory was entered)
_Frame = Tuple[str, Node, Optional[DirectoryListing]]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def check_roots(input_root: str, output_root: str) -> None:
    """
    Verify the input root and its relation to the output root.

    Raises:
        InputError: If the input root is missing, not a directory, not
            readable, or if either root contains the other.
    """
    if not os.path.exists(input_root):
        raise InputError("Input directory does not exist.", input_root)
    if not os.path.isdir(input_root):
        raise InputError("Input path is not a directory.", input_root)
    if not os.access(input_root, os.R_OK | os.X_OK):
        raise InputError("Input directory is not readable.", input_root)
    if is_within(output_root, input_root):
        raise InputError("Output directory must not be inside the input directory.", output_root)
    if is_within(input_root, output_root):
        raise InputError("Input directory must not be inside the output directory.", input_root)


class SiteGenerator:
    """
    Orchestrates one generation pass.

    Collaborators are injected at construction and stay fixed for the
    lifetime of the generator; each call to generate() starts from a fresh
    synthetic root node.
    """

    def __init__(
            self,
            config: SiteConfig,
            renderer: DocumentRenderer,
            template_engine: TemplateEngine,
            index_builder: Optional[IndexBuilder] = None,
            cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.template_engine = template_engine
        self.index_builder = index_builder
        self.cancel_event = cancel_event

        self._exclude_rx = compile_patterns(config.exclude_patterns)
        self.root = Node(ROOT_NODE_TITLE)
        self.index_path = ""
        self.counters: Dict[str, int] = {}
        self._claimed: Dict[str, str] = {}
        self._has_home = False

    def generate(self, input_root: str, output_root: str) -> Node:
        """
        Generate the site for 'input_root' into 'output_root'.

        Returns:
            Node: Navigation tree rooted at the input directory. The
                synthetic holder node stays available as 'self.root'.

        Raises:
            SiteGenerationError: On the first fatal failure.
        """
        input_root = os.path.normpath(os.path.abspath(input_root))
        output_root = os.path.normpath(os.path.abspath(output_root))
        check_roots(input_root, output_root)

        self._reset()
        mapper = PathMapper(
            input_root,
            output_root,
            self.config.document_extension,
            self.config.output_extension,
        )

        taken = self._root_outputs(input_root, mapper)
        index_filename = ""
        if self.index_builder is not None:
            index_filename = self._choose_index_filename(taken)
        self._has_home = bool(index_filename) or os.path.normcase(INDEX_FILENAME) in taken

        logger.info(f"Generating site: {input_root} -> {output_root}")
        site = self._walk(input_root, mapper, index_filename)

        if self.index_builder is not None:
            self._claim(os.path.join(output_root, index_filename), "<site index>")
            self.index_path = self.index_builder.build(site, mapper, index_filename)

        return site

    # -------------------------------------------------------------------------
    # TRAVERSAL
    # -------------------------------------------------------------------------

    def _walk(self, input_root: str, mapper: PathMapper, index_filename: str) -> Node:
        """
        Post-order traversal over an explicit stack.

        A directory is pushed twice: once to be entered (node creation and
        listing) and once, below its subdirectories, to have its own files
        processed after every descendant is done.
        """
        nodes: Dict[str, Node] = {}
        stack: List[_Frame] = [(input_root, self.root, None)]

        while stack:
            directory, parent, listing = stack.pop()
            self._check_cancelled(directory)

            if listing is None:
                node = Node(os.path.basename(directory))
                parent.add(node)
                nodes[directory] = node
                self.counters["directories"] += 1
                logger.debug(f"Entering directory: {directory}")

                listing = list_directory(directory, self.config.document_extension, self._exclude_rx)
                stack.append((directory, parent, listing))
                for sub in reversed(listing.subdirectories):
                    stack.append((sub, node, None))
                continue

            node = nodes[directory]
            for source in listing.documents:
                self._generate_page(node, source, mapper, index_filename)
            for source in listing.assets:
                self._copy_asset(source, mapper)

        return nodes[input_root]

    # -------------------------------------------------------------------------
    # FILE PROCESSING
    # -------------------------------------------------------------------------

    def _generate_page(self, node: Node, source: str, mapper: PathMapper, index_filename: str) -> None:
        self._check_cancelled(source)

        rendered = self.renderer.render_document(source)
        out_path = mapper.output_path(source)
        self._claim(out_path, source)

        values = {
            "body": rendered.html,
            "title": rendered.title,
            "toc": rendered.toc,
            "metadata": rendered.metadata,
            "site_title": self.config.site_title,
            "source_path": to_posix(os.path.relpath(source, mapper.input_root)),
            "root_prefix": mapper.root_prefix(out_path),
            "index_link": mapper.index_link(out_path) if self._has_home else None,
            "contents_link": self._contents_link(out_path, mapper, index_filename),
        }

        try:
            html = self.template_engine.render_template(self.config.page_template, values)
        except TemplateError as e:
            raise TemplateError(e.message, e.template_name, path=source) from e

        write_text_atomic(out_path, html, source=source)
        node.entries.append(Entry(rendered.title, mapper.relative_output(out_path)))
        self.counters["documents"] += 1
        logger.debug(f"Page written: {out_path}")

    def _copy_asset(self, source: str, mapper: PathMapper) -> None:
        self._check_cancelled(source)

        destination = mapper.output_path(source)
        self._claim(destination, source)
        copy_file_atomic(source, destination)
        self.counters["assets"] += 1
        logger.debug(f"Asset copied: {destination}")

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def _reset(self) -> None:
        self.root = Node(ROOT_NODE_TITLE)
        self.index_path = ""
        self.counters = {"directories": 0, "documents": 0, "assets": 0}
        self._claimed = {}
        self._has_home = False

    def _check_cancelled(self, path: str) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise GenerationCancelled("Generation cancelled.", path)

    def _claim(self, destination: str, source: str) -> None:
        """Register an output path, refusing two sources that map onto it."""
        key = os.path.normcase(destination)
        previous = self._claimed.get(key)
        if previous is not None:
            raise FileOperationError(
                f"Output collision with '{previous}'", source=source, destination=destination
            )
        self._claimed[key] = source

    def _root_outputs(self, input_root: str, mapper: PathMapper) -> Set[str]:
        """Names (normcased) of the files the input places directly in the output root."""
        listing = list_directory(input_root, self.config.document_extension, self._exclude_rx)
        return {
            os.path.normcase(mapper.relative_output(mapper.output_path(f)))
            for f in listing.documents + listing.assets
        }

    @staticmethod
    def _choose_index_filename(taken: Set[str]) -> str:
        """
        Keep a user-provided home page; fall back to a separate contents page.

        The fallback name gets a numeric suffix ('contents-1.html', ...)
        until it no longer clashes with a root-level output of the input.
        """
        if os.path.normcase(INDEX_FILENAME) not in taken:
            return INDEX_FILENAME

        stem, ext = os.path.splitext(FALLBACK_INDEX_FILENAME)
        candidate = FALLBACK_INDEX_FILENAME
        suffix = 0
        while os.path.normcase(candidate) in taken:
            suffix += 1
            candidate = f"{stem}-{suffix}{ext}"

        logger.info(f"'{INDEX_FILENAME}' comes from the input; index written to '{candidate}'.")
        return candidate

    @staticmethod
    def _contents_link(out_path: str, mapper: PathMapper, index_filename: str) -> Optional[str]:
        if not index_filename or index_filename == mapper.index_filename:
            return None
        if mapper.relative_output(out_path) == index_filename:
            return None
        return mapper.root_prefix(out_path) + index_filename
