from __future__ import annotations

"""
Site Index Builder.

Turns the completed navigation tree into a single browsable page at the
output root, listing every directory as a nested section and every
document as a link.
"""

import logging
import os

from docmirror.core.pipeline.components.path_mapper import PathMapper
from docmirror.core.pipeline.components.writer import write_text_atomic
from docmirror.core.rendering.template_engine import TemplateEngine
from docmirror.domain.errors import TemplateError
from docmirror.domain.site_models import Node

logger = logging.getLogger(__name__)


class IndexBuilder:
    """Render the navigation tree with the index template."""

    def __init__(self, template_engine: TemplateEngine, template_name: str, site_title: str) -> None:
        self.template_engine = template_engine
        self.template_name = template_name
        self.site_title = site_title

    def build(self, root: Node, mapper: PathMapper, filename: str) -> str:
        """
        Write the index page for 'root' into the output root.

        Args:
            root: Navigation tree rooted at the input directory.
            mapper: Path rules of the current run.
            filename: Index file name, relative to the output root.

        Returns:
            str: Absolute path of the written index page.
        """
        index_path = os.path.join(mapper.output_root, filename)
        values = {
            "site_title": self.site_title,
            "root": root,
            "root_prefix": mapper.root_prefix(index_path),
            "index_link": mapper.index_link(index_path),
        }

        try:
            html = self.template_engine.render_template(self.template_name, values)
        except TemplateError as e:
            raise TemplateError(e.message, e.template_name, path=index_path) from e

        write_text_atomic(index_path, html)
        logger.info(f"Site index written: {index_path}")
        return index_path
