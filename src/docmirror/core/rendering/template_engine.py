from __future__ import annotations

"""
Template Expansion Service.

Wraps a Jinja2 environment behind the small 'render_template' capability
used by the generator and the index builder. User templates placed in the
configured template directory shadow the built-in ones file by file.
"""

import logging
from typing import Any, List, Mapping, Optional, Protocol

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)

from docmirror.domain.constants import BUILTIN_TEMPLATE_DIR
from docmirror.domain.errors import TemplateError

logger = logging.getLogger(__name__)


class TemplateEngine(Protocol):
    """Capability expected by the site generator."""

    def render_template(self, template_name: str, values: Mapping[str, Any]) -> str:
        ...


class JinjaTemplateEngine:
    """
    Jinja2 backed TemplateEngine.

    Undefined values raise instead of rendering as empty strings, so a
    template referring to a slot the generator never fills fails the build.
    """

    def __init__(self, template_dir: Optional[str] = None) -> None:
        search_path: List[str] = []
        if template_dir:
            search_path.append(template_dir)
        search_path.append(BUILTIN_TEMPLATE_DIR)

        self.search_path = search_path
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render_template(self, template_name: str, values: Mapping[str, Any]) -> str:
        """
        Expand a named template with the given values.

        Raises:
            TemplateError: If the template is missing, malformed, or refers
                to an undefined value.
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(**values)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found in {self.search_path}", template_name) from e
        except TemplateSyntaxError as e:
            raise TemplateError(f"Syntax error at line {e.lineno}: {e.message}", template_name) from e
        except UndefinedError as e:
            raise TemplateError(f"Undefined template value: {e.message}", template_name) from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Template rendering failed: {e}", template_name) from e
