from __future__ import annotations

"""
Generation Error Taxonomy.

Every failure that aborts a generation run derives from SiteGenerationError
and carries the offending path, so interfaces can report it without
inspecting the underlying cause.
"""

from typing import Optional


class SiteGenerationError(Exception):
    """Base class for fatal generation failures."""

    kind = "generation"

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} [{self.path}]"
        return self.message


class InputError(SiteGenerationError):
    """Input root is missing, not a directory, unreadable or overlaps the output."""

    kind = "input"


class RenderError(SiteGenerationError):
    """A document could not be decoded or converted to HTML."""

    kind = "render"


class TemplateError(SiteGenerationError):
    """A template is missing, malformed, or references an undefined value."""

    kind = "template"

    def __init__(
            self,
            message: str,
            template_name: str,
            path: Optional[str] = None,
    ) -> None:
        super().__init__(message, path)
        self.template_name = template_name

    def __str__(self) -> str:
        base = f"{self.message} (template '{self.template_name}')"
        if self.path:
            return f"{base} [{self.path}]"
        return base


class FileOperationError(SiteGenerationError):
    """Creating a directory, writing a page or copying an asset failed."""

    kind = "io"

    def __init__(
            self,
            message: str,
            source: Optional[str] = None,
            destination: Optional[str] = None,
    ) -> None:
        super().__init__(message, source or destination)
        self.source = source
        self.destination = destination

    def __str__(self) -> str:
        parts = [self.message]
        if self.source:
            parts.append(f"source: {self.source}")
        if self.destination:
            parts.append(f"destination: {self.destination}")
        return " | ".join(parts)


class GenerationCancelled(SiteGenerationError):
    """The cancellation signal was observed between traversal steps."""

    kind = "cancelled"
