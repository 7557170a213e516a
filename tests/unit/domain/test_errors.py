from __future__ import annotations

"""
Unit tests for the generation error taxonomy.
"""

from docmirror.domain.errors import (
    FileOperationError,
    GenerationCancelled,
    InputError,
    RenderError,
    SiteGenerationError,
    TemplateError,
)


def test_every_error_derives_from_base() -> None:
    for cls in (InputError, RenderError, FileOperationError, GenerationCancelled):
        assert issubclass(cls, SiteGenerationError)
    assert issubclass(TemplateError, SiteGenerationError)


def test_error_kinds_are_distinct() -> None:
    kinds = {
        InputError.kind,
        RenderError.kind,
        TemplateError.kind,
        FileOperationError.kind,
        GenerationCancelled.kind,
    }
    assert len(kinds) == 5


def test_render_error_names_path() -> None:
    err = RenderError("Malformed front matter", "/docs/bad.md")
    assert err.path == "/docs/bad.md"
    assert "/docs/bad.md" in str(err)


def test_template_error_names_template_and_document() -> None:
    err = TemplateError("Undefined template value", "page.html", path="/docs/a.md")
    text = str(err)
    assert "page.html" in text
    assert "/docs/a.md" in text


def test_file_operation_error_reports_both_paths() -> None:
    err = FileOperationError("Cannot copy asset", source="/in/a.png", destination="/out/a.png")

    assert err.path == "/in/a.png"
    assert "source: /in/a.png" in str(err)
    assert "destination: /out/a.png" in str(err)


def test_file_operation_error_falls_back_to_destination_path() -> None:
    err = FileOperationError("Cannot create directory", destination="/out/x")
    assert err.path == "/out/x"
