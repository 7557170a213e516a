from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the docmirror CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="docmirror",
        description="Render a tree of markup documents into a mirrored static HTML site.",
    )

    # --- Path Management ---
    p.add_argument(
        "input_path",
        nargs="?",
        default=None,
        help="Input directory containing the documents.",
    )
    p.add_argument(
        "output_path",
        nargs="?",
        default=None,
        help="Output directory receiving the generated site.",
    )
    p.add_argument(
        "-c", "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file merged over the defaults.",
    )

    # --- File Classification ---
    p.add_argument(
        "--ext",
        dest="document_extension",
        default=None,
        help="Document extension (default: .md).",
    )
    p.add_argument(
        "--out-ext",
        dest="output_extension",
        default=None,
        help="Extension given to rendered pages (default: .html).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated regexes of file or directory names to skip.",
    )

    # --- Templates and Rendering ---
    p.add_argument(
        "--template-dir",
        dest="template_dir",
        default=None,
        help="Directory with templates overriding the built-in ones.",
    )
    p.add_argument(
        "--site-title",
        dest="site_title",
        default=None,
        help="Title shown on every page and on the index.",
    )
    p.add_argument("--no-toc", action="store_true", help="Do not render per-page tables of contents.")
    p.add_argument("--no-section-numbers", action="store_true", help="Do not number section headings.")
    p.add_argument("--no-index", action="store_true", help="Do not generate the site index page.")

    # --- Runtime Constraints and Safety ---
    p.add_argument(
        "--in-place",
        action="store_true",
        help="Write directly into the output directory instead of staging and swapping it.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Generate into a temporary directory and discard the result.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write the build log to this file.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the generation result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.input_path
    overrides["output_path"] = args.output_path
    overrides["document_extension"] = args.document_extension
    overrides["output_extension"] = args.output_extension
    overrides["template_dir"] = args.template_dir
    overrides["site_title"] = args.site_title

    if args.exclude_patterns:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)

    # Rendering switches
    if args.no_toc:
        overrides["toc"] = False
    if args.no_section_numbers:
        overrides["section_numbers"] = False
    if args.no_index:
        overrides["build_index"] = False

    if args.in_place:
        overrides["transactional"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
