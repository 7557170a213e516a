from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between raw configuration sources (JSON file, CLI
overrides) and the immutable SiteConfig. Handles type coercion, default
value injection and domain-specific normalization.
"""

import logging
import re
from typing import Any, Dict, List, Tuple

from docmirror.domain.config import get_default_config

logger = logging.getLogger(__name__)

_TOC_DEPTH_RX = re.compile(r"^[1-6](-[1-6])?$")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Converts untrusted inputs into strictly typed parameters and fills
    missing keys with domain defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    for key in config:
        if key not in defaults:
            msg = f"Unknown configuration key '{key}'."
            if strict:
                raise KeyError(msg)
            warnings.append(f"{msg} Ignored.")

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    # 2. Schema Definition (Declarative mapping)
    string_fields = [
        "input_path", "output_path", "document_extension", "output_extension",
        "template_dir", "page_template", "index_template", "site_title", "toc_depth",
    ]

    bool_fields = ["build_index", "toc", "section_numbers", "transactional"]

    list_fields = ["exclude_patterns", "markdown_extensions"]

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in list_fields:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    # 4. Domain-Specific Normalization
    for field in ("document_extension", "output_extension"):
        merged[field] = _normalize_extension(merged[field], field, warnings, strict)

    if merged["document_extension"].lower() == merged["output_extension"].lower():
        msg = "Document and output extensions must differ."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using defaults.")
        merged["document_extension"] = defaults["document_extension"]
        merged["output_extension"] = defaults["output_extension"]

    if not _TOC_DEPTH_RX.match(merged["toc_depth"]):
        msg = f"Invalid toc_depth '{merged['toc_depth']}': expected 'N' or 'N-M' with levels 1-6."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        merged["toc_depth"] = defaults["toc_depth"]

    merged["exclude_patterns"] = _valid_patterns(merged["exclude_patterns"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extension(ext: str, field: str, warnings: List[str], strict: bool) -> str:
    """Ensure a file extension is prefixed with a dot."""
    if ext.startswith("."):
        return ext
    if strict:
        raise ValueError(f"Invalid {field} '{ext}': must start with '.'.")
    warnings.append(f"Extension '{ext}' corrected to '.{ext}'.")
    return "." + ext


def _valid_patterns(patterns: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Drop exclusion patterns that are not valid regular expressions."""
    out: List[str] = []
    for p in patterns:
        try:
            re.compile(p)
        except re.error as e:
            msg = f"Invalid exclusion pattern '{p}': {e}."
            if strict:
                raise ValueError(msg) from e
            warnings.append(f"{msg} Pattern discarded.")
            continue
        out.append(p)
    return out
