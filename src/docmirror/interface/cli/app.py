from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: initialization of logging, loading and
merging of configuration sources (defaults, JSON file, CLI overrides),
generation and result rendering.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from docmirror.core.pipeline.engine import run_generation
from docmirror.core.pipeline.validator import validate_config
from docmirror.domain.config import SiteConfig, get_default_config, load_config
from docmirror.domain.errors import InputError
from docmirror.domain.generation_models import GenerationResult
from docmirror.infra.logging import LoggingConfig, configure_logging, get_logger
from docmirror.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console stderr, optional build log)
    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs config file)
    try:
        base_conf = load_config(args.config_file) if args.config_file else get_default_config()
    except InputError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    # 4. Merge command-line overrides and validate
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 5. Pre-flight argument verification
    missing = [k for k in ("input_path", "output_path") if not clean_conf.get(k)]
    if missing:
        msg = f"Missing required path(s): {', '.join(missing)}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_USAGE

    config = SiteConfig.from_dict(clean_conf)
    logger.info(f"Targeting input directory: {config.input_path}")

    # 6. Generation phase
    try:
        result = run_generation(config, dry_run=bool(args.dry_run))
    except KeyboardInterrupt:
        logger.warning("Generation interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    # 7. Output rendering phase
    if args.json_output:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2, default=str))
    else:
        _print_human_summary(result)

    if result.ok:
        return EXIT_OK
    return EXIT_USAGE if result.error_kind == "input" else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    None values mean 'not given on the command line' and never replace a
    value coming from the configuration file.
    """
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: GenerationResult) -> None:
    """Format and print the execution result to the standard output."""
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    summary = result.summary
    if result.dry_run:
        print("DRY RUN COMPLETE (nothing written)")
    else:
        print("GENERATION COMPLETE")
        print(f"Output directory: {result.output_path}")

    stats_keys = {
        "directories": "Directories",
        "documents": "Pages rendered",
        "assets": "Assets copied",
    }
    for key, label in stats_keys.items():
        if key in summary:
            print(f"{label}: {summary[key]}")

    if result.index_path:
        print(f"Site index: {os.path.relpath(result.index_path, result.output_path)}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
