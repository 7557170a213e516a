from __future__ import annotations

"""
Logging Configuration Models.

Holds the settings consumed by configure_logging(): severity, console
output and the optional rotating build log kept next to a generated site.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

# Accepted level names (case-insensitive) and their numeric values
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings of the logging subsystem for one process.

    Attributes:
        level: Minimum severity written to any handler.
        console: Write records to stderr.
        log_file: Optional build log path (rotated by size).
        max_bytes: Size at which the build log is rotated.
        backup_count: Rotated build logs to keep.
        console_fmt: Record layout on the terminal.
        file_fmt: Record layout in the build log.
        datefmt: Timestamp layout in the build log.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> LoggingConfig:
        """Settings used by the command line: INFO on stderr, DEBUG with --debug."""
        return cls(level="DEBUG" if debug else "INFO", console=True, log_file=log_file or None)
