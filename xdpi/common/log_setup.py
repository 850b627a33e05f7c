"""Logging for the xdpi command

The report goes to stdout; log records go to stderr (and optionally a
file) so the two never interleave in a redirected report.
"""

from __future__ import annotations

import logging
import sys

from xdpi import __version__

__all__ = [
    "logLevel_resolve",
    "logging_setup",
    "logFormatWithVersion_get",
]


def logLevel_resolve(level: str) -> int:
    """
    Map a level name from config or the command line to its number.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'")
    return resolved


def logging_setup(level: str, log_format: str, log_file: str | None) -> None:
    """
    Route log records to stderr and an optional file.

    Any handlers installed earlier are replaced.

    Args:
        level: Level name, e.g. `WARNING`
        log_format: Base formatter string
        log_file: Optional log file path

    Raises:
        ValueError: If the level name is unknown
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logLevel_resolve(level),
        format=logFormatWithVersion_get(log_format),
        handlers=handlers,
        force=True,
    )


def logFormatWithVersion_get(log_format: str) -> str:
    """Tag log lines with the xdpi version, after the timestamp when there is one"""
    tag = f"[v{__version__}]"
    if "%(asctime)s" in log_format:
        return log_format.replace("%(asctime)s", f"%(asctime)s {tag}", 1)
    return f"{tag} {log_format}"
