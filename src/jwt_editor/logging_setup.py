"""
Logging for jwt-editor commands.

Each run writes a full DEBUG log to its own timestamped file.  The console
only shows warnings unless ``--verbose`` is given.  Decode failures are
logged at DEBUG, so a bad token leaves a trace in the file without cluttering
the terminal.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime

from .config import resolve_path

__all__ = ["setup_logging"]

DETAILED_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
BRIEF_FORMAT = "%(levelname)-8s  %(message)s"


def _log_file_path(log_dir: str, log_prefix: str) -> str:
    directory = resolve_path(log_dir)
    os.makedirs(directory, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d-%H%M%S")
    return os.path.join(directory, f"{log_prefix}_{stamp}.log")


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def setup_logging(verbose: bool = False, log_dir: str = "logs", log_prefix: str = "jwt_editor") -> str:
    """Route the root logger to a per-run log file and to stderr.

    *log_dir* is resolved against the project root when relative.  Handlers
    from an earlier call are replaced, so calling this twice is harmless.

    Returns the path of the log file.
    """
    log_path = _log_file_path(log_dir, log_prefix)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    root.addHandler(_handler(
        logging.FileHandler(log_path, encoding="utf-8"),
        logging.DEBUG, DETAILED_FORMAT, "%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(_handler(
        logging.StreamHandler(sys.stderr),
        logging.DEBUG if verbose else logging.WARNING,
        DETAILED_FORMAT if verbose else BRIEF_FORMAT,
        "%H:%M:%S",
    ))

    return log_path
