"""Shared logging configuration for the bn_elimination command-line tools.

Library modules only create ``logging.getLogger(__name__)`` loggers; call
``configure_logging()`` once at an entry point to see their output. The
function is idempotent: the console handler is added only when the root
logger has none, and a log file is attached at most once per path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def _has_file_handler(root: logging.Logger, path: Path) -> bool:
    target = str(path.resolve())
    return any(isinstance(h, logging.FileHandler) and h.baseFilename == target for h in root.handlers)


def configure_logging(level: Union[int, str] = logging.WARNING,
                      log_file: Optional[Union[str, Path]] = None) -> None:
    """Configure root logger with a console handler and an optional file handler."""
    root = logging.getLogger()
    root.setLevel(parse_level(level))
    formatter = logging.Formatter(LOG_FORMAT)

    if not root.handlers:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        if not _has_file_handler(root, path):
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, mode="a", encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)


__all__ = ["LOG_FORMAT", "configure_logging", "parse_level"]
