"""
FILE: tasktrack/logging_setup.py
PURPOSE: Logging configuration for CLI and REPL runs
EXPORTS:
  - setup_logging(level, log_file) -> None
DEPENDENCIES:
  - logging (stdlib)
NOTES:
  - Console handler goes to stderr so --json output on stdout stays clean
  - Third-party loggers (sqlalchemy, prompt_toolkit) reach the console only at ERROR+
  - File handler keeps everything at DEBUG
  - Call once, before the store is built
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


class _ConsoleNoiseFilter(logging.Filter):
    """Let our own logs through; third-party loggers only on errors."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "tasktrack" or record.name.startswith("tasktrack."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure the root logger with a console handler and an optional file handler.

    Args:
        level: Console level (name like "INFO" or a logging constant)
        log_file: Path for full DEBUG logs; skipped when None or not writable
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        log_file = Path(log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_file), encoding="utf-8")
        except OSError as e:
            logging.getLogger(__name__).warning("File logging disabled (%s): %s", log_file, e)
        else:
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)
