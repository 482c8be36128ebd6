# src/task_prefs/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Shown on the console at INFO+ regardless of console_level.
STORAGE_LOGGERS = (
    "task_prefs.prefs.prefs_store",
    "task_prefs.prefs.prefs_repository",
    "task_prefs.tasks.task_store",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - task_prefs logs at console_level and above
    - storage loggers (see STORAGE_LOGGERS) at INFO and above
    - the stream combinator (task_prefs.core.flows) only at WARNING+, it logs every close
    - Python warnings (captured as 'py.warnings') and third-party noise only at ERROR+
    """

    def __init__(self, console_level: int) -> None:
        super().__init__()
        self.console_level = console_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(STORAGE_LOGGERS):
            return record.levelno >= min(self.console_level, logging.INFO)

        if name.startswith("task_prefs.core.flows"):
            return record.levelno >= max(self.console_level, logging.WARNING)

        if name.startswith("task_prefs."):
            return record.levelno >= self.console_level

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_prefs",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered, quiet by default so it does not fight the prompt
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "task_prefs.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Level gating for the console happens in the filter, so the handler lets everything through.
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(logging.DEBUG)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter(console_level))
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
