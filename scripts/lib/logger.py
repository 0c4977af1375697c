"""
Logging setup for Intent Signal Hub.

Every module logs through a named logger that writes to stdout and, unless
LOG_TO_FILE is off, to one file per day shared by all modules
(logs/YYYYMMDD_intent_hub.log). Named loggers don't propagate, so the
root handler main.py installs never prints a line twice.

Usage:
    from scripts.lib.logger import setup_logger
    logger = setup_logger("intent_ingest")
    logger.info("Batch %d/%d saved", n, total)

Environment: LOG_LEVEL (default INFO), LOG_TO_FILE (default true),
LOG_DIR (default <project>/logs).
"""
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_SUFFIX = "_intent_hub.log"

_formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)


def log_file_path(log_dir: Union[str, Path, None] = None, day: Optional[date] = None) -> Path:
    """Daily log file for `day` (today by default) under `log_dir` or $LOG_DIR."""
    folder = Path(log_dir or os.getenv("LOG_DIR") or DEFAULT_LOG_DIR)
    return folder / f"{(day or date.today()).strftime('%Y%m%d')}{LOG_FILE_SUFFIX}"


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter)
    return handler


def _daily_file_handler(log_dir) -> logging.Handler:
    path = log_file_path(log_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(_formatter)
    return handler


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


def setup_logger(
    name: str,
    level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_dir: Union[str, Path, None] = None,
) -> logging.Logger:
    """
    Return the named logger, attaching handlers on first use only.

    Args:
        name: Logger name, e.g. "intent_ingest".
        level: Level name; unknown names fall back to INFO.
        log_to_file: Also append to the daily file.
        log_dir: Where the daily file lives.

    Arguments left as None come from the environment.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.propagate = False

    logger.addHandler(_console_handler())
    if log_to_file if log_to_file is not None else _env_flag("LOG_TO_FILE", "true"):
        logger.addHandler(_daily_file_handler(log_dir))

    return logger
