"""
Logging for search engine processes.

Console gets brief records, a per-session file gets everything:

    INFO: Reindexed ontologies: 3 classes, 9 keywords, 2 association keys
    2026-01-05 10:12:03 | DEBUG    | fdp_search.relevance.scorer:160 | 2 results for word 'leukemia' (idf=0.4055)
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Session log files kept on disk (older ones are deleted on startup)
LOG_RETENTION = 5

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 10


def _prune_session_logs(directory: Path, stem: str, keep: int):
    """Delete all but the newest keep session logs named <stem>_<timestamp>.log."""
    sessions = sorted(directory.glob(f"{stem}_*.log"), key=lambda p: p.name, reverse=True)
    for stale in sessions[keep:]:
        try:
            stale.unlink()
        except OSError as e:
            # Another process may have removed or locked it
            logging.getLogger(__name__).debug(f"Could not delete old log {stale}: {e}")


def _session_file_handler(log_path: Path, level: int) -> RotatingFileHandler:
    started = datetime.now().strftime("%Y%m%d_%H%M%S")
    handler = RotatingFileHandler(
        log_path.parent / f"{log_path.stem}_{started}.log",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    log_file: str = "logs/fdp-search.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Optional[Path]:
    """
    Replace root logger handlers with a console handler and a session file handler.

    Every call starts a new session file named after log_file plus a
    timestamp, rotated at 10MB. Only the newest LOG_RETENTION session files
    are kept.

    Args:
        log_file: Base path to log file (empty string = console only)
        console_level: Console logging level (INFO = brief)
        file_level: File logging level (DEBUG = verbose)

    Returns:
        Path of the session log file, None for console-only logging
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Filtering happens in handlers
    root_logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console)

    if not log_file:
        logging.info(f"Logging configured: console={logging.getLevelName(console_level)}, no log file")
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    # Leave room for the session file created below
    _prune_session_logs(log_path.parent, log_path.stem, keep=LOG_RETENTION - 1)

    file_handler = _session_file_handler(log_path, file_level)
    root_logger.addHandler(file_handler)

    session_log = Path(file_handler.baseFilename)
    logging.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={session_log} ({logging.getLevelName(file_level)})"
    )
    return session_log
