"""
Search engine configuration from environment variables.

Environment is loaded from .env.local (local dev) or .env (production) when
present, system environment variables otherwise.

Config (env vars):
    SEARCH_FILTER_PUNCTUATION: "true" to strip non-alphanumeric characters (default: true)
    SEARCH_STOPWORDS_FILE: Stopword list, one word per line (default: bundled English list)
    SEARCH_MIN_KEYWORD_LENGTH: Shortest keyword kept (default: 4)
    SEARCH_ASSOCIATION_THRESHOLD: Minimum association strength for expansion (default: 0.0)
    SEARCH_MAX_CONCURRENT_LOOKUPS: Concurrent per-word document lookups (default: 8)
    ONTOLOGY_SOURCES: Comma-separated ontology files indexed at startup (default: none)
    LOG_LEVEL: Console log level, CRITICAL/ERROR/WARNING/INFO/DEBUG (default: INFO)
    LOG_FILE: Base log file path (default: logs/fdp-search.log)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def load_environment(project_root: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Load .env.local first (highest priority), then .env as fallback.

    Args:
        project_root: Directory holding the env files (default: current directory)

    Returns:
        Path of the loaded file, None when only system variables are used
    """
    root = Path(project_root) if project_root else Path.cwd()
    for candidate in (root / ".env.local", root / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=True)
            logger.info(f"Loaded environment from: {candidate}")
            return candidate

    logger.debug("No .env.local or .env file found - using system environment variables only")
    return None


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got '{value}'")


def _get_int(name: str, default: int, minimum: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got '{value}'") from e
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


def _get_float(name: str, default: float, minimum: float, maximum: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got '{value}'") from e
    if not minimum <= parsed <= maximum:
        raise ValueError(f"{name} must be within [{minimum}, {maximum}], got {parsed}")
    return parsed


@dataclass
class SearchSettings:
    """Settings of the relevance search engine"""
    filter_punctuation: bool = True
    stopwords_file: Optional[str] = None  # None = bundled list
    min_keyword_length: int = 4
    association_threshold: float = 0.0
    max_concurrent_lookups: int = 8
    ontology_sources: List[str] = field(default_factory=list)
    log_level: str = "INFO"
    log_file: str = "logs/fdp-search.log"

    @classmethod
    def from_env(cls) -> "SearchSettings":
        """
        Read settings from environment variables.

        Raises:
            ValueError: A variable is set to an invalid value
        """
        sources = os.getenv("ONTOLOGY_SOURCES", "")
        stopwords_file = os.getenv("SEARCH_STOPWORDS_FILE") or None
        if stopwords_file and not Path(stopwords_file).is_file():
            raise ValueError(f"SEARCH_STOPWORDS_FILE does not exist: {stopwords_file}")

        log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'")

        return cls(
            filter_punctuation=_get_bool("SEARCH_FILTER_PUNCTUATION", True),
            stopwords_file=stopwords_file,
            min_keyword_length=_get_int("SEARCH_MIN_KEYWORD_LENGTH", 4, minimum=1),
            association_threshold=_get_float("SEARCH_ASSOCIATION_THRESHOLD", 0.0, minimum=0.0, maximum=1.0),
            max_concurrent_lookups=_get_int("SEARCH_MAX_CONCURRENT_LOOKUPS", 8, minimum=1),
            ontology_sources=[s.strip() for s in sources.split(",") if s.strip()],
            log_level=log_level,
            log_file=os.getenv("LOG_FILE", "logs/fdp-search.log"),
        )
