"""Loguru logging configuration for the API server and CLI.

Log lines emitted while a county is being parsed carry that county's name,
bound with ``logger.contextualize(county=...)``.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FILE_NAME = "county-results-api.log"
_PREFIX = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | "


def format_record(record: dict) -> str:
    """Loguru format callable adding a ``[county]`` tag when one is bound."""
    county = record["extra"].get("county")
    tag = f"[{county}] ".replace("{", "{{").replace("}", "}}") if county else ""
    return _PREFIX + tag + "{message}\n{exception}"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace Loguru's default sink with the application sinks.

    Args:
        log_level: Minimum log level to emit (case-insensitive).
        log_dir: Optional directory for a rotating log file (rotated every
            24 hours, retained 7 days).
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=format_record)
    # Records logged with extra json_output=True are also emitted as JSON.
    logger.add(
        sys.stderr,
        level=level,
        serialize=True,
        filter=lambda record: record["extra"].get("json_output", False),
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / _LOG_FILE_NAME,
            level=level,
            format=format_record,
            rotation="24h",
            retention="7 days",
        )
