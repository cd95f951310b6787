"""Loguru logging configuration.

Records go to stderr as text, except those bound with ``json_output=True``
which are serialized as JSON lines. When a log directory is configured the
text stream is also written to a rotating file.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

LOG_FILE_NAME = "voter-registry.log"
_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"


def _is_json(record: dict[str, Any]) -> bool:
    return bool(record["extra"].get("json_output", False))


def _is_text(record: dict[str, Any]) -> bool:
    return not _is_json(record)


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace all Loguru sinks with the application's sinks.

    Safe to call more than once; the CLI callback and the API lifespan both
    call it.

    Args:
        log_level: Minimum level to emit (case-insensitive).
        log_dir: Optional directory for ``voter-registry.log``, rotated every
            24 hours and kept for 7 days.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT, filter=_is_text)
    logger.add(sys.stderr, level=level, serialize=True, filter=_is_json)

    if not log_dir:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path / LOG_FILE_NAME,
        level=level,
        format=_LOG_FORMAT,
        filter=_is_text,
        rotation="24h",
        retention="7 days",
    )
