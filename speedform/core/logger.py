"""Loguru sinks for the Speed & Form CLI.

Library modules log through `loguru.logger` directly and never add sinks;
the CLI entry point calls setup_logger once per invocation.
"""

import sys
from pathlib import Path

from loguru import logger

from speedform.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with the CLI sinks.

    Args:
        level: Minimum level; falls back to LOG_LEVEL
        log_file: File sink path; falls back to LOG_FILE, none when both are empty
        rotation: When the file sink rolls over
        retention: How long rolled files are kept
    """
    level = level or settings.log_level
    log_file = log_file or settings.log_file or None

    logger.remove()
    # stderr keeps rich tables on stdout clean
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    logger.debug(f"Logging at {level}" + (f", file sink {log_file}" if log_file else ""))
