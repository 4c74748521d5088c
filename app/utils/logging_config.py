"""Loguru setup for the analytics API: console output plus an optional rotating file."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from app.config import LOG_FILE, LOG_LEVEL


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure loguru sinks for the API process.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
    """
    # Remove default logger to reconfigure
    logger.remove()

    log_level = log_level or LOG_LEVEL
    log_file = log_file or LOG_FILE

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<magenta>jobtracker</magenta> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        format=console_format,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "jobtracker | "
            "{name}:{function}:{line} | "
            "{extra} | "
            "{message}"
        )

        logger.add(
            log_file,
            format=file_format,
            level=log_level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            backtrace=True,
            diagnose=False,
        )
        logger.info(f"Logging configured - file: {log_file}, level: {log_level}")
    else:
        logger.info(f"Logging configured - console only, level: {log_level}")
