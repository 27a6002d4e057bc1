"""
Logging configuration for MOLDPLAN

Module loggers come from ``get_logger(name)``, a loguru logger bound to the
component name. Importing the package installs no sinks; the application
entry point calls ``setup_logging`` (usually through
``Config.configure_logging``) once the configuration is known. Until then
loguru's own default stderr sink is in place.
"""

import sys
from pathlib import Path
from typing import List, Optional
from loguru import logger

from moldplan.constants import LOG_LEVEL_DEFAULT

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Records from unbound loggers still render extra[name]
logger.configure(extra={"name": "moldplan"})


def setup_logging(
    level: str = LOG_LEVEL_DEFAULT,
    log_file: Optional[str] = None,
    rotation: str = "100 MB",
    retention: str = "30 days",
    format_string: str = LOG_FORMAT,
) -> List[int]:
    """
    Replace all sinks with a console sink and an optional file sink

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to a rotating log file. Console only if None.
        rotation: When to rotate the log file (e.g., "100 MB", "1 week")
        retention: How long to keep rotated files

    Returns:
        Ids of the installed sinks
    """
    level = level.upper()
    logger.remove()

    handler_ids = [
        logger.add(sys.stderr, format=format_string, level=level, colorize=True, diagnose=False)
    ]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_file,
                format=format_string,
                level=level,
                rotation=rotation,
                retention=retention,
                compression="zip",
                diagnose=False,
            )
        )

    get_logger("logging").debug(f"Logging at {level}, file sink: {log_file or 'none'}")
    return handler_ids


def get_logger(name: str):
    """Logger bound to a component name, shown in the ``extra[name]`` field"""
    return logger.bind(name=name)
