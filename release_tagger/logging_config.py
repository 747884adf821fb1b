"""
Logging configuration for release-tagger.

Centralized logging setup to avoid circular imports and provide
consistent logging configuration across the application.
"""

import sys

from loguru import logger
from rich.console import Console

# Level used for the step-by-step trace enabled by --verbose
VERBOSE = "VERBOSE"
VERBOSE_NO = 15

LOG_FORMAT = '<green>{time:YYYY/MM/DD HH:mm:ss}</green> | {level.icon}  - <level>{message}</level>'


def register_verbose_level() -> None:
    """Register the custom VERBOSE level (between INFO=20 and DEBUG=10)."""
    try:
        logger.level(VERBOSE, no=VERBOSE_NO, color="<cyan>", icon=">>")
    except (TypeError, ValueError):
        # Level already exists, which is fine
        pass


register_verbose_level()


def setup_logging(log_level: str = 'INFO', console: Console = None) -> None:
    """
    Set up logging configuration with shared Rich console.

    Args:
        log_level: Logging level (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)
        console: Rich Console instance for coordinated output (optional)
    """
    register_verbose_level()

    logger.remove()

    if console:
        logger.add(
            lambda msg: console.print(msg, end='', markup=False, highlight=False, soft_wrap=True),
            level=log_level,
            format=LOG_FORMAT,
        )
    else:
        # Fallback to stderr for simple logging
        logger.add(
            sys.stderr,
            level=log_level,
            format=LOG_FORMAT,
            colorize=True,
        )
