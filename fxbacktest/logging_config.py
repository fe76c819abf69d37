import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def setup_logging(
    level: str = "INFO", sink: Any = sys.stderr, log_file: str | Path | None = None
) -> None:
    """Configure logging with loguru.

    Applications call this once; library code only logs.
    """
    logger.remove()
    logger.add(sink, format=CONSOLE_FORMAT, level=level, colorize=sink in (sys.stderr, sys.stdout))

    if log_file is not None:
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=level,
            rotation="10 MB",
            retention="7 days",
            colorize=False,
        )
