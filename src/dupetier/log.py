"""Loguru setup shared by every command."""

import sys
from pathlib import Path

from loguru import logger
from tqdm import tqdm

CONSOLE_FORMAT = "<level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_logging(level: str = "INFO", log_file: Path | None = None, verbose: bool = False) -> None:
    """Route loguru to stderr through tqdm.write, plus an optional rotating file.

    Writing through tqdm keeps progress bars from being torn by log lines.
    """
    logger.remove()
    console_level = "DEBUG" if verbose else level.upper()
    logger.add(
        lambda msg: tqdm.write(msg, file=sys.stderr, end=""),
        level=console_level,
        format=CONSOLE_FORMAT,
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention=5,
            level="DEBUG",
            format=FILE_FORMAT,
            enqueue=True,
        )
        logger.debug("Logging to {}", log_file)
