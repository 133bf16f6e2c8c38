"""Logging setup for podshelf.

Modules log through ``logging.getLogger(__name__)``; entry points call
``setup_logging`` once to attach handlers to the ``podshelf`` logger.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "podshelf"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    logger_name: str = ROOT_LOGGER_NAME,
    log_file: str | None = None,
    verbose: bool = False,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """
    Set up logging with file and optional console handlers.

    Args:
        logger_name: Name for the logger (default: "podshelf")
        log_file: Path to log file, or None to skip file logging
        verbose: If True, add a rich console handler at DEBUG level
        level: Base logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Avoid adding multiple handlers if already configured
    if logger.handlers:
        return logger

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger.setLevel(logging.DEBUG if verbose else level)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    if verbose:
        console_handler = RichHandler(show_path=False, markup=False)
        console_handler.setLevel(logging.DEBUG)
        logger.addHandler(console_handler)

    return logger
