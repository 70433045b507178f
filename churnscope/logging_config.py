"""
Logging configuration for churnscope.

Log records always go to stderr: stdout belongs to command output and is
temporarily redirected while the analysis engine runs.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level_for(verbose: bool, quiet: bool) -> int:
    # quiet wins when both flags are given
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route churnscope logging to a rich stderr console and, optionally, a file.

    Args:
        verbose: Log at DEBUG level and show source locations
        quiet: Log errors only
        log_file: File to append plain-text log lines to

    Returns:
        The "churnscope" package logger
    """
    level = _level_for(verbose, quiet)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_path=verbose,
    )
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger("churnscope")
    logger.setLevel(level)
    return logger
