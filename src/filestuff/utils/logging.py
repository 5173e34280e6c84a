"""Logging infrastructure with load-context tracking.

This module provides the logging setup for filestuff: a context variable
holding the root of the load in progress, a filter that stamps it on every
record, and a helper that attaches console/file handlers to the package
logger. Library modules only ever call ``logging.getLogger(__name__)``;
handlers are the application's choice.
"""

import contextvars
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final, override

# Root of the top-level load in progress for the current context
# Each thread and asyncio task sees its own value
load_root_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "load_root",
    default=None,
)

PACKAGE_LOGGER_NAME: Final[str] = "filestuff"

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(load_root)s] - %(message)s"


class LoadContextFilter(logging.Filter):
    """Logging filter that adds the current load root to log records.

    Records emitted outside of a load get ``"-"``.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Add the load root to the log record.

        Args:
            record: Log record to enhance

        Returns:
            True to allow the record to be logged
        """
        load_root = load_root_var.get()
        record.load_root = load_root if load_root is not None else "-"
        return True


def configure_logging(
    *,
    log_level: str = "INFO",
    enable_console: bool = True,
    log_file: Path | None = None,
    log_format: str = DEFAULT_LOG_FORMAT,
) -> logging.Logger:
    """Attach handlers to the ``filestuff`` logger.

    Replaces handlers previously installed by this function so that calling
    it twice does not duplicate output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Enable a stderr handler
        log_file: Optional file to append log records to
        log_format: Format string; may use ``%(load_root)s``

    Returns:
        The configured package logger

    Example:
        Debug output of a deep load carries the load root::

            configure_logging(log_level="DEBUG")
            load("/tmp", "deep")
            # ... - filestuff.core.builder - DEBUG - [/tmp] - Enumerating directory ...
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    level = getattr(logging, log_level.upper(), logging.INFO)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()

    context_filter = LoadContextFilter()
    formatter = logging.Formatter(log_format)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(context_filter)
        package_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def get_load_root() -> str | None:
    """Get the root of the load in progress, or None outside of a load."""
    return load_root_var.get()


@contextmanager
def load_context(root: Path | str) -> Iterator[None]:
    """Mark ``root`` as the load in progress for the enclosed block.

    Nested uses keep the outermost root, so nested loads log under the
    root the caller asked for.

    Args:
        root: Root location of the load

    Example:
        Records emitted inside the block name the root::

            with load_context(Path("/home")):
                logger.info("Loading")  # record.load_root == "/home"
    """
    if load_root_var.get() is not None:
        yield
        return

    token = load_root_var.set(str(root))
    try:
        yield
    finally:
        load_root_var.reset(token)
