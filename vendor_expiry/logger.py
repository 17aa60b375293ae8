"""
Centralized Logging Utility

Every module gets its logger from get_logger(__name__). Handlers are attached
once, to the package's root logger, by configure_logging(); module loggers
propagate to it. Until configure_logging() is called, records simply
propagate to the root logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from vendor_expiry.config import LOG_FILENAME

PACKAGE_LOGGER_NAME = "vendor_expiry"


def default_log_path() -> Path:
    """
    Return the default log file path: log.txt next to the running program.

    The program is the script in sys.argv[0]; the current directory is used
    when there is none (e.g. an interactive session).
    """
    program = sys.argv[0] if sys.argv else ""
    if program and program != "-c":
        return Path(program).resolve().parent / LOG_FILENAME
    return Path.cwd() / LOG_FILENAME


# Global logger instance cache
_loggers = {}

# Log files that already have a handler on the package logger
_configured_paths = set()


def configure_logging(log_path: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Attach file and console handlers to the package logger.

    The file handler appends one line per event as "<timestamp>: <message>".
    Calling this again with the same path does not add duplicate handlers.

    Args:
        log_path: Path of the append-only log file (defaults to default_log_path())

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)

    resolved = Path(log_path or default_log_path()).resolve()
    if resolved in _configured_paths:
        return package_logger

    resolved.parent.mkdir(parents=True, exist_ok=True)

    # File handler (all levels)
    file_handler = logging.FileHandler(resolved, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    package_logger.addHandler(file_handler)

    # Console handler (INFO and above), added with the first file handler only
    if not _configured_paths:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        package_logger.addHandler(console_handler)

    _configured_paths.add(resolved)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger instance for the given name.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance

    Example:
        from vendor_expiry.logger import get_logger
        logger = get_logger(__name__)
        logger.info("Module initialized")
    """
    if name not in _loggers:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        _loggers[name] = logger

    return _loggers[name]
