"""
Logging configuration for session-guard.
All modules log through children of the "session_guard" logger.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union
ROOT_LOGGER = "session_guard"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
def setup_logging(
    level: str = "WARNING",
    format: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure logging for session-guard.
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: Custom log format string.
        log_file: Write to this file instead of stderr.
    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logger.setLevel(numeric_level)
    # Replace handlers so repeated calls don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.
    Args:
        name: Logger name (defaults to session_guard).
    Returns:
        Logger under the package namespace.
    """
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
