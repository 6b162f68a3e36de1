import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FORMAT_WITH_CORRELATION = '%(asctime)s - %(name)s - %(levelname)s - [{correlation_id}] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _build_formatter(correlation_id: Optional[str] = None) -> logging.Formatter:
    if correlation_id:
        return logging.Formatter(
            LOG_FORMAT_WITH_CORRELATION.format(correlation_id=correlation_id),
            datefmt=DATE_FORMAT
        )
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Engine modules log under their own dotted names (``engine.split`` and so on),
    so configuring the ``engine`` component makes their records visible too.

    Args:
        component_name: Name of the component (e.g., 'cli', 'engine')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        correlation_id: Optional correlation ID to include in log format

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(correlation_id))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def set_correlation_id(logger: logging.Logger, correlation_id: Optional[str]) -> None:
    """
    Update logger handlers to include correlation ID in format.

    Passing None restores the plain format.

    Args:
        logger: Logger instance to update
        correlation_id: Correlation ID to include
    """
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setFormatter(_build_formatter(correlation_id))
