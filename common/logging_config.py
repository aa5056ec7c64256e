import contextvars
import logging
import os
import sys
from typing import Optional


_request_id: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RequestIdFilter(logging.Filter):
    """Stamp log records with the request id of the current context."""

    def __init__(self, default: Optional[str] = None):
        super().__init__()
        self.default = default

    def filter(self, record: logging.LogRecord) -> bool:
        """Attach request_id to the record; never drops a record."""
        request_id = get_request_id()
        if request_id == "-" and self.default:
            request_id = self.default
        record.request_id = request_id
        return True


def set_request_id(request_id: str) -> contextvars.Token:
    """
    Bind a request id to the current context.

    Args:
        request_id: Identifier to stamp on subsequent log records

    Returns:
        Token that can be passed to reset_request_id
    """
    return _request_id.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    """Restore the request id that was active before set_request_id."""
    _request_id.reset(token)


def get_request_id() -> str:
    """Return the request id bound to the current context, or '-'."""
    return _request_id.get()


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    request_id: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Args:
        component_name: Name of the component (e.g., 'dedupserver', 'chunkstore', 'cli')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        request_id: Optional fixed request id used when no request is active

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RequestIdFilter(request_id))

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
