"""Structured logging configuration."""

import logging
import sys
from typing import Any, Union

# Configure logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUERY_PREFIX_LENGTH = 30


def setup_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Setup a logger with consistent formatting.
    
    Args:
        name: Logger name (typically __name__)
        level: Logging level (number or name such as "DEBUG")
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Avoid duplicate handlers
    if logger.handlers:
        return logger
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    
    logger.addHandler(handler)
    
    return logger


def query_prefix(query: Any) -> str:
    """Short, log-safe prefix of a search query."""
    if not isinstance(query, str):
        return repr(query)
    if len(query) > QUERY_PREFIX_LENGTH:
        return f"{query[:QUERY_PREFIX_LENGTH]}..."
    return query


def log_search_event(logger: logging.Logger, query: Any, event: str, **kwargs: Any) -> None:
    """
    Log a structured search event.
    
    Args:
        logger: Logger instance
        query: Search query (only a short prefix is logged)
        event: Event description
        **kwargs: Additional context
    """
    context = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.info(f"[SEARCH:'{query_prefix(query)}'] {event} {context}".strip())
