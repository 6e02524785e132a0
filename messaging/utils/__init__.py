"""Utilities package."""

from .logger import get_app_logger, setup_logger, init_app_logger
from .timeutil import utcnow, format_cursor, parse_cursor

__all__ = [
    "get_app_logger",
    "setup_logger",
    "init_app_logger",
    "utcnow",
    "format_cursor",
    "parse_cursor",
]
