"""Core utilities for the exercise log.

This module exports commonly used utilities for easy importing:
    from exercise_streaks.core import get_logger
"""

from exercise_streaks.core.logger import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)

__all__ = [
    "get_logger",
    "bind_contextvars",
    "clear_contextvars",
    "configure_logging",
]
