"""Structured logging module.

This module provides utilities for structured logging using structlog and logfire.
"""

from .setup import add_query_context, get_logger, setup_logging

__all__ = [
    "add_query_context",
    "get_logger",
    "setup_logging",
]
