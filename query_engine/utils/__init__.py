"""
Utilities module for the query engine.

This module provides shared utility functions:
- Logging utilities for consistent logging setup
- Structured request events
"""

from .logging import setup_logging, log_request_success, log_request_failure

__all__ = [
    "setup_logging",
    "log_request_success",
    "log_request_failure",
]
