"""
Logging utilities for the query engine.

This module provides centralized logging configuration and structured
request events to ensure consistent logging behavior across the application.
"""

import json
import logging
import time
from typing import Any, Optional


def setup_logging(verbose: bool = False):
    """Setup logging configuration with appropriate level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    format_string = "%(asctime)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=level, format=format_string, datefmt="%Y-%m-%d %H:%M:%S")

    # Set specific logger levels
    logging.getLogger("psycopg").setLevel(logging.WARNING)  # Reduce driver noise
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)  # Reduce pool worker noise


def log_request_success(
    request_id: Any,
    action: Optional[str],
    transaction: bool,
    duration: float,
    timestamp: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log structured information for a request that produced a result.

    Args:
        request_id: Identifier the host assigned to the request
        action: Name of the top-level action
        transaction: Whether the action ran in a transaction
        duration: Time taken to handle the request (seconds)
        timestamp: Event timestamp (defaults to current time)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if timestamp is None:
        timestamp = time.time()

    record = {
        "event_type": "request",
        "timestamp": timestamp,
        "request_id": request_id,
        "action": action,
        "transaction": transaction,
        "duration_seconds": round(duration, 3),
        "success": True,
    }

    logger.info(f"REQUEST: {json.dumps(record, ensure_ascii=False, default=str)}")


def log_request_failure(
    request_id: Any,
    action: Optional[str],
    error_kind: str,
    error_message: str,
    duration: float,
    timestamp: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log structured information for a request answered with an error.

    Args:
        request_id: Identifier the host assigned to the request
        action: Name of the top-level action (None if decoding failed)
        error_kind: Error class reported to the host
        error_message: Message reported to the host
        duration: Time taken before failure (seconds)
        timestamp: Failure timestamp (defaults to current time)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if timestamp is None:
        timestamp = time.time()

    record = {
        "event_type": "request_failure",
        "timestamp": timestamp,
        "request_id": request_id,
        "action": action,
        "error_kind": error_kind,
        "error_message": error_message,
        "duration_seconds": round(duration, 3),
        "success": False,
    }

    logger.warning(f"REQUEST_FAILURE: {json.dumps(record, ensure_ascii=False, default=str)}")
