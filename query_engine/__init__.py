#!/usr/bin/env python3
"""
Query Engine Package

Runs request-described database operations (row queries, inserts,
row-count mutations and pool statistics) against a pooled PostgreSQL
connection, optionally inside a serializable transaction and with
chained follow-up statements.

This package provides both a module host driven by a transport and a
command-line runner.
"""

__version__ = "1.0.0"
__author__ = "Query Engine"
__description__ = (
    "Execute structured database requests against a pooled PostgreSQL connection"
)
__license__ = "MIT"

# Import models for public API
from .models import (
    ConnectionPoolConfig,
    PoolStats,
    PoolStatsSnapshot,
    Request,
    RowInsert,
    RowMutation,
    RowQuery,
)

# Import constants for public API
from .constants import (
    EXIT_SUCCESS,
    EXIT_INPUT_ERROR,
    EXIT_CONFIG_ERROR,
    EXIT_REQUEST_FAILURES,
    EXIT_INTERRUPTED,
    EXIT_UNEXPECTED_ERROR,
    DEFAULT_POOL_SIZE,
    DEFAULT_MAX_OVERFLOW,
    DEFAULT_TIMEOUT,
)

# Import errors for public API
from .errors import (
    QueryEngineError,
    BadDataError,
    OperationError,
    PrepareError,
    DeadlineExceeded,
)
from .config import ConfigError

# Import engine and database functions for public API
from .database import (
    PoolManager,
    create_pool_config,
)
from .engine import (
    Deadline,
    Dispatcher,
    QueryExecutor,
    TransactionCoordinator,
    decode_request,
)
from .transport import ErrorKind, Transport
from .module import QueryModule

# Import CLI functionality for public API
from .cli import (
    main,
    create_argument_parser,
)

# Import utilities for public API
from .utils import setup_logging

# Public API exports
__all__ = [
    # Package metadata
    "__version__",
    "__author__",
    "__description__",
    # Data models
    "ConnectionPoolConfig",
    "PoolStats",
    "PoolStatsSnapshot",
    "Request",
    "RowInsert",
    "RowMutation",
    "RowQuery",
    # Constants
    "EXIT_SUCCESS",
    "EXIT_INPUT_ERROR",
    "EXIT_CONFIG_ERROR",
    "EXIT_REQUEST_FAILURES",
    "EXIT_INTERRUPTED",
    "EXIT_UNEXPECTED_ERROR",
    "DEFAULT_POOL_SIZE",
    "DEFAULT_MAX_OVERFLOW",
    "DEFAULT_TIMEOUT",
    # Errors
    "QueryEngineError",
    "BadDataError",
    "OperationError",
    "PrepareError",
    "DeadlineExceeded",
    "ConfigError",
    # Engine
    "PoolManager",
    "create_pool_config",
    "Deadline",
    "Dispatcher",
    "QueryExecutor",
    "TransactionCoordinator",
    "decode_request",
    "ErrorKind",
    "Transport",
    "QueryModule",
    # CLI functions
    "main",
    "create_argument_parser",
    # Utilities
    "setup_logging",
]
