#!/usr/bin/env python3
"""
Database package for the query engine.

This package provides connection pool configuration, creation and
replacement, liveness checks, statistics, and database utilities.
"""

from .connection import (
    create_db_connection_pool,
    get_db_connection,
    release_db_connection,
    ping_db_connection_pool,
    get_pool_stats,
    close_db_connection_pool,
)

from .config import (
    validate_dsn,
    create_pool_config,
    pool_settings,
)

from .provider import PoolManager

from .utils import (
    classify_database_error,
    register_text_loaders,
)

__all__ = [
    # Connection management
    "create_db_connection_pool",
    "get_db_connection",
    "release_db_connection",
    "ping_db_connection_pool",
    "get_pool_stats",
    "close_db_connection_pool",
    "PoolManager",
    # Configuration
    "validate_dsn",
    "create_pool_config",
    "pool_settings",
    # Utilities
    "classify_database_error",
    "register_text_loaders",
]
