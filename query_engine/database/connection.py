"""
Database connection management module.

This module handles database connection pool creation, connection retrieval,
liveness checks, statistics, and connection pool cleanup.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from ..config import ConfigError
from ..constants import DEFAULT_PING_TIMEOUT, DEFAULT_POOL_CLOSE_TIMEOUT
from ..errors import DeadlineExceeded, OperationError
from ..models import ConnectionPoolConfig, PoolStatsSnapshot
from .config import pool_settings, validate_dsn
from .utils import register_text_loaders

logger = logging.getLogger(__name__)


def configure_connection(connection: psycopg.Connection) -> None:
    """Prepare a new pooled connection: every column is read back as raw text."""
    register_text_loaders(connection.adapters)


def create_db_connection_pool(config: ConnectionPoolConfig) -> ConnectionPool:
    """
    Create a database connection pool.

    Connections are opened in the background; an unreachable server is
    reported later by the liveness check, not here.

    Args:
        config: Connection pool configuration

    Returns:
        Open connection pool

    Raises:
        ConfigError: If the data source is malformed or the pool cannot be opened
    """
    validate_dsn(config.dsn)
    settings = pool_settings(config)

    try:
        logger.info(
            f"Creating database connection pool (min_size={settings['min_size']}, max_size={settings['max_size']})"
        )

        connection_pool = ConnectionPool(
            config.dsn,
            kwargs={"autocommit": True},
            configure=configure_connection,
            open=True,
            **settings,
        )

        logger.info("Database connection pool created successfully")
        return connection_pool

    except (psycopg.Error, ValueError) as e:
        logger.error(f"Failed to create database connection pool: {str(e)}")
        raise ConfigError(f"Failed to create connection pool: {e}") from e


@contextmanager
def get_db_connection(pool: ConnectionPool, timeout: float) -> Iterator[psycopg.Connection]:
    """
    Borrow a connection from the pool for the duration of the block.

    Args:
        pool: Database connection pool
        timeout: Seconds to wait for a free connection

    Yields:
        Database connection, returned to the pool on exit

    Raises:
        DeadlineExceeded: If no connection became free in time
        OperationError: If the pool cannot hand out connections
    """
    try:
        connection = pool.getconn(timeout=timeout)
    except PoolTimeout as e:
        raise DeadlineExceeded(f"Failed to get a database connection: {e}") from e
    except psycopg.Error as e:
        raise OperationError(f"Failed to get a database connection: {e}") from e

    logger.debug("Retrieved database connection from pool")
    try:
        yield connection
    finally:
        release_db_connection(pool, connection)


def release_db_connection(pool: ConnectionPool, connection: Optional[psycopg.Connection]) -> None:
    """
    Return a database connection to the pool.

    Args:
        pool: Database connection pool
        connection: Connection to return (ignored if None)
    """
    if pool is None or connection is None:
        return

    try:
        pool.putconn(connection)
        logger.debug("Returned database connection to pool")
    except Exception as e:
        logger.warning(f"Failed to return connection to pool: {str(e)}")


def ping_db_connection_pool(pool: Optional[ConnectionPool], timeout: float = DEFAULT_PING_TIMEOUT) -> bool:
    """
    Check that the pool can reach the database.

    Args:
        pool: Database connection pool
        timeout: Seconds to wait for a connection

    Returns:
        True if a round trip succeeded, False otherwise
    """
    if pool is None:
        return False

    try:
        with pool.connection(timeout=timeout) as connection:
            connection.execute("SELECT 1")
        return True
    except psycopg.Error as e:
        logger.warning(f"Database liveness check failed: {str(e)}")
        return False


def get_pool_stats(pool: ConnectionPool) -> PoolStatsSnapshot:
    """
    Take a snapshot of the pool occupancy and wait counters.

    Args:
        pool: Database connection pool

    Returns:
        PoolStatsSnapshot
    """
    stats = pool.get_stats()
    size = stats.get("pool_size", 0)
    available = stats.get("pool_available", 0)

    return PoolStatsSnapshot(
        max_open_connections=stats.get("pool_max", pool.max_size),
        open_connections=size,
        in_use=max(size - available, 0),
        idle=available,
        wait_count=stats.get("requests_queued", 0),
        wait_duration=stats.get("requests_wait_ms", 0),
        connections_lost=stats.get("connections_lost", 0),
        requests_errors=stats.get("requests_errors", 0),
    )


def close_db_connection_pool(pool: Optional[ConnectionPool]) -> None:
    """
    Close the database connection pool.

    Failures are logged and never raised.

    Args:
        pool: Database connection pool to close
    """
    if pool is None:
        logger.debug("Connection pool is None, nothing to close")
        return

    try:
        logger.info("Closing database connection pool")
        pool.close(timeout=DEFAULT_POOL_CLOSE_TIMEOUT)
        logger.info("Database connection pool closed successfully")

    except Exception as e:
        logger.error(f"Error closing database connection pool: {str(e)}")
