"""
Connection pool provider module.

This module owns the process-wide connection pool. Reconfiguration swaps
the pool reference under a lock; request handling takes a snapshot of the
reference under the same lock and uses it without holding the lock, so a
slow query never blocks reconfiguration.
"""

import logging
import threading
from typing import Callable, Optional

from psycopg_pool import ConnectionPool

from ..models import ConnectionPoolConfig
from .connection import close_db_connection_pool, create_db_connection_pool

logger = logging.getLogger(__name__)


class PoolManager:
    """Holds the active connection pool and replaces it on reconfiguration."""

    def __init__(
        self,
        pool_factory: Callable[[ConnectionPoolConfig], ConnectionPool] = create_db_connection_pool,
    ):
        self._pool_factory = pool_factory
        self._pool: Optional[ConnectionPool] = None
        self._config: Optional[ConnectionPoolConfig] = None
        self._lock = threading.Lock()

    @property
    def config(self) -> Optional[ConnectionPoolConfig]:
        """Configuration of the active pool, if any."""
        with self._lock:
            return self._config

    def configure(self, config: ConnectionPoolConfig) -> None:
        """
        Replace the active pool with one built from ``config``.

        The new pool is built before the previous one is closed, so a
        failed build leaves the previous pool serving requests. The
        previous pool is closed after the swap, and a failure to close it
        is only logged.

        Args:
            config: Connection pool configuration

        Raises:
            ConfigError: If the new pool cannot be created
        """
        new_pool = self._pool_factory(config)

        with self._lock:
            previous, self._pool = self._pool, new_pool
            self._config = config

        if previous is not None:
            logger.info("Replacing previous database connection pool")
            close_db_connection_pool(previous)

    def snapshot(self) -> Optional[ConnectionPool]:
        """Return the current pool, or None if the module is not configured."""
        with self._lock:
            return self._pool

    def close(self) -> None:
        """Close and forget the active pool."""
        with self._lock:
            previous, self._pool = self._pool, None
            self._config = None

        close_db_connection_pool(previous)
