#!/usr/bin/env python3
"""
Database Models

This module contains data structures related to connection pool
configuration and pool statistics.
"""

from typing import NamedTuple


class ConnectionPoolConfig(NamedTuple):
    """
    Connection pool configuration settings.

    Zero for any limit means "leave the driver default in place".

    Attributes:
        dsn: Data source descriptor (libpq URL or key=value string)
        conn_max_lifetime: Maximum connection lifetime (minutes)
        max_open_conn: Maximum number of open connections
        max_idle_conn: Number of idle connections kept open
        max_idle_time_conn: Maximum idle time per connection (minutes)
    """

    dsn: str
    conn_max_lifetime: int = 0
    max_open_conn: int = 0
    max_idle_conn: int = 0
    max_idle_time_conn: int = 0


class PoolStatsSnapshot(NamedTuple):
    """
    Point-in-time occupancy and wait metrics of the connection pool.

    Attributes:
        max_open_connections: Upper bound of connections the pool may open
        open_connections: Connections currently open (in use and idle)
        in_use: Connections currently handed out to requests
        idle: Connections waiting in the pool
        wait_count: Number of requests that had to wait for a connection
        wait_duration: Total time spent waiting for connections (milliseconds)
        connections_lost: Connections found broken and discarded
        requests_errors: Connection requests that failed or timed out
    """

    max_open_connections: int
    open_connections: int
    in_use: int
    idle: int
    wait_count: int
    wait_duration: int
    connections_lost: int = 0
    requests_errors: int = 0
