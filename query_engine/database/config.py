"""
Database configuration management module.

This module handles connection pool configuration creation, data source
validation, and translation of pool limits into psycopg_pool settings.
"""

import logging
from typing import Any, Dict, Mapping

import psycopg
from psycopg.conninfo import conninfo_to_dict
from pydantic import BaseModel, ValidationError

from ..config import ConfigError
from ..constants import DEFAULT_POOL_SIZE, DEFAULT_MAX_OVERFLOW
from ..models import ConnectionPoolConfig

logger = logging.getLogger(__name__)


class _PoolConfigPayload(BaseModel):
    """Wire shape of a pool configuration message."""

    dsn: str
    conn_max_lifetime: int = 0
    max_open_conn: int = 0
    max_idle_conn: int = 0
    max_idle_time_conn: int = 0

    model_config = {"extra": "ignore"}


def validate_dsn(dsn: str) -> None:
    """
    Validate that a data source descriptor can be parsed by the driver.

    Both libpq URLs (postgresql://...) and key=value strings are accepted.
    No connection is attempted.

    Args:
        dsn: Data source descriptor to validate

    Raises:
        ConfigError: If the descriptor is empty or malformed
    """
    if not dsn or not dsn.strip():
        raise ConfigError("Failed to parse data source: empty data source")

    try:
        conninfo_to_dict(dsn)
    except psycopg.Error as e:
        raise ConfigError(f"Failed to parse data source: {e}") from e


def create_pool_config(data: Mapping[str, Any]) -> ConnectionPoolConfig:
    """
    Create a connection pool configuration with validation.

    Args:
        data: Decoded configuration message

    Returns:
        ConnectionPoolConfig instance

    Raises:
        ConfigError: If fields are missing, of the wrong type, negative,
            or the data source is malformed
    """
    if not isinstance(data, Mapping):
        raise ConfigError("Failed to unpack configuration: expected a mapping")

    try:
        payload = _PoolConfigPayload.model_validate(dict(data))
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigError(f"Failed to unpack configuration: invalid {fields}") from e

    for name in ("conn_max_lifetime", "max_open_conn", "max_idle_conn", "max_idle_time_conn"):
        value = getattr(payload, name)
        if value < 0:
            raise ConfigError(f"{name} must be non-negative, got {value}")

    validate_dsn(payload.dsn)

    return ConnectionPoolConfig(
        dsn=payload.dsn,
        conn_max_lifetime=payload.conn_max_lifetime,
        max_open_conn=payload.max_open_conn,
        max_idle_conn=payload.max_idle_conn,
        max_idle_time_conn=payload.max_idle_time_conn,
    )


def pool_settings(config: ConnectionPoolConfig) -> Dict[str, Any]:
    """
    Translate pool limits into psycopg_pool keyword arguments.

    Each limit is applied only when it is non-zero; a zero leaves the
    driver default in place.

    Args:
        config: Connection pool configuration

    Returns:
        Keyword arguments for ConnectionPool
    """
    max_size = config.max_open_conn or DEFAULT_POOL_SIZE + DEFAULT_MAX_OVERFLOW
    min_size = config.max_idle_conn or DEFAULT_POOL_SIZE

    settings: Dict[str, Any] = {
        "min_size": min(min_size, max_size),
        "max_size": max_size,
    }

    if config.conn_max_lifetime:
        settings["max_lifetime"] = float(config.conn_max_lifetime * 60)

    if config.max_idle_time_conn:
        settings["max_idle"] = float(config.max_idle_time_conn * 60)

    return settings
