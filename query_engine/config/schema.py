"""
Configuration schema definition using Pydantic.

This module defines the declarative configuration schema that serves as
the single source of truth for all configuration in the application.
"""

from typing import Any
from pydantic import BaseModel, Field, field_validator

from ..constants import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT, MAX_TIMEOUT


class ConfigSchema(BaseModel):
    """
    Declarative configuration schema.

    This is the single source of truth for all application configuration.
    Each field can be set via environment variables or CLI arguments.
    """

    # Database configuration
    database_url: str = Field(
        ...,
        description="Database connection URL or libpq key=value string",
        json_schema_extra={
            "env_var": "DATABASE_URL",
            "cli_arg": "db_url",
            "sensitive": True,
        }
    )

    conn_max_lifetime: int = Field(
        0,
        ge=0,
        description="Maximum connection lifetime in minutes (0 = driver default)",
        json_schema_extra={
            "env_var": "DB_CONN_MAX_LIFETIME",
            "cli_arg": "conn_max_lifetime",
        }
    )

    max_open_conn: int = Field(
        0,
        ge=0,
        description="Maximum open connections (0 = driver default)",
        json_schema_extra={
            "env_var": "DB_MAX_OPEN_CONN",
            "cli_arg": "max_open_conn",
        }
    )

    max_idle_conn: int = Field(
        0,
        ge=0,
        description="Idle connections kept open (0 = driver default)",
        json_schema_extra={
            "env_var": "DB_MAX_IDLE_CONN",
            "cli_arg": "max_idle_conn",
        }
    )

    max_idle_time_conn: int = Field(
        0,
        ge=0,
        description="Maximum idle time per connection in minutes (0 = disabled)",
        json_schema_extra={
            "env_var": "DB_MAX_IDLE_TIME_CONN",
            "cli_arg": "max_idle_time_conn",
        }
    )

    # Request handling configuration
    max_workers: int = Field(
        DEFAULT_MAX_WORKERS,
        gt=0,
        description="Maximum number of requests executed concurrently",
        json_schema_extra={
            "env_var": "MAX_WORKERS",
            "cli_arg": "max_workers",
        }
    )

    default_timeout: int = Field(
        DEFAULT_TIMEOUT,
        gt=0,
        le=MAX_TIMEOUT,
        description="Deadline in seconds for requests that carry no timeout",
        json_schema_extra={
            "env_var": "DEFAULT_TIMEOUT",
            "cli_arg": "default_timeout",
        }
    )

    @field_validator('database_url', mode='before')
    @classmethod
    def strip_url(cls, v: Any) -> Any:
        """Strip surrounding whitespace from the database URL."""
        if isinstance(v, str):
            return v.strip()
        return v

    model_config = {
        "validate_assignment": True,
        "extra": "forbid"
    }
