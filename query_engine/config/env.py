"""
Process-wide runtime settings.

Env is the frozen, validated view of the configuration the CLI runs with:
the connection pool limits and the request handling limits.
"""

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Mapping, Optional

from ..constants import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT
from ..models import ConnectionPoolConfig
from .loader import ConfigLoader
from .schema import ConfigSchema

logger = logging.getLogger(__name__)

_SENSITIVE = ("DATABASE_URL",)


class ConfigError(Exception):
    """Raised when environment or pool configuration is rejected."""
    pass


@dataclass(frozen=True)
class Env:
    """
    Validated runtime settings, named after their environment variables.

    Pool limits are zero when unset; zero keeps the driver default.
    """

    DATABASE_URL: str
    DB_CONN_MAX_LIFETIME: int = 0
    DB_MAX_OPEN_CONN: int = 0
    DB_MAX_IDLE_CONN: int = 0
    DB_MAX_IDLE_TIME_CONN: int = 0
    MAX_WORKERS: int = DEFAULT_MAX_WORKERS
    DEFAULT_TIMEOUT: int = DEFAULT_TIMEOUT

    @staticmethod
    def load(
        cli_args: Optional[Namespace] = None,
        cli_overrides: Optional[Mapping[str, str]] = None,
    ) -> "Env":
        """
        Read .env.local, the environment, parsed CLI arguments and ``cli_overrides``.

        Raises:
            ConfigError: If DATABASE_URL is missing or a limit is invalid
        """
        try:
            config = ConfigLoader.load(schema=ConfigSchema, cli_args=cli_args, cli_overrides=cli_overrides)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        env = Env.from_schema(config)
        logger.debug("Environment configuration loaded successfully")
        return env

    @staticmethod
    def from_schema(config: ConfigSchema) -> "Env":
        """Build an Env from a validated schema."""
        return Env(
            DATABASE_URL=config.database_url,
            DB_CONN_MAX_LIFETIME=config.conn_max_lifetime,
            DB_MAX_OPEN_CONN=config.max_open_conn,
            DB_MAX_IDLE_CONN=config.max_idle_conn,
            DB_MAX_IDLE_TIME_CONN=config.max_idle_time_conn,
            MAX_WORKERS=config.max_workers,
            DEFAULT_TIMEOUT=config.default_timeout,
        )

    def pool_config(self) -> ConnectionPoolConfig:
        """Connection pool settings carried by this environment."""
        return ConnectionPoolConfig(
            dsn=self.DATABASE_URL,
            conn_max_lifetime=self.DB_CONN_MAX_LIFETIME,
            max_open_conn=self.DB_MAX_OPEN_CONN,
            max_idle_conn=self.DB_MAX_IDLE_CONN,
            max_idle_time_conn=self.DB_MAX_IDLE_TIME_CONN,
        )

    def mask(self) -> dict:
        """Settings safe to log: credentials-bearing values are replaced by ``***``."""
        masked = asdict(self)
        for key in _SENSITIVE:
            masked[key] = "***" if masked[key] else None
        return masked
