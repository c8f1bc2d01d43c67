"""
Module host.

QueryModule is what the transport drives: configuration messages rebuild
the connection pool, request messages are handed to a worker thread each,
so several requests can wait on the database at once, bounded by the
worker count and the pool size.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional

from .config import ConfigError
from .constants import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT
from .database import PoolManager, create_pool_config
from .engine import Dispatcher
from .transport import Transport

logger = logging.getLogger(__name__)


class QueryModule:
    """Entry points for configuration and request messages."""

    def __init__(
        self,
        transport: Transport,
        pools: Optional[PoolManager] = None,
        dispatcher: Optional[Dispatcher] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        default_timeout: int = DEFAULT_TIMEOUT,
    ):
        self.transport = transport
        self.pools = pools or PoolManager()
        self.dispatcher = dispatcher or Dispatcher(self.pools, default_timeout=default_timeout)
        self._workers = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="request")

    def on_config(self, data: Any) -> bool:
        """
        Apply a configuration message and acknowledge it.

        A rejected configuration leaves the previous pool in place and the
        module ready for another attempt.

        Returns:
            True if the configuration was applied
        """
        try:
            config = create_pool_config(data)
            self.pools.configure(config)
        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            self.transport.send_config_error()
            return False

        logger.info("Module configured")
        self.transport.send_config_ok()
        return True

    def on_request(self, request_id: Any, data: Any) -> Future:
        """Handle a request message on a worker thread."""
        future = self._workers.submit(self.dispatcher.handle, request_id, data, self.transport)
        future.add_done_callback(lambda f: _log_worker_failure(request_id, f))
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting requests and close the connection pool."""
        self._workers.shutdown(wait=wait)
        self.pools.close()
        logger.debug("Module shut down")

    def __enter__(self) -> "QueryModule":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()


def _log_worker_failure(request_id: Any, future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Failed to deliver response for request {request_id}: {error}")
