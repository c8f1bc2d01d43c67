"""
Request dispatch.

The dispatcher answers every request exactly once: with a result, a
bad-data error (the request could not be decoded or selects no single
action) or an operation error (anything that went wrong talking to the
database, including an unconfigured module and an expired deadline).
"""

import logging
import time
from typing import Any, Callable, Optional

from psycopg_pool import ConnectionPool

from ..constants import DEFAULT_PING_TIMEOUT, DEFAULT_TIMEOUT
from ..database import PoolManager, get_db_connection, get_pool_stats, ping_db_connection_pool
from ..errors import BadDataError, OperationError
from ..models import PoolStats, Request
from ..transport import ErrorKind, Transport
from ..utils import log_request_failure, log_request_success
from .deadline import Deadline
from .decoder import decode_request
from .executor import ExecutionResult, QueryExecutor
from .transaction import TransactionCoordinator

logger = logging.getLogger(__name__)

NOT_CONNECTED = "Error: database is not connected; please check the module configuration"


class Dispatcher:
    """Decodes requests, runs them and reports the outcome to the transport."""

    def __init__(
        self,
        pools: PoolManager,
        executor: Optional[QueryExecutor] = None,
        coordinator: Optional[TransactionCoordinator] = None,
        default_timeout: int = DEFAULT_TIMEOUT,
        ping: Callable[[ConnectionPool, float], bool] = ping_db_connection_pool,
    ):
        self.pools = pools
        self.executor = executor or QueryExecutor()
        self.coordinator = coordinator or TransactionCoordinator(self.executor)
        self.default_timeout = default_timeout
        self._ping = ping

    def handle(self, request_id: Any, data: Any, transport: Transport) -> None:
        """
        Handle one request and send exactly one response for it.

        Args:
            request_id: Identifier the host assigned to the request
            data: Decoded request mapping
            transport: Where the response goes
        """
        start_time = time.time()
        request: Optional[Request] = None

        try:
            pool = self._current_pool()
            request = decode_request(data, self.default_timeout)
            result = self.run(pool, request)

        except BadDataError as e:
            self._fail(transport, request_id, request, ErrorKind.BAD_DATA, str(e), start_time)
        except OperationError as e:
            self._fail(transport, request_id, request, ErrorKind.OPERATION, str(e), start_time)
        except Exception as e:
            logger.exception(f"Unexpected error while handling request {request_id}")
            self._fail(transport, request_id, request, ErrorKind.OPERATION, f"Error: {e}", start_time)

        else:
            transport.send_result(request_id, result)
            log_request_success(
                request_id=request_id,
                action=request.action.name,
                transaction=request.transaction,
                duration=time.time() - start_time,
                logger=logger,
            )

    def run(self, pool: ConnectionPool, request: Request) -> ExecutionResult:
        """
        Run a decoded request against ``pool``.

        Raises:
            OperationError: If the database is unreachable or the action fails
        """
        deadline = Deadline(request.timeout)

        if not self._ping(pool, min(DEFAULT_PING_TIMEOUT, deadline.remaining())):
            raise OperationError(NOT_CONNECTED)

        if isinstance(request.action, PoolStats):
            return get_pool_stats(pool)._asdict()

        if request.transaction:
            return self.coordinator.run_in_transaction(pool, request.action, deadline)

        with get_db_connection(pool, deadline.remaining()) as connection, deadline.watch(connection):
            return self.executor.execute(connection, request.action, deadline)

    def _current_pool(self) -> ConnectionPool:
        pool = self.pools.snapshot()
        if pool is None:
            raise OperationError(NOT_CONNECTED)
        return pool

    def _fail(
        self,
        transport: Transport,
        request_id: Any,
        request: Optional[Request],
        kind: ErrorKind,
        message: str,
        start_time: float,
    ) -> None:
        transport.send_error(request_id, kind, message)
        log_request_failure(
            request_id=request_id,
            action=request.action.name if request else None,
            error_kind=kind.value,
            error_message=message,
            duration=time.time() - start_time,
            logger=logger,
        )
