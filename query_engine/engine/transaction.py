"""
Transaction coordination.

A top-level action can run inside one serializable transaction. The
Transaction guard rolls back whenever its block exits without a commit,
so failures, early returns and expired deadlines never leave a
transaction open on a pooled connection.
"""

import logging
from typing import Optional

import psycopg
from psycopg_pool import ConnectionPool

from ..database import get_db_connection
from ..errors import OperationError
from ..models import Statement
from .deadline import Deadline
from .executor import ExecutionResult, QueryExecutor

logger = logging.getLogger(__name__)


class Transaction:
    """
    An explicit transaction on an autocommit connection.

    Used as a context manager, it rolls back on exit unless committed.
    Rolling back after a commit does nothing, and a failed rollback is
    logged rather than raised so it cannot hide the error that caused it.
    """

    BEGIN = "BEGIN ISOLATION LEVEL SERIALIZABLE"

    def __init__(self, connection: psycopg.Connection):
        self.connection = connection
        self._finished = True

    def begin(self) -> None:
        self.connection.execute(self.BEGIN)
        self._finished = False

    def cursor(self) -> psycopg.Cursor:
        return self.connection.cursor()

    def commit(self) -> None:
        self.connection.execute("COMMIT")
        self._finished = True

    def rollback(self) -> None:
        if self._finished:
            return
        self._finished = True
        try:
            self.connection.execute("ROLLBACK")
            logger.debug("Transaction rolled back")
        except psycopg.Error as e:
            logger.warning(f"Failed to roll back transaction: {str(e)}")

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.rollback()


class TransactionCoordinator:
    """Runs a top-level action and its continuations in one transaction."""

    def __init__(self, executor: Optional[QueryExecutor] = None):
        self.executor = executor or QueryExecutor()

    def run_in_transaction(
        self,
        pool: ConnectionPool,
        action: Statement,
        deadline: Deadline,
    ) -> ExecutionResult:
        """
        Execute ``action`` inside a serializable transaction.

        Args:
            pool: Pool to borrow the connection from
            action: Top-level statement action
            deadline: Deadline of the request

        Returns:
            The executor result, after a successful commit

        Raises:
            OperationError: If the transaction cannot start, the action
                fails, or the commit fails; the transaction is rolled back
        """
        with get_db_connection(pool, deadline.remaining()) as connection, deadline.watch(connection):
            return self.run_on_connection(connection, action, deadline)

    def run_on_connection(
        self,
        connection: psycopg.Connection,
        action: Statement,
        deadline: Deadline,
    ) -> ExecutionResult:
        """Execute ``action`` in a transaction on an already borrowed connection."""
        deadline.check("Failed to start transaction")

        with Transaction(connection) as transaction:
            try:
                transaction.begin()
            except psycopg.Error as e:
                raise OperationError(f"Failed to start transaction: {e}") from e

            try:
                result = self.executor.execute(transaction, action, deadline)
            except OperationError as e:
                raise e.rewrap("Failed to execute transaction") from e

            try:
                transaction.commit()
            except psycopg.Error as e:
                raise OperationError(f"Failed to commit transaction: {e}") from e

        return result
