"""
Statement execution.

The executor runs a statement action and its continuations, in chain
order, on one execution handle: a pooled connection (autocommit) or an
open Transaction. Each statement gets its own cursor, closed on every exit
path. Database errors are wrapped once with the phase that failed and are
never retried.
"""

import logging
from typing import Any, Callable, Dict, List, Protocol, Union

import psycopg
from psycopg import postgres

from ..constants import NULL_MARKER
from ..database.utils import classify_database_error
from ..errors import BadDataError, DeadlineExceeded, OperationError, PrepareError
from ..models import FETCH_COLUMNS, RowInsert, RowMutation, RowQuery, Statement
from .deadline import Deadline

logger = logging.getLogger(__name__)

Row = Dict[str, str]
ExecutionResult = Union[str, List[Row], List[Any], Dict[str, str], Dict[str, int]]


class ExecutionHandle(Protocol):
    """Anything statements can run on: a connection or a Transaction."""

    def cursor(self) -> psycopg.Cursor:
        ...


def row_count_message(count: int) -> str:
    """Format a row count: exactly one is "row", zero and several are "rows"."""
    return f"{count} row" if count == 1 else f"{count} rows"


class QueryExecutor:
    """Runs statement actions and shapes their results."""

    def __init__(self):
        self._runners: Dict[type, Callable[[psycopg.Cursor, Statement, Deadline], Any]] = {
            RowQuery: self._query_rows,
            RowInsert: self._insert_rows,
            RowMutation: self._affected_rows,
        }

    def execute(self, handle: ExecutionHandle, action: Statement, deadline: Deadline) -> ExecutionResult:
        """
        Execute ``action`` and every continuation after it.

        Args:
            handle: Connection or transaction to run on
            action: Statement action, possibly with continuations
            deadline: Deadline of the request

        Returns:
            The statement result, or the list of results in chain order
            when the action has a continuation

        Raises:
            OperationError: If any statement in the chain fails; later
                statements are not run
        """
        results = [self._run(handle, statement, deadline) for statement in action.chain()]
        if action.next is None:
            return results[0]
        return results

    def _run(self, handle: ExecutionHandle, statement: Statement, deadline: Deadline) -> Any:
        runner = self._runners.get(type(statement))
        if runner is None:
            raise BadDataError(f"Error: `{statement.name}` cannot run as a statement")

        deadline.check("Query has failed")
        logger.debug(f"Executing {statement.name} statement")

        try:
            cursor = handle.cursor()
        except psycopg.Error as e:
            raise PrepareError(f"Failed to prepare query: {e}") from e

        with cursor:
            try:
                # An empty parameter list must not trigger placeholder parsing
                cursor.execute(statement.query, statement.params or None, prepare=True)
            except psycopg.Error as e:
                raise _wrap(e, "Query has failed", deadline) from e

            return runner(cursor, statement, deadline)

    def _query_rows(
        self, cursor: psycopg.Cursor, statement: RowQuery, deadline: Deadline
    ) -> Union[List[Row], Dict[str, str]]:
        if statement.fetch == FETCH_COLUMNS:
            return _column_types(cursor, deadline)

        if cursor.description is None:
            return []

        try:
            columns = [column.name for column in cursor.description]
        except psycopg.Error as e:
            raise _wrap(e, "Failed to get columns", deadline) from e

        try:
            rows = cursor.fetchall()
        except psycopg.Error as e:
            raise _wrap(e, "Failed to scan rows", deadline) from e

        return [
            {column: _as_text(value) for column, value in zip(columns, row)}
            for row in rows
        ]

    def _insert_rows(self, cursor: psycopg.Cursor, statement: Statement, deadline: Deadline) -> str:
        last_insert_id = _last_insert_id(cursor, deadline)
        affected = _row_count(cursor)
        return f"{row_count_message(affected)} inserted, last inserted ID: {last_insert_id}"

    def _affected_rows(self, cursor: psycopg.Cursor, statement: Statement, deadline: Deadline) -> str:
        affected = _row_count(cursor)
        return f"{row_count_message(affected)} affected"


def _column_types(cursor: psycopg.Cursor, deadline: Deadline) -> Dict[str, str]:
    """Map each result column to its database type name, e.g. ``INT4`` or ``_TEXT``."""
    if cursor.description is None:
        return {}

    try:
        return {column.name: _type_name(column.type_code) for column in cursor.description}
    except psycopg.Error as e:
        raise _wrap(e, "Failed to get columns", deadline) from e


def _type_name(oid: int) -> str:
    info = postgres.types.get(oid)
    if info is None:
        return str(oid)
    # Array types share the TypeInfo of their element type
    if oid == info.array_oid:
        return f"_{info.name.upper()}"
    return info.name.upper()


def _last_insert_id(cursor: psycopg.Cursor, deadline: Deadline) -> Any:
    """First column of the last returned row, else the cursor's lastrowid, else 0."""
    if cursor.description is not None:
        try:
            rows = cursor.fetchall()
        except psycopg.Error as e:
            raise _wrap(e, "Failed to get last insert ID", deadline) from e
        if rows and len(rows[-1]):
            return _as_text(rows[-1][0])

    if cursor.lastrowid is not None:
        return cursor.lastrowid
    return 0


def _row_count(cursor: psycopg.Cursor) -> int:
    if cursor.rowcount < 0:
        raise OperationError("Failed to get affected rows: row count not available")
    return cursor.rowcount


def _as_text(value: Any) -> str:
    if value is None:
        return NULL_MARKER
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _wrap(error: psycopg.Error, phase: str, deadline: Deadline) -> OperationError:
    """Wrap a driver error with the phase that failed."""
    kind = classify_database_error(error)
    if kind == "prepare":
        return PrepareError(f"Failed to prepare query: {error}")
    if kind == "canceled" and deadline.expired:
        return DeadlineExceeded(f"{phase}: {error}")
    return OperationError(f"{phase}: {error}")
