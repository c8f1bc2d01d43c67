#!/usr/bin/env python3
"""
Action Models

This module contains the immutable descriptors of what a request asks the
engine to run. A statement action may carry a continuation (``next``)
which is itself a statement action, forming a chain that is executed in
order on the same connection or transaction.
"""

from dataclasses import dataclass
from typing import ClassVar, Iterator, Optional, Tuple, Union

from ..constants import DEFAULT_TIMEOUT

# Scalar bind parameter accepted by every statement action
Param = Union[None, bool, int, float, str, bytes]

# Fetch modes of a row query
FETCH_ROWS = "rows"
FETCH_COLUMNS = "columns"
FETCH_MODES = (FETCH_ROWS, FETCH_COLUMNS)


@dataclass(frozen=True)
class Statement:
    """
    Base of the statement actions.

    Attributes:
        query: SQL text, never empty
        params: Ordered bind parameters
        next: Optional continuation executed after this statement
    """

    query: str
    params: Tuple[Param, ...] = ()
    next: Optional["Statement"] = None

    name: ClassVar[str] = ""

    def chain(self) -> Iterator["Statement"]:
        """Yield this statement followed by every continuation, in order."""
        current: Optional[Statement] = self
        while current is not None:
            yield current
            current = current.next


@dataclass(frozen=True)
class RowQuery(Statement):
    """
    Read statement.

    With the default ``rows`` fetch the result is a list of row mappings;
    with ``columns`` it is a mapping of column name to database type name.
    """

    fetch: str = FETCH_ROWS

    name = "query_rows"


class RowInsert(Statement):
    """Insert statement; the result reports the count and last inserted ID."""

    name = "insert_rows"


class RowMutation(Statement):
    """Write statement; the result reports the affected row count."""

    name = "affected_rows"


@dataclass(frozen=True)
class PoolStats:
    """Connection pool statistics; only valid as a top-level action."""

    name: ClassVar[str] = "get_db_stats"


Action = Union[RowQuery, RowInsert, RowMutation, PoolStats]

STATEMENT_TYPES = (RowQuery, RowInsert, RowMutation)
ACTION_NAMES = tuple(t.name for t in STATEMENT_TYPES) + (PoolStats.name,)


@dataclass(frozen=True)
class Request:
    """
    A decoded request.

    Attributes:
        action: The single action to run
        transaction: Run the action and its continuations in one transaction
        timeout: Deadline for the whole request (seconds)
    """

    action: Action
    transaction: bool = False
    timeout: int = DEFAULT_TIMEOUT
