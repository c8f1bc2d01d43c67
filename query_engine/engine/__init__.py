"""
Execution engine for database requests.

Decoding, deadline handling, statement execution, transaction
coordination and request dispatch.
"""

from .deadline import Deadline
from .decoder import decode_request
from .dispatcher import Dispatcher, NOT_CONNECTED
from .executor import ExecutionResult, QueryExecutor, row_count_message
from .transaction import Transaction, TransactionCoordinator

__all__ = [
    "Deadline",
    "decode_request",
    "Dispatcher",
    "NOT_CONNECTED",
    "ExecutionResult",
    "QueryExecutor",
    "row_count_message",
    "Transaction",
    "TransactionCoordinator",
]
