"""
Error types raised while decoding and executing requests.

Every error carries a human-readable message that is sent back to the
caller unchanged; the class decides which error kind the caller sees.
"""


class QueryEngineError(Exception):
    """Base class for request errors."""
    pass


class BadDataError(QueryEngineError):
    """Raised when a request cannot be decoded or selects no single action."""
    pass


class OperationError(QueryEngineError):
    """Raised when the database operation itself fails."""

    def rewrap(self, prefix: str) -> "OperationError":
        """Return an error of the same class with ``prefix`` added to the message."""
        return type(self)(f"{prefix}: {self}")


class PrepareError(OperationError):
    """Raised when the server rejects a statement while preparing it."""
    pass


class DeadlineExceeded(OperationError):
    """Raised when a request runs past its deadline."""
    pass
