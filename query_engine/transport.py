"""
Transport boundary.

The host delivers decoded configuration and request mappings and accepts
results and errors back. Framing, serialization and the host handshake
belong to the transport implementation, not to this package.
"""

from enum import Enum
from typing import Any, Protocol


class ErrorKind(str, Enum):
    """Error classes reported to the host."""

    BAD_DATA = "bad_data"
    OPERATION = "operation"


class Transport(Protocol):
    """Outbound calls the engine makes to its host."""

    def send_result(self, request_id: Any, result: Any) -> None:
        ...

    def send_error(self, request_id: Any, kind: ErrorKind, message: str) -> None:
        ...

    def send_config_ok(self) -> None:
        ...

    def send_config_error(self) -> None:
        ...
