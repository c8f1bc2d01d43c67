"""
CLI utilities module.

This module provides the JSON-lines transport used by the command line
runner and helpers for reading request files.
"""

import json
import sys
import threading
from typing import Any, IO, Iterator, Optional, Tuple, Union

from ..transport import ErrorKind


class JsonLinesTransport:
    """Writes one JSON object per response to a text stream."""

    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream or sys.stdout
        self.results = 0
        self.errors = 0
        self.config_ok: Optional[bool] = None
        self._lock = threading.Lock()

    def send_result(self, request_id: Any, result: Any) -> None:
        with self._lock:
            self.results += 1
            self._write({"id": request_id, "result": result})

    def send_error(self, request_id: Any, kind: ErrorKind, message: str) -> None:
        with self._lock:
            self.errors += 1
            self._write({"id": request_id, "error": {"kind": ErrorKind(kind).value, "message": message}})

    def send_config_ok(self) -> None:
        self.config_ok = True

    def send_config_error(self) -> None:
        self.config_ok = False

    def _write(self, record: dict) -> None:
        self.stream.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
        self.stream.flush()


def iter_requests(
    request: Optional[str] = None,
    request_file: Optional[str] = None,
) -> Iterator[Tuple[int, Union[Any, json.JSONDecodeError]]]:
    """
    Yield ``(request_id, data)`` pairs from a single request or a JSON-lines file.

    Blank lines are skipped; request ids are 1-based line numbers. A line
    that is not valid JSON yields the decode error in place of the data.

    Raises:
        FileNotFoundError, PermissionError, UnicodeDecodeError: If the file cannot be read
    """
    if request is not None:
        yield 1, _loads(request)
        return

    if request_file == "-":
        yield from _iter_lines(sys.stdin)
        return

    with open(request_file, "r", encoding="utf-8") as f:
        yield from _iter_lines(f)


def _iter_lines(stream: IO[str]) -> Iterator[Tuple[int, Any]]:
    for line_number, line in enumerate(stream, 1):
        if line.strip():
            yield line_number, _loads(line)


def _loads(text: str) -> Union[Any, json.JSONDecodeError]:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        return e
