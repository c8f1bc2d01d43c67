"""
Request decoding.

Turns a decoded request mapping into an immutable Request. All shape
checks happen here, once: exactly one action must be selected at the top
level and in every continuation, statement actions need a query text, and
pool statistics are only accepted at the top level. No database I/O
happens while decoding.
"""

from typing import Any, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, ValidationError

from ..constants import DEFAULT_TIMEOUT, MAX_TIMEOUT
from ..errors import BadDataError
from ..models import (
    Action,
    PoolStats,
    Request,
    Statement,
    ACTION_NAMES,
    RowQuery,
    STATEMENT_TYPES,
)

_STATEMENTS = {t.name: t for t in STATEMENT_TYPES}
_STATEMENT_NAMES = tuple(_STATEMENTS)


class _StatementPayload(BaseModel):
    query: str = ""
    params: Optional[List[Union[None, bool, int, float, str, bytes]]] = None
    fetch: Optional[Literal["rows", "columns"]] = None
    next: Optional["_ContinuationPayload"] = None

    model_config = {"extra": "ignore"}


class _ContinuationPayload(BaseModel):
    query_rows: Optional[_StatementPayload] = None
    insert_rows: Optional[_StatementPayload] = None
    affected_rows: Optional[_StatementPayload] = None

    model_config = {"extra": "ignore"}


class _RequestPayload(_ContinuationPayload):
    get_db_stats: Optional[bool] = None
    transaction: Optional[bool] = None
    timeout: Optional[int] = Field(None, ge=0, le=MAX_TIMEOUT)


_StatementPayload.model_rebuild()
_ContinuationPayload.model_rebuild()
_RequestPayload.model_rebuild()


def decode_request(data: Any, default_timeout: int = DEFAULT_TIMEOUT) -> Request:
    """
    Decode a request mapping.

    Args:
        data: Decoded request message
        default_timeout: Timeout used when the request carries 0 or none

    Returns:
        Request with exactly one action

    Raises:
        BadDataError: If the request is malformed or ambiguous
    """
    if not isinstance(data, Mapping):
        raise BadDataError("Error: failed to unpack request: expected a mapping")

    try:
        payload = _RequestPayload.model_validate(dict(data))
    except ValidationError as e:
        raise BadDataError(f"Error: failed to unpack request: {_describe(e)}") from e

    return Request(
        action=_select_action(payload, top_level=True),
        transaction=bool(payload.transaction),
        timeout=payload.timeout or default_timeout,
    )


def _select_action(payload: _ContinuationPayload, top_level: bool) -> Action:
    names = ACTION_NAMES if top_level else _STATEMENT_NAMES
    selected = [name for name in _STATEMENT_NAMES if getattr(payload, name) is not None]
    if top_level and payload.get_db_stats:
        selected.append(PoolStats.name)

    if not selected:
        raise BadDataError(f"Error: requires one of {_join(names)}")
    if len(selected) > 1:
        raise BadDataError(f"Error: requires one of {_join(names)}, not more than one")

    name = selected[0]
    if name == PoolStats.name:
        return PoolStats()
    return _statement(name, getattr(payload, name))


def _statement(name: str, body: _StatementPayload) -> Statement:
    if not body.query.strip():
        raise BadDataError(f"Error: `{name}` requires `query`")

    options = {}
    if body.fetch is not None:
        if name != RowQuery.name:
            raise BadDataError(f"Error: `fetch` is only supported by `{RowQuery.name}`")
        options["fetch"] = body.fetch

    continuation = None
    if body.next is not None:
        continuation = _select_action(body.next, top_level=False)

    # A null parameter list means no parameters
    params = tuple(body.params or ())
    return _STATEMENTS[name](query=body.query, params=params, next=continuation, **options)


def _join(names: Sequence[str]) -> str:
    quoted = [f"`{name}`" for name in names]
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


def _describe(error: ValidationError) -> str:
    details = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"]) or "request"
        details.append(f"{location}: {err['msg']}")
    return "; ".join(details)
