"""
Database utilities module.

This module provides utility functions for database operations including
error classification and raw-text row loading.
"""

import psycopg
from psycopg import errors, postgres
from psycopg.adapt import AdaptersMap
from psycopg.types.string import TextLoader

PREPARE_SQLSTATE_CLASS = "42"
BYTEA = "bytea"


def classify_database_error(exception: Exception) -> str:
    """
    Classify database errors by the phase they point at.

    Args:
        exception: Database exception to classify

    Returns:
        Error type: "prepare", "canceled", "connection" or "execution"
    """
    # Class 42: raised while the server parses and plans a statement.
    # psycopg maps these to ProgrammingError, so match on the SQLSTATE.
    sqlstate = getattr(exception, "sqlstate", None) or ""
    if sqlstate.startswith(PREPARE_SQLSTATE_CLASS):
        return "prepare"

    if isinstance(exception, errors.QueryCanceled):
        return "canceled"

    if isinstance(exception, (psycopg.OperationalError, errors.ConnectionException)):
        return "connection"

    return "execution"


def register_text_loaders(adapters: AdaptersMap) -> None:
    """
    Load every builtin type, and arrays of them, as raw text.

    bytea keeps the driver loader so values arrive as the stored bytes
    rather than their hex escape; bytea arrays stay raw text. Types
    without a registered loader already fall back to text.

    Args:
        adapters: Adapters map of a connection or cursor
    """
    for info in postgres.types:
        if info.name != BYTEA:
            adapters.register_loader(info.oid, TextLoader)
        if info.array_oid:
            adapters.register_loader(info.array_oid, TextLoader)
