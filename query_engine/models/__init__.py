#!/usr/bin/env python3
"""
Data Models Module

This module contains all data structures and type definitions used
throughout the query engine.
"""

from .actions import (
    Action,
    Param,
    PoolStats,
    Request,
    RowInsert,
    RowMutation,
    RowQuery,
    Statement,
    ACTION_NAMES,
    STATEMENT_TYPES,
    FETCH_ROWS,
    FETCH_COLUMNS,
    FETCH_MODES,
)
from .database import ConnectionPoolConfig, PoolStatsSnapshot

__all__ = [
    "Action",
    "Param",
    "PoolStats",
    "Request",
    "RowInsert",
    "RowMutation",
    "RowQuery",
    "Statement",
    "ACTION_NAMES",
    "STATEMENT_TYPES",
    "FETCH_ROWS",
    "FETCH_COLUMNS",
    "FETCH_MODES",
    "ConnectionPoolConfig",
    "PoolStatsSnapshot",
]
