#!/usr/bin/env python3
"""
CLI package for the query engine.

This package provides command-line interface components including
argument parsing, the request runner, and the JSON-lines transport.
"""

from .parser import (
    create_argument_parser,
)

from .main import (
    main,
)

__all__ = [
    # Argument parsing
    "create_argument_parser",
    # Main application flow
    "main",
]
