#!/usr/bin/env python3
"""
Application Constants

This module contains all configuration constants and exit codes used
throughout the query engine.
"""

# Exit codes for different failure modes
EXIT_SUCCESS = 0
EXIT_INPUT_ERROR = 2
EXIT_CONFIG_ERROR = 3
EXIT_REQUEST_FAILURES = 4
EXIT_INTERRUPTED = 130  # Conventional exit code for Ctrl+C
EXIT_UNEXPECTED_ERROR = 10

# Database connection pool constants
DEFAULT_POOL_SIZE = 4  # Match default worker count
DEFAULT_MAX_OVERFLOW = 8  # Allow burst connections
DEFAULT_PING_TIMEOUT = 5  # seconds
DEFAULT_POOL_CLOSE_TIMEOUT = 5  # seconds

# Request handling constants
DEFAULT_TIMEOUT = 10  # seconds, used when a request carries 0 or no timeout
MAX_TIMEOUT = 24 * 60 * 60  # seconds, keeps timers and pool waits within platform limits
DEFAULT_MAX_WORKERS = 4

# Row values that are NULL in the database are reported as this marker
NULL_MARKER = "NULL"
