"""
Configuration management for the query engine.

This module provides centralized configuration handling with support for
environment variables, .env files, and CLI overrides, using a
schema-driven approach with Pydantic for validation.
"""

from .env import Env, ConfigError
from .schema import ConfigSchema
from .loader import ConfigLoader

__all__ = ["Env", "ConfigError", "ConfigSchema", "ConfigLoader"]
