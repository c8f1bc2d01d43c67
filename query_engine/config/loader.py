"""
Layered configuration loading.

Each configuration source yields values keyed by schema field name; the
layers are merged from lowest to highest priority and validated once
against ConfigSchema. The same schema metadata drives the CLI parser.
"""

import logging
import os
import typing
from argparse import ArgumentParser, Namespace
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from .schema import ConfigSchema

logger = logging.getLogger(__name__)

DOTENV_FILE = ".env.local"


class ConfigLoader:
    """Builds a validated ConfigSchema from dotenv, environment and CLI sources."""

    @staticmethod
    def load(
        schema: type[ConfigSchema] = ConfigSchema,
        cli_args: Optional[Namespace] = None,
        cli_overrides: Optional[Mapping[str, Any]] = None,
    ) -> ConfigSchema:
        """
        Merge every configuration source and validate the result.

        Priority, lowest first: schema defaults, the .env.local file,
        environment variables, parsed CLI arguments, then overrides keyed
        by environment variable name. The .env.local file never replaces
        variables already present in the environment.

        Args:
            schema: Configuration schema class
            cli_args: Parsed CLI arguments
            cli_overrides: Overrides keyed by environment variable name

        Returns:
            Validated configuration

        Raises:
            ValueError: If the merged values do not satisfy the schema
        """
        _load_from_dotenv_file()

        values: Dict[str, Any] = dict(_environment_values(schema))
        if cli_args is not None:
            values.update(_cli_values(schema, cli_args))
        if cli_overrides:
            values.update(_override_values(schema, cli_overrides))

        try:
            config = schema(**values)
        except ValidationError as e:
            raise ValueError(_format_errors(schema, e)) from e

        logger.debug("Configuration loaded and validated successfully")
        return config

    @staticmethod
    def generate_cli_parser(
        schema: type[ConfigSchema] = ConfigSchema,
        description: str = "Run database requests against a pooled connection",
    ) -> ArgumentParser:
        """
        Build the command line parser.

        Request source options are fixed; every schema field with a
        ``cli_arg`` becomes an option defaulting to None, so unset options
        never shadow lower-priority sources.

        Args:
            schema: Configuration schema class
            description: Parser description

        Returns:
            Configured ArgumentParser
        """
        parser = ArgumentParser(
            description=description,
            epilog="""
Examples:
  query-engine --request '{"query_rows": {"query": "SELECT * FROM users"}}'
  query-engine --request-file requests.jsonl --max-workers 8
  query-engine --request-file requests.jsonl --dry-run
            """,
        )

        source = parser.add_mutually_exclusive_group(required=True)
        source.add_argument("--request", help="A single JSON request object")
        source.add_argument(
            "--request-file",
            help="JSON-lines file with one request object per line ('-' for stdin)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Decode and print the requests without connecting to the database",
        )
        parser.add_argument("--verbose", action="store_true", help="Enable verbose logging (DEBUG level)")

        for field_name, field_info in schema.model_fields.items():
            extra = _schema_extra(field_info)
            cli_arg = extra.get("cli_arg")
            if cli_arg is None:
                continue

            option: Dict[str, Any] = {
                "default": None,
                "help": field_info.description or f"Override {extra.get('env_var', field_name.upper())}",
            }
            value_type = _scalar_type(field_info.annotation)
            if value_type in (int, float):
                option["type"] = value_type

            parser.add_argument(f"--{cli_arg.replace('_', '-')}", **option)

        return parser


def _schema_extra(field_info) -> Dict[str, Any]:
    """Return the json_schema_extra mapping of a field (empty if unset)."""
    if field_info is None or not field_info.json_schema_extra:
        return {}
    return field_info.json_schema_extra


def _fields_with(schema: type[ConfigSchema], key: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(field_name, metadata value)`` for fields that define ``key``."""
    for field_name, field_info in schema.model_fields.items():
        value = _schema_extra(field_info).get(key)
        if value:
            yield field_name, value


def _environment_values(schema: type[ConfigSchema]) -> Iterator[Tuple[str, str]]:
    # Blank variables count as unset
    for field_name, env_var in _fields_with(schema, "env_var"):
        value = os.getenv(env_var, "").strip()
        if value:
            yield field_name, value


def _cli_values(schema: type[ConfigSchema], cli_args: Namespace) -> Iterator[Tuple[str, Any]]:
    for field_name, cli_arg in _fields_with(schema, "cli_arg"):
        value = getattr(cli_args, cli_arg, None)
        if value is not None:
            yield field_name, _clean(value)


def _override_values(schema: type[ConfigSchema], overrides: Mapping[str, Any]) -> Iterator[Tuple[str, Any]]:
    for field_name, env_var in _fields_with(schema, "env_var"):
        value = overrides.get(env_var)
        if value is not None:
            yield field_name, _clean(value)


def _clean(value: Any) -> Any:
    """Strip strings; an explicitly empty string clears the field."""
    if isinstance(value, str):
        return value.strip() or None
    return value


def _scalar_type(annotation: Any) -> Any:
    """Unwrap Optional[X] to X."""
    if typing.get_origin(annotation) is typing.Union:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _format_errors(schema: type[ConfigSchema], error: ValidationError) -> str:
    lines = []
    for err in error.errors():
        field = err["loc"][0] if err["loc"] else "config"
        env_var = _schema_extra(schema.model_fields.get(field)).get("env_var")
        lines.append(f"  - {env_var or str(field).upper()}: {err['msg']}")
    return "Configuration validation failed:\n" + "\n".join(lines)


def _load_from_dotenv_file() -> None:
    if not os.path.exists(DOTENV_FILE):
        logger.debug(f"{DOTENV_FILE} file not found, skipping")
        return
    load_dotenv(DOTENV_FILE, override=False)
    logger.debug(f"Loaded configuration from {DOTENV_FILE} file")
