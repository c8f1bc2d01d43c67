"""
CLI main application module.

This module contains the command line runner: it builds the connection
pool from the environment configuration, runs the given requests and
prints one JSON line per response.
"""

import json
import logging
import sys
import time
from typing import List, Optional

from ..constants import (
    EXIT_SUCCESS,
    EXIT_CONFIG_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_REQUEST_FAILURES,
    EXIT_INTERRUPTED,
    EXIT_UNEXPECTED_ERROR,
)
from ..config import ConfigError, Env
from ..engine import decode_request
from ..errors import BadDataError
from ..module import QueryModule
from ..transport import ErrorKind
from ..utils import setup_logging
from .parser import create_argument_parser
from .utils import JsonLinesTransport, iter_requests

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None):
    """Main entry point for the script."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        env = Env.load(cli_args=args)
        logger.debug(f"Configuration: {env.mask()}")
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        requests = list(iter_requests(args.request, args.request_file))
    except (FileNotFoundError, UnicodeDecodeError, PermissionError) as e:
        logger.error(f"Failed to read requests: {e}")
        sys.exit(EXIT_INPUT_ERROR)

    if not requests:
        logger.error("No requests found")
        sys.exit(EXIT_INPUT_ERROR)

    transport = JsonLinesTransport(sys.stdout)

    if args.dry_run:
        for request_id, data in requests:
            try:
                if isinstance(data, json.JSONDecodeError):
                    raise BadDataError(f"Error: failed to unpack request: {data}")
                request = decode_request(data, env.DEFAULT_TIMEOUT)
            except BadDataError as e:
                transport.send_error(request_id, ErrorKind.BAD_DATA, str(e))
            else:
                transport.send_result(request_id, repr(request))
        sys.exit(EXIT_REQUEST_FAILURES if transport.errors else EXIT_SUCCESS)

    start_time = time.time()
    try:
        with QueryModule(
            transport,
            max_workers=env.MAX_WORKERS,
            default_timeout=env.DEFAULT_TIMEOUT,
        ) as module:
            if not module.on_config(env.pool_config()._asdict()):
                sys.exit(EXIT_CONFIG_ERROR)

            futures = []
            for request_id, data in requests:
                if isinstance(data, json.JSONDecodeError):
                    transport.send_error(
                        request_id, ErrorKind.BAD_DATA, f"Error: failed to unpack request: {data}"
                    )
                    continue
                futures.append(module.on_request(request_id, data))

            for future in futures:
                future.result()

    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C)")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(EXIT_UNEXPECTED_ERROR)

    logger.info(
        f"Handled {len(requests)} requests in {time.time() - start_time:.2f}s "
        f"({transport.results} results, {transport.errors} errors)"
    )

    if transport.errors:
        sys.exit(EXIT_REQUEST_FAILURES)
