"""
Entry point for the koios_client command line.

    python -m koios_client --host preprod.koios.rest tip
    python -m koios_client --page-size 10 --page 2 blocks
    python -m koios_client get "asset_list?select=policy_id"
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from .application.exceptions import KoiosError
from .application.service import COMMANDS
from .infrastructure.containers import Container
from .infrastructure.response import ResponseError

logger = logging.getLogger(__name__)

# CLI flag dest -> [client] settings key
_CLIENT_FLAGS = (
    "host",
    "scheme",
    "port",
    "api_version",
    "rate_limit",
    "origin",
    "collect_request_stats",
)


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


def print_json(document: dict):
    print(json.dumps(document, indent=2, ensure_ascii=False))


async def run_application(args: argparse.Namespace) -> int:
    """Wires and runs one query using the DI container."""

    container = Container()
    container.cli_args.from_dict(
        {"client": {key: getattr(args, key) for key in _CLIENT_FLAGS}}
    )
    setup_logging(level=container.config().logging.level)

    try:
        client = container.client()
    except KoiosError as e:
        logger.error(f"Invalid client configuration: {e}")
        return 1

    query_service = container.query_service()
    try:
        document = await query_service.run(
            args.command, args.args, page=args.page, page_size=args.page_size
        )
    except ResponseError as e:
        logger.error(f"Request failed: {e}")
        if e.response is not None:
            print_json(e.response.to_dict())
        return 1
    except KoiosError as e:
        logger.error(f"An application error occurred: {e}")
        return 1
    finally:
        await client.aclose()

    print_json(document)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="koios_client", description="Koios REST API client"
    )

    parser.add_argument("--host", help="API host, e.g. preprod.koios.rest")
    parser.add_argument("--scheme", choices=["http", "https"])
    parser.add_argument("--port", type=int)
    parser.add_argument("--api-version", dest="api_version")
    parser.add_argument(
        "--rate-limit",
        dest="rate_limit",
        type=int,
        help="Requests per second, 1-255.",
    )
    parser.add_argument("--origin", help="Origin header sent with requests.")
    parser.add_argument(
        "--stats",
        dest="collect_request_stats",
        action="store_const",
        const=True,
        help="Include request timings in the output.",
    )
    parser.add_argument("--page", type=int, help="Page to fetch, 1-based.")
    parser.add_argument("--page-size", dest="page_size", type=int)

    parser.add_argument("command", choices=sorted(COMMANDS))
    parser.add_argument(
        "args",
        nargs="*",
        help="Command arguments: ids, hashes, an epoch number or a path.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    cli_args = build_parser().parse_args(argv)
    return asyncio.run(run_application(cli_args))


if __name__ == "__main__":
    sys.exit(main())
