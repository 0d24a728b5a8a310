"""
Query service used by the command line interface.

Maps command names to client calls and turns the resulting envelope into a
JSON-ready mapping. The client is injected, so the service only depends on
the endpoint methods it calls.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .exceptions import ErrorKind, ValidationError

logger = logging.getLogger(__name__)

Command = Callable[[Any, List[str], Any], Awaitable[Any]]


def _epoch(args: List[str]) -> Optional[int]:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError as e:
        raise ValidationError(ErrorKind.INVALID_ARGUMENT, f"epoch {args[0]!r}") from e


def _asset_pair(args: List[str]):
    if not args:
        raise ValidationError(ErrorKind.NO_ASSET)
    return args[0], args[1] if len(args) > 1 else ""


def _path(args: List[str]) -> str:
    if not args:
        raise ValidationError(ErrorKind.INVALID_ARGUMENT, "missing endpoint path")
    return args[0]


COMMANDS: Dict[str, Command] = {
    "tip": lambda c, a, o: c.get_tip(opts=o),
    "genesis": lambda c, a, o: c.get_genesis(opts=o),
    "totals": lambda c, a, o: c.get_totals(_epoch(a), opts=o),
    "epoch-info": lambda c, a, o: c.get_epoch_info(_epoch(a), opts=o),
    "epoch-params": lambda c, a, o: c.get_epoch_params(_epoch(a), opts=o),
    "blocks": lambda c, a, o: c.get_blocks(opts=o),
    "block-info": lambda c, a, o: c.get_blocks_info(a, opts=o),
    "address-info": lambda c, a, o: c.get_addresses_info(a, opts=o),
    "account-info": lambda c, a, o: c.get_accounts_info(a, opts=o),
    "asset-info": lambda c, a, o: c.get_asset_info(*_asset_pair(a), opts=o),
    "pool-list": lambda c, a, o: c.get_pool_list(opts=o),
    "pool-info": lambda c, a, o: c.get_pools_info(a, opts=o),
    "tx-info": lambda c, a, o: c.get_txs_info(a, opts=o),
    "tx-status": lambda c, a, o: c.get_txs_statuses(a, opts=o),
    "get": lambda c, a, o: c.fetch("GET", _path(a), opts=o),
}


class QueryService:
    """Runs one named query against the API."""

    def __init__(self, client: Any):
        """
        Initializes the service.

        Args:
            client: A KoiosClient (or anything with the same endpoints).
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.client = client

    async def run(
        self,
        command: str,
        args: Optional[List[str]] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Execute ``command`` and return the response envelope as a mapping.

        Args:
            command: One of ``COMMANDS``.
            args: Positional arguments of the command (ids, epoch, path).
            page: Page to fetch, 1-based.
            page_size: Rows per page.

        Returns:
            ``Response.to_dict()`` of the call.

        Raises:
            KoiosError: If the command fails. Endpoint failures are
                        ResponseErrors carrying their envelope.
        """
        if command not in COMMANDS:
            raise ValidationError(
                ErrorKind.INVALID_ARGUMENT, f"unknown command {command!r}"
            )

        opts = self.client.new_request_options()
        if page is not None:
            opts.set_current_page(page)
        if page_size is not None:
            opts.set_page_size(page_size)

        self.logger.info(f"Running '{command}' with {args or []}...")
        res = await COMMANDS[command](self.client, list(args or []), opts)
        self.logger.info(f"'{command}' finished: {res.status}")
        return res.to_dict()
