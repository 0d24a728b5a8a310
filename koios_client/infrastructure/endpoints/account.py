"""Stake account endpoints."""

from typing import Any, Dict, Iterable, List, Optional

from ...application.exceptions import ErrorKind
from ..api_models import (
    AccountAddresses,
    AccountAsset,
    AccountHistory,
    AccountInfo,
    AccountListItem,
    AccountRewards,
    AccountUpdates,
    TxRef,
    UTxO,
)
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class AccountEndpoints(BaseClient):

    async def _post_accounts(
        self,
        path: str,
        dest: Any,
        accs: Iterable[str],
        opts: Optional[RequestOptions],
        **extra: Any,
    ) -> Response:
        res: Response = Response()
        body: Dict[str, Any] = {
            "_stake_addresses": self._require(res, ErrorKind.NO_STAKE_ADDRESS, accs)
        }
        body.update((key, value) for key, value in extra.items() if value is not None)
        return await self.fetch("POST", path, dest, body, opts, res=res)

    async def get_account_list(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[AccountListItem]]:
        """Get a list of all registered stake addresses (paginated)."""
        return await self.fetch(
            "GET", "account_list", List[AccountListItem], opts=opts
        )

    async def get_accounts_info(
        self,
        accs: Iterable[str],
        cached: bool = False,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[AccountInfo]]:
        """
        Get status, delegation and balances of the given stake addresses.

        Args:
            accs: Stake addresses (bech32).
            cached: Use the ``account_info_cached`` endpoint, which is
                    cheaper for the server but may lag a few minutes.
            opts: Request options.
        """
        path = "account_info_cached" if cached else "account_info"
        return await self._post_accounts(path, List[AccountInfo], accs, opts)

    async def get_account_info(
        self,
        acc: str,
        cached: bool = False,
        opts: Optional[RequestOptions] = None,
    ) -> Response[AccountInfo]:
        return self._single(await self.get_accounts_info([acc], cached, opts))

    async def get_accounts_rewards(
        self,
        accs: Iterable[str],
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[AccountRewards]]:
        return await self._post_accounts(
            "account_rewards", List[AccountRewards], accs, opts, _epoch_no=epoch_no
        )

    async def get_accounts_updates(
        self, accs: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[AccountUpdates]]:
        """Get registration, delegation and withdrawal history."""
        return await self._post_accounts(
            "account_updates", List[AccountUpdates], accs, opts
        )

    async def get_accounts_addresses(
        self,
        accs: Iterable[str],
        first_only: Optional[bool] = None,
        empty: Optional[bool] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[AccountAddresses]]:
        return await self._post_accounts(
            "account_addresses",
            List[AccountAddresses],
            accs,
            opts,
            _first_only=first_only,
            _empty=empty,
        )

    async def get_accounts_assets(
        self, accs: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[AccountAsset]]:
        return await self._post_accounts(
            "account_assets", List[AccountAsset], accs, opts
        )

    async def get_accounts_history(
        self,
        accs: Iterable[str],
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[AccountHistory]]:
        """Get the active stake history of the given stake addresses."""
        return await self._post_accounts(
            "account_history", List[AccountHistory], accs, opts, _epoch_no=epoch_no
        )

    async def get_accounts_utxos(
        self,
        accs: Iterable[str],
        extended: Optional[bool] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[UTxO]]:
        return await self._post_accounts(
            "account_utxos", List[UTxO], accs, opts, _extended=extended
        )

    async def get_account_txs(
        self,
        acc: str,
        after_block_height: int = 0,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[TxRef]]:
        """Get the transactions of one stake address after a block height."""
        res: Response[List[TxRef]] = Response()
        acc = self._require(res, ErrorKind.NO_STAKE_ADDRESS, acc)[0]
        opts = self._query(
            res, opts, _stake_address=acc, _after_block_height=after_block_height
        )
        return await self.fetch("GET", "account_txs", List[TxRef], opts=opts, res=res)
