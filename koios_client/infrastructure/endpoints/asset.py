"""Native asset endpoints."""

from typing import Iterable, List, Optional, Tuple

from ...application.exceptions import ErrorKind
from ..api_models import (
    AssetHistory,
    AssetHolder,
    AssetInfo,
    AssetListItem,
    AssetSummary,
    PolicyAssetInfo,
    TxRef,
)
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class AssetEndpoints(BaseClient):

    def _asset_query(
        self,
        res: Response,
        opts: Optional[RequestOptions],
        policy: str,
        name: Optional[str],
        **params,
    ) -> RequestOptions:
        # An empty asset name is valid; only the policy is required.
        policy = self._require(res, ErrorKind.NO_ASSET, policy)[0]
        return self._query(
            res, opts, _asset_policy=policy, _asset_name=name, **params
        )

    async def get_asset_list(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[AssetListItem]]:
        """Get the list of all native assets (paginated)."""
        return await self.fetch("GET", "asset_list", List[AssetListItem], opts=opts)

    async def get_assets_info(
        self,
        pairs: Iterable[Tuple[str, str]],
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[AssetInfo]]:
        """
        Get the information of a list of assets.

        Args:
            pairs: ``(policy_id, asset_name)`` pairs, names in hex.
            opts: Request options.
        """
        res: Response[List[AssetInfo]] = Response()
        asset_list = [[policy, name or ""] for policy, name in pairs]
        self._require(res, ErrorKind.NO_ASSET, [p for p, _ in asset_list])
        return await self.fetch(
            "POST",
            "asset_info",
            List[AssetInfo],
            {"_asset_list": asset_list},
            opts,
            res=res,
        )

    async def get_asset_info(
        self, policy: str, name: str, opts: Optional[RequestOptions] = None
    ) -> Response[AssetInfo]:
        return self._single(await self.get_assets_info([(policy, name)], opts))

    async def get_asset_addresses(
        self, policy: str, name: str, opts: Optional[RequestOptions] = None
    ) -> Response[List[AssetHolder]]:
        """Get the addresses holding an asset and their quantities."""
        res: Response[List[AssetHolder]] = Response()
        opts = self._asset_query(res, opts, policy, name)
        return await self.fetch(
            "GET", "asset_addresses", List[AssetHolder], opts=opts, res=res
        )

    async def get_asset_history(
        self, policy: str, name: str, opts: Optional[RequestOptions] = None
    ) -> Response[List[AssetHistory]]:
        """Get the mint and burn history of an asset."""
        res: Response[List[AssetHistory]] = Response()
        opts = self._asset_query(res, opts, policy, name)
        return await self.fetch(
            "GET", "asset_history", List[AssetHistory], opts=opts, res=res
        )

    async def get_policy_asset_info(
        self, policy: str, opts: Optional[RequestOptions] = None
    ) -> Response[List[PolicyAssetInfo]]:
        res: Response[List[PolicyAssetInfo]] = Response()
        opts = self._asset_query(res, opts, policy, None)
        return await self.fetch(
            "GET", "policy_asset_info", List[PolicyAssetInfo], opts=opts, res=res
        )

    async def get_asset_summary(
        self, policy: str, name: str, opts: Optional[RequestOptions] = None
    ) -> Response[AssetSummary]:
        res: Response[List[AssetSummary]] = Response()
        opts = self._asset_query(res, opts, policy, name)
        many = await self.fetch(
            "GET", "asset_summary", List[AssetSummary], opts=opts, res=res
        )
        return self._single(many)

    async def get_asset_txs(
        self,
        policy: str,
        name: str,
        after_block_height: int = 0,
        history: bool = False,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[TxRef]]:
        """
        Get the transactions involving an asset.

        Args:
            policy: Asset policy id.
            name: Asset name in hex.
            after_block_height: Only return transactions after this height.
            history: Include all transactions, not just the latest state.
            opts: Request options.
        """
        res: Response[List[TxRef]] = Response()
        opts = self._asset_query(
            res,
            opts,
            policy,
            name,
            _after_block_height=after_block_height,
            _history=history,
        )
        return await self.fetch("GET", "asset_txs", List[TxRef], opts=opts, res=res)
