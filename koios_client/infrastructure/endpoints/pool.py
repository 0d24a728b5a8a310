"""Stake pool endpoints."""

from typing import Any, Dict, Iterable, List, Optional

from ...application.exceptions import ErrorKind
from ..api_models import (
    PoolBlock,
    PoolDelegator,
    PoolHistory,
    PoolInfo,
    PoolListItem,
    PoolMetadata,
    PoolRelays,
    PoolUpdate,
)
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class PoolEndpoints(BaseClient):

    def _pool_query(
        self,
        res: Response,
        opts: Optional[RequestOptions],
        pool_id: str,
        **params,
    ) -> RequestOptions:
        pool_id = self._require(res, ErrorKind.NO_POOL_ID, pool_id)[0]
        return self._query(res, opts, _pool_bech32=pool_id, **params)

    async def get_pool_list(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[PoolListItem]]:
        """Get the list of all registered pools (paginated)."""
        return await self.fetch("GET", "pool_list", List[PoolListItem], opts=opts)

    async def get_pools_info(
        self, ids: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[PoolInfo]]:
        """Get current pool statuses and details for the given pool ids."""
        res: Response[List[PoolInfo]] = Response()
        ids = self._require(res, ErrorKind.NO_POOL_ID, ids)
        return await self.fetch(
            "POST",
            "pool_info",
            List[PoolInfo],
            {"_pool_bech32_ids": ids},
            opts,
            res=res,
        )

    async def get_pool_info(
        self, pool_id: str, opts: Optional[RequestOptions] = None
    ) -> Response[PoolInfo]:
        return self._single(await self.get_pools_info([pool_id], opts))

    async def get_pool_delegators(
        self, pool_id: str, opts: Optional[RequestOptions] = None
    ) -> Response[List[PoolDelegator]]:
        res: Response[List[PoolDelegator]] = Response()
        opts = self._pool_query(res, opts, pool_id)
        return await self.fetch(
            "GET", "pool_delegators", List[PoolDelegator], opts=opts, res=res
        )

    async def get_pool_blocks(
        self,
        pool_id: str,
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[PoolBlock]]:
        """Get the blocks minted by a pool, for one epoch or all."""
        res: Response[List[PoolBlock]] = Response()
        opts = self._pool_query(res, opts, pool_id, _epoch_no=epoch_no)
        return await self.fetch(
            "GET", "pool_blocks", List[PoolBlock], opts=opts, res=res
        )

    async def get_pool_history(
        self,
        pool_id: str,
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[PoolHistory]]:
        """Get the per-epoch stake, block and reward history of a pool."""
        res: Response[List[PoolHistory]] = Response()
        opts = self._pool_query(res, opts, pool_id, _epoch_no=epoch_no)
        return await self.fetch(
            "GET", "pool_history", List[PoolHistory], opts=opts, res=res
        )

    async def get_pool_updates(
        self,
        pool_id: Optional[str] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[PoolUpdate]]:
        """Get pool registrations and updates, for one pool or all."""
        res: Response[List[PoolUpdate]] = Response()
        opts = self._query(res, opts, _pool_bech32=pool_id or None)
        return await self.fetch(
            "GET", "pool_updates", List[PoolUpdate], opts=opts, res=res
        )

    async def get_pool_relays(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[PoolRelays]]:
        return await self.fetch("GET", "pool_relays", List[PoolRelays], opts=opts)

    async def get_pool_metadata(
        self,
        ids: Optional[Iterable[str]] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[PoolMetadata]]:
        """Get the metadata of the given pools, or of all pools."""
        body: Dict[str, Any] = {}
        if ids is not None:
            res: Response[List[PoolMetadata]] = Response()
            body["_pool_bech32_ids"] = self._require(res, ErrorKind.NO_POOL_ID, ids)
            return await self.fetch(
                "POST", "pool_metadata", List[PoolMetadata], body, opts, res=res
            )
        return await self.fetch(
            "POST", "pool_metadata", List[PoolMetadata], body, opts
        )
