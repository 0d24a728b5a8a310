"""Block endpoints."""

from typing import Iterable, List, Optional

from ...application.exceptions import ErrorKind
from ..api_models import Block, BlockInfo, BlockTx
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class BlockEndpoints(BaseClient):

    async def get_blocks(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[Block]]:
        """Get a summarised list of all blocks, newest first (paginated)."""
        return await self.fetch("GET", "blocks", List[Block], opts=opts)

    async def get_blocks_info(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[BlockInfo]]:
        """Get detailed information about the given blocks."""
        res: Response[List[BlockInfo]] = Response()
        hashes = self._require(res, ErrorKind.NO_BLOCK_HASH, hashes)
        return await self.fetch(
            "POST",
            "block_info",
            List[BlockInfo],
            {"_block_hashes": hashes},
            opts,
            res=res,
        )

    async def get_block_info(
        self, block_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[BlockInfo]:
        return self._single(await self.get_blocks_info([block_hash], opts))

    async def get_block_txs(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[BlockTx]]:
        """Get the transactions included in the given blocks."""
        res: Response[List[BlockTx]] = Response()
        hashes = self._require(res, ErrorKind.NO_BLOCK_HASH, hashes)
        return await self.fetch(
            "POST",
            "block_txs",
            List[BlockTx],
            {"_block_hashes": hashes},
            opts,
            res=res,
        )
