"""Epoch endpoints."""

from typing import List, Optional

from ..api_models import EpochBlockProtocols, EpochInfo, EpochParams
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class EpochEndpoints(BaseClient):

    async def get_epoch_info(
        self,
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[EpochInfo]]:
        """
        Get the epoch information.

        Args:
            epoch_no: Epoch to fetch; all epochs when None.
            opts: Request options.
        """
        res: Response[List[EpochInfo]] = Response()
        opts = self._query(res, opts, _epoch_no=epoch_no)
        return await self.fetch(
            "GET", "epoch_info", List[EpochInfo], opts=opts, res=res
        )

    async def get_epoch_params(
        self,
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[EpochParams]]:
        """Get the protocol parameters for a specific epoch (or all)."""
        res: Response[List[EpochParams]] = Response()
        opts = self._query(res, opts, _epoch_no=epoch_no)
        return await self.fetch(
            "GET", "epoch_params", List[EpochParams], opts=opts, res=res
        )

    async def get_epoch_block_protocols(
        self,
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[EpochBlockProtocols]]:
        res: Response[List[EpochBlockProtocols]] = Response()
        opts = self._query(res, opts, _epoch_no=epoch_no)
        return await self.fetch(
            "GET",
            "epoch_block_protocols",
            List[EpochBlockProtocols],
            opts=opts,
            res=res,
        )
