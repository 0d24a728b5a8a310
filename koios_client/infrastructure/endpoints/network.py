"""Network endpoints: chain tip, genesis, supply totals."""

from typing import List, Optional

from ..api_models import Genesis, ParamUpdateProposal, Tip, Totals
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class NetworkEndpoints(BaseClient):

    async def get_tip(self, opts: Optional[RequestOptions] = None) -> Response[Tip]:
        """Get the tip info about the latest block seen by the chain."""
        many = await self.fetch("GET", "tip", List[Tip], opts=opts)
        return self._single(many)

    async def get_genesis(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[Genesis]:
        """Get the genesis parameters used to start each era on chain."""
        many = await self.fetch("GET", "genesis", List[Genesis], opts=opts)
        return self._single(many)

    async def get_totals(
        self,
        epoch_no: Optional[int] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[Totals]]:
        """
        Get the circulating utxo, treasury, rewards, supply and reserves in
        lovelace for a specific epoch, or for all epochs when omitted.
        """
        res: Response[List[Totals]] = Response()
        opts = self._query(res, opts, _epoch_no=epoch_no)
        return await self.fetch("GET", "totals", List[Totals], opts=opts, res=res)

    async def get_param_updates(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[ParamUpdateProposal]]:
        return await self.fetch(
            "GET", "param_updates", List[ParamUpdateProposal], opts=opts
        )
