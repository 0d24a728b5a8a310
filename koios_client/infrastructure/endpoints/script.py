"""Script and datum endpoints."""

from typing import Iterable, List, Optional

from ...application.exceptions import ErrorKind
from ..api_models import DatumInfo, ScriptListItem, ScriptRedeemers
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class ScriptEndpoints(BaseClient):

    async def get_native_script_list(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[ScriptListItem]]:
        return await self.fetch(
            "GET", "native_script_list", List[ScriptListItem], opts=opts
        )

    async def get_plutus_script_list(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[ScriptListItem]]:
        return await self.fetch(
            "GET", "plutus_script_list", List[ScriptListItem], opts=opts
        )

    async def get_script_redeemers(
        self, script_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[ScriptRedeemers]:
        """Get the redeemers of a Plutus script."""
        res: Response[List[ScriptRedeemers]] = Response()
        script_hash = self._require(res, ErrorKind.NO_SCRIPT_HASH, script_hash)[0]
        opts = self._query(res, opts, _script_hash=script_hash)
        many = await self.fetch(
            "GET", "script_redeemers", List[ScriptRedeemers], opts=opts, res=res
        )
        return self._single(many)

    async def get_datums_info(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[DatumInfo]]:
        """Get the values and bytes of the given datum hashes."""
        res: Response[List[DatumInfo]] = Response()
        hashes = self._require(res, ErrorKind.NO_DATUM_HASH, hashes)
        return await self.fetch(
            "POST",
            "datum_info",
            List[DatumInfo],
            {"_datum_hashes": hashes},
            opts,
            res=res,
        )

    async def get_datum_info(
        self, datum_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[DatumInfo]:
        return self._single(await self.get_datums_info([datum_hash], opts))
