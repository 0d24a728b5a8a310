"""Address and payment credential endpoints."""

from typing import Iterable, List, Optional

from ...application.exceptions import ErrorKind
from ..api_models import AddressAsset, AddressInfo, TxRef, UTxO
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response


class AddressEndpoints(BaseClient):

    async def get_addresses_info(
        self, addrs: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[AddressInfo]]:
        """
        Get balance, stake address and UTxO set of the given addresses.

        Args:
            addrs: Payment addresses (bech32).
            opts: Request options.

        Raises:
            ResponseError: Wrapping ValidationError(NO_ADDRESS) when no
                           address is given, before any request is sent.
        """
        res: Response[List[AddressInfo]] = Response()
        addrs = self._require(res, ErrorKind.NO_ADDRESS, addrs)
        return await self.fetch(
            "POST",
            "address_info",
            List[AddressInfo],
            {"_addresses": addrs},
            opts,
            res=res,
        )

    async def get_address_info(
        self, addr: str, opts: Optional[RequestOptions] = None
    ) -> Response[AddressInfo]:
        return self._single(await self.get_addresses_info([addr], opts))

    async def get_address_txs(
        self,
        addrs: Iterable[str],
        after_block_height: int = 0,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[TxRef]]:
        """Get the transactions of the given addresses after a block height."""
        res: Response[List[TxRef]] = Response()
        addrs = self._require(res, ErrorKind.NO_ADDRESS, addrs)
        return await self.fetch(
            "POST",
            "address_txs",
            List[TxRef],
            {"_addresses": addrs, "_after_block_height": after_block_height},
            opts,
            res=res,
        )

    async def get_addresses_assets(
        self, addrs: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[AddressAsset]]:
        res: Response[List[AddressAsset]] = Response()
        addrs = self._require(res, ErrorKind.NO_ADDRESS, addrs)
        return await self.fetch(
            "POST",
            "address_assets",
            List[AddressAsset],
            {"_addresses": addrs},
            opts,
            res=res,
        )

    async def get_address_assets(
        self, addr: str, opts: Optional[RequestOptions] = None
    ) -> Response[List[AddressAsset]]:
        """Get the native assets held by one address."""
        return await self.get_addresses_assets([addr], opts)

    async def get_credential_txs(
        self,
        creds: Iterable[str],
        after_block_height: int = 0,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[TxRef]]:
        """Get the transactions involving the given payment credentials."""
        res: Response[List[TxRef]] = Response()
        creds = self._require(res, ErrorKind.NO_CREDENTIAL, creds)
        return await self.fetch(
            "POST",
            "credential_txs",
            List[TxRef],
            {
                "_payment_credentials": creds,
                "_after_block_height": after_block_height,
            },
            opts,
            res=res,
        )

    async def get_credential_utxos(
        self,
        creds: Iterable[str],
        extended: Optional[bool] = None,
        opts: Optional[RequestOptions] = None,
    ) -> Response[List[UTxO]]:
        res: Response[List[UTxO]] = Response()
        creds = self._require(res, ErrorKind.NO_CREDENTIAL, creds)
        body = {"_payment_credentials": creds}
        if extended is not None:
            body["_extended"] = extended
        return await self.fetch(
            "POST", "credential_utxos", List[UTxO], body, opts, res=res
        )
