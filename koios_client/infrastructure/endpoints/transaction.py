"""Transaction endpoints, including signed transaction submission."""

import binascii
from typing import Iterable, List, Optional, Union

from ...application.domain import TxHash
from ...application.exceptions import ErrorKind, RequestOptionsError, ValidationError
from ..api_models import (
    TxBodyJSON,
    TxInfo,
    TxMetadata,
    TxMetalabel,
    TxStatus,
    TxUTxOs,
)
from ..base_client import BaseClient
from ..request_options import RequestOptions
from ..response import Response

SignedTx = Union[TxBodyJSON, str, bytes]


class TransactionEndpoints(BaseClient):

    async def _post_txs(
        self,
        path: str,
        dest,
        hashes: Iterable[str],
        opts: Optional[RequestOptions],
    ) -> Response:
        res: Response = Response()
        hashes = self._require(res, ErrorKind.NO_TX_HASH, hashes)
        return await self.fetch(
            "POST", path, dest, {"_tx_hashes": hashes}, opts, res=res
        )

    async def get_txs_info(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[TxInfo]]:
        """Get detailed information about the given transactions."""
        return await self._post_txs("tx_info", List[TxInfo], hashes, opts)

    async def get_tx_info(
        self, tx_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[TxInfo]:
        return self._single(await self.get_txs_info([tx_hash], opts))

    async def get_txs_utxos(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[TxUTxOs]]:
        """Get the inputs and outputs of the given transactions."""
        return await self._post_txs("tx_utxos", List[TxUTxOs], hashes, opts)

    async def get_tx_utxos(
        self, tx_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[TxUTxOs]:
        return self._single(await self.get_txs_utxos([tx_hash], opts))

    async def get_txs_metadata(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[TxMetadata]]:
        return await self._post_txs("tx_metadata", List[TxMetadata], hashes, opts)

    async def get_tx_metadata(
        self, tx_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[TxMetadata]:
        return self._single(await self.get_txs_metadata([tx_hash], opts))

    async def get_tx_metalabels(
        self, opts: Optional[RequestOptions] = None
    ) -> Response[List[TxMetalabel]]:
        """Get the list of all metadata labels used on chain."""
        return await self.fetch("GET", "tx_metalabels", List[TxMetalabel], opts=opts)

    async def get_txs_statuses(
        self, hashes: Iterable[str], opts: Optional[RequestOptions] = None
    ) -> Response[List[TxStatus]]:
        """Get the number of confirmations of the given transactions."""
        return await self._post_txs("tx_status", List[TxStatus], hashes, opts)

    async def get_tx_status(
        self, tx_hash: str, opts: Optional[RequestOptions] = None
    ) -> Response[TxStatus]:
        return self._single(await self.get_txs_statuses([tx_hash], opts))

    async def submit_signed_tx(
        self, tx: SignedTx, opts: Optional[RequestOptions] = None
    ) -> Response[TxHash]:
        """
        Submit a signed transaction to the network.

        Args:
            tx: The signed transaction as a ``cardano-cli`` text envelope,
                a CBOR hex string or raw CBOR bytes.
            opts: Request options.

        Returns:
            The envelope with the id of the submitted transaction.

        Raises:
            ResponseError: Wrapping ValidationError(INVALID_TX_BODY) when
                           the transaction is empty or not valid hex.
        """
        res: Response[TxHash] = Response()
        if isinstance(tx, TxBodyJSON):
            tx = tx.cbor_hex
        if isinstance(tx, str):
            try:
                tx = binascii.unhexlify(tx.strip())
            except (binascii.Error, ValueError) as e:
                raise res.fail(ValidationError(ErrorKind.INVALID_TX_BODY, str(e)))
        if not tx:
            raise res.fail(ValidationError(ErrorKind.INVALID_TX_BODY, "empty"))

        opts = opts if opts is not None else RequestOptions()
        try:
            opts.header_set("Content-Type", "application/cbor")
        except RequestOptionsError as e:
            raise res.fail(e)
        return await self.fetch("POST", "submittx", TxHash, bytes(tx), opts, res=res)
