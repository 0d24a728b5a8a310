"""
Unit tests for the value types: identifiers, chain numbers, timestamps,
lovelace amounts and metadata.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import TypeAdapter

from koios_client.application.domain import (
    Address,
    EpochNo,
    PoolID,
    Timestamp,
    TxHash,
    decode_metadata,
)
from koios_client.application.exceptions import ErrorKind, ValidationError
from koios_client.infrastructure.api_models import (
    AccountInfo,
    Tip,
    TxBodyJSON,
    TxMetadata,
)

GENESIS_SHELLEY = datetime(2020, 7, 29, 21, 44, 51, tzinfo=timezone.utc)
GENESIS_SHELLEY_UNIX = 1596059091


class TestIdentifiers:

    @pytest.mark.parametrize(
        "cls,kind",
        [
            (Address, ErrorKind.NO_ADDRESS),
            (TxHash, ErrorKind.NO_TX_HASH),
            (PoolID, ErrorKind.NO_POOL_ID),
        ],
    )
    def test_empty_identifier_is_invalid(self, cls, kind):
        with pytest.raises(ValidationError) as exc:
            cls("").valid()
        assert exc.value.is_(kind)

    def test_identifier_is_a_plain_string(self):
        tx = TxHash("f144a8264acf")

        assert tx.valid()
        assert tx == "f144a8264acf"
        assert tx.to_bytes() == b"f144a8264acf"

    def test_identifier_in_models(self):
        tip = Tip.model_validate({"hash": "abc", "epoch_no": "320"})

        assert type(tip.epoch_no) is EpochNo
        assert tip.epoch_no == 320
        assert tip.model_dump(mode="json")["hash"] == "abc"

    def test_chain_numbers_are_non_negative(self):
        with pytest.raises(Exception):
            TypeAdapter(EpochNo).validate_python(-1)


class TestTimestamp:

    @pytest.mark.parametrize("value", [None, "null", ""])
    def test_absent_values_decode_to_zero(self, value):
        ts = Timestamp.decode(value)

        assert ts.is_zero()
        assert not ts
        assert ts.encode() is None

    @pytest.mark.parametrize(
        "value",
        [
            GENESIS_SHELLEY_UNIX,
            float(GENESIS_SHELLEY_UNIX),
            str(GENESIS_SHELLEY_UNIX),
            "2020-07-29T21:44:51Z",
            "2020-07-29T21:44:51+00:00",
        ],
    )
    def test_wire_shapes(self, value):
        ts = Timestamp.decode(value)

        assert ts.time == GENESIS_SHELLEY
        assert ts.encode() == GENESIS_SHELLEY_UNIX

    def test_fractional_seconds_survive(self):
        ts = Timestamp.decode(1.5)
        assert ts.encode() == 1.5

    def test_naive_datetime_is_utc(self):
        ts = Timestamp(datetime(2020, 7, 29, 21, 44, 51))
        assert ts == Timestamp.from_unix(GENESIS_SHELLEY_UNIX)

    @pytest.mark.parametrize("value", ["yesterday", True, [1], {"t": 1}])
    def test_unsupported_values(self, value):
        with pytest.raises(ValueError):
            Timestamp.decode(value)

    @pytest.mark.parametrize("wire", [GENESIS_SHELLEY_UNIX, None])
    def test_model_round_trip(self, wire):
        tip = Tip.model_validate_json(f'{{"block_time": {"null" if wire is None else wire}}}')
        assert tip.model_dump(mode="json")["block_time"] == wire

    def test_invalid_timestamp_fails_model_validation(self):
        with pytest.raises(Exception):
            Tip.model_validate({"block_time": "not a time"})


class TestLovelace:

    def test_large_amounts_are_exact(self):
        info = AccountInfo.model_validate(
            {"total_balance": "45000000000000000123", "rewards": 17}
        )

        assert info.total_balance == Decimal("45000000000000000123")
        assert info.rewards == Decimal(17)


class TestMetadata:

    def test_array_of_pairs(self):
        value = [{"key": "721", "json": {"name": "x"}}, {"key": 674, "json": "msg"}]
        assert decode_metadata(value) == {"721": {"name": "x"}, "674": "msg"}

    def test_object(self):
        assert decode_metadata({"721": {"name": "x"}}) == {"721": {"name": "x"}}

    @pytest.mark.parametrize("value", [None, "text", 42, []])
    def test_anything_else_is_empty(self, value):
        assert decode_metadata(value) == {}

    def test_model_field(self):
        doc = TxMetadata.model_validate(
            {"tx_hash": "aa", "metadata": [{"key": "1", "json": 2}]}
        )
        assert doc.metadata == {"1": 2}

        doc = TxMetadata.model_validate({"tx_hash": "aa", "metadata": None})
        assert doc.metadata == {}


class TestTxBodyJSON:

    def test_text_envelope_alias(self):
        body = TxBodyJSON.model_validate(
            {"type": "Tx BabbageEra", "description": "", "cborHex": "84a3"}
        )
        assert body.cbor_hex == "84a3"
