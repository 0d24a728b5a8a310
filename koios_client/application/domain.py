"""
Value types shared by every Koios endpoint.

Identifiers are thin ``str`` and ``int`` subclasses so they can be passed
anywhere a plain value is expected, while still validating and serializing
as plain values inside pydantic models. Types whose wire form differs from
their natural Python form (unix timestamps, polymorphic metadata) carry
explicit decode/encode functions.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from pydantic import BeforeValidator, GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Annotated

from .exceptions import ErrorKind, ValidationError


# --- Identifiers ---

class Identifier(str):
    """Base class for hash-like identifiers (hex or bech32 strings)."""

    missing_kind = ErrorKind.NO_ADDRESS

    def valid(self) -> bool:
        """
        Check the identifier is usable in a request.

        Raises:
            ValidationError: If the identifier is empty.
        """
        if not self:
            raise ValidationError(self.missing_kind)
        return True

    def to_bytes(self) -> bytes:
        return self.encode("utf-8")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.to_string_ser_schema(),
        )


class Address(Identifier):
    """Cardano payment/base address (bech32)."""


class StakeAddress(Identifier):
    """Cardano staking address (reward account, bech32)."""

    missing_kind = ErrorKind.NO_STAKE_ADDRESS


class PaymentCredential(Identifier):
    """Payment credential (hex)."""

    missing_kind = ErrorKind.NO_CREDENTIAL


class PolicyID(Identifier):
    """Asset policy id (hex)."""

    missing_kind = ErrorKind.NO_ASSET


class AssetName(Identifier):
    """Asset name (hex)."""

    missing_kind = ErrorKind.NO_ASSET


class BlockHash(Identifier):
    missing_kind = ErrorKind.NO_BLOCK_HASH


class TxHash(Identifier):
    missing_kind = ErrorKind.NO_TX_HASH


class PoolID(Identifier):
    """Stake pool id (bech32)."""

    missing_kind = ErrorKind.NO_POOL_ID


class ScriptHash(Identifier):
    missing_kind = ErrorKind.NO_SCRIPT_HASH


class DatumHash(Identifier):
    missing_kind = ErrorKind.NO_DATUM_HASH


# --- Numbers ---

class ChainNumber(int):
    """Base class for non-negative chain counters; accepts numeric strings."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.int_schema(ge=0),
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )


class EpochNo(ChainNumber):
    pass


class BlockNo(ChainNumber):
    pass


class Slot(ChainNumber):
    pass


# ADA amounts are kept as exact decimals; the API sends them as strings.
Lovelace = Decimal


# --- Time ---

class Timestamp:
    """
    A point in time sent by the API as unix seconds.

    The zero Timestamp stands for an absent value and is encoded as null.
    """

    __slots__ = ("_time",)

    def __init__(self, time: Optional[datetime] = None):
        if time is not None and time.tzinfo is None:
            time = time.replace(tzinfo=timezone.utc)
        self._time = time.astimezone(timezone.utc) if time else None

    @classmethod
    def from_unix(cls, seconds: Union[int, float]) -> "Timestamp":
        return cls(datetime.fromtimestamp(seconds, tz=timezone.utc))

    @classmethod
    def decode(cls, value: Any) -> "Timestamp":
        """
        Decode a wire value.

        Accepted shapes, in order: null (zero Timestamp), unix seconds as a
        number, unix seconds as a numeric string, ISO-8601 string.

        Raises:
            ValueError: If the value has none of the accepted shapes.
        """
        if isinstance(value, cls):
            return value
        if value is None or value in ("", "null"):
            return cls()
        if isinstance(value, datetime):
            return cls(value)
        if isinstance(value, bool):
            raise ValueError(f"unsupported timestamp value {value!r}")
        try:
            if isinstance(value, (int, float)):
                return cls.from_unix(value)
            if isinstance(value, str):
                text = value.strip()
                try:
                    return cls.from_unix(float(text))
                except ValueError:
                    pass
                if text.endswith("Z"):
                    text = text[:-1] + "+00:00"
                return cls(datetime.fromisoformat(text))
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {value!r}") from e
        raise ValueError(f"unsupported timestamp value {value!r}")

    def encode(self) -> Optional[Union[int, float]]:
        """Encode as unix seconds, or None for the zero Timestamp."""
        if self._time is None:
            return None
        seconds = self._time.timestamp()
        return int(seconds) if seconds.is_integer() else seconds

    @property
    def time(self) -> Optional[datetime]:
        return self._time

    def is_zero(self) -> bool:
        return self._time is None

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Timestamp):
            return self._time == other._time
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._time)

    def __str__(self) -> str:
        return self._time.isoformat() if self._time else ""

    def __repr__(self) -> str:
        return f"Timestamp({self})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.decode,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda ts: ts.encode()
            ),
        )


# --- Metadata ---

def decode_metadata(value: Any) -> Dict[str, Any]:
    """
    Normalize transaction metadata to a ``{label: json}`` mapping.

    The API returns either an array of ``{"key": ..., "json": ...}`` pairs
    or a plain object; anything else decodes to an empty mapping.
    """
    if isinstance(value, list):
        return {
            str(item["key"]): item.get("json")
            for item in value
            if isinstance(item, dict) and "key" in item
        }
    if isinstance(value, dict):
        return dict(value)
    return {}


Metadata = Annotated[Dict[str, Any], BeforeValidator(decode_metadata)]
