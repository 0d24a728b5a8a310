"""The Koios API client: every endpoint group on one shared core."""

from typing import Any, Mapping, Optional

from . import options as opt
from .endpoints.account import AccountEndpoints
from .endpoints.address import AddressEndpoints
from .endpoints.asset import AssetEndpoints
from .endpoints.block import BlockEndpoints
from .endpoints.epoch import EpochEndpoints
from .endpoints.network import NetworkEndpoints
from .endpoints.pool import PoolEndpoints
from .endpoints.script import ScriptEndpoints
from .endpoints.transaction import TransactionEndpoints

# settings key -> option factory, in the order they are applied
_SETTINGS_OPTIONS = (
    ("host", opt.host),
    ("scheme", opt.scheme),
    ("port", opt.port),
    ("api_version", opt.api_version),
    ("rate_limit", opt.rate_limit),
    ("origin", opt.origin),
    ("timeout", opt.request_timeout),
    ("auth_token", opt.auth_token),
    ("collect_request_stats", opt.collect_request_stats),
)


class KoiosClient(
    NetworkEndpoints,
    EpochEndpoints,
    BlockEndpoints,
    AddressEndpoints,
    AccountEndpoints,
    AssetEndpoints,
    PoolEndpoints,
    ScriptEndpoints,
    TransactionEndpoints,
):
    """
    Async client for the Koios REST API.

    A client with no options talks to mainnet with the default rate limit::

        async with KoiosClient() as client:
            res = await client.get_tip()
            print(res.data.block_height)

    One instance is meant to be shared by every task of a process.
    """

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        overrides: Optional[Mapping[str, Any]] = None,
        *extra: opt.Option,
    ) -> "KoiosClient":
        """
        Build a client from the ``[client]`` settings section.

        Args:
            settings: A Dynaconf settings object (or a plain mapping).
            overrides: Values taking precedence over the settings, e.g. from
                       command-line flags; None values are ignored.
            *extra: Further options applied last.

        Raises:
            ConfigurationError: If a configured value is invalid.
        """
        section = settings.get("client") or {}
        overrides = overrides or {}

        options = []
        for key, factory in _SETTINGS_OPTIONS:
            value = overrides.get(key)
            if value is None:
                value = section.get(key)
            if value is None or value == "":
                continue
            options.append(factory(value))
        return cls(*options, *extra)
