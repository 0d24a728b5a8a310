"""
Client configuration options.

Each factory returns an ``Option``: a callable that validates its value and
applies it to a client. Options are applied in order by ``KoiosClient(...)``,
``configure(...)`` and ``with_options(...)``; the first invalid one raises
ConfigurationError.
"""

from typing import TYPE_CHECKING, Callable, Union

import httpx

from ..application.exceptions import ConfigurationError, ErrorKind
from .rate_limiter import MAX_RATE, RateLimiter

if TYPE_CHECKING:
    from .base_client import BaseClient

Option = Callable[["BaseClient"], None]

MAINNET_HOST = "api.koios.rest"
GUILD_HOST = "guild.koios.rest"
PREPROD_HOST = "preprod.koios.rest"
PREVIEW_HOST = "preview.koios.rest"

DEFAULT_API_VERSION = "v1"
DEFAULT_PORT = 443
DEFAULT_SCHEME = "https"
DEFAULT_RATE_LIMIT = 5
DEFAULT_ORIGIN = "https://pypi.org/project/koios-client/"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_CONNECTIONS = 100


def host(name: str) -> Option:
    """Hostname of the API server, e.g. ``PREPROD_HOST``."""

    def apply(client: "BaseClient"):
        if not name or "/" in name or ":" in name:
            raise ConfigurationError(ErrorKind.INVALID_HOST, repr(name))
        client._host = name

    return apply


def port(number: int) -> Option:
    """Server port; 80 and 443 are left out of the base URL."""

    def apply(client: "BaseClient"):
        if isinstance(number, bool) or not 1 <= number <= 65535:
            raise ConfigurationError(ErrorKind.INVALID_PORT, f"got {number}")
        client._port = number

    return apply


def scheme(value: str) -> Option:
    def apply(client: "BaseClient"):
        if value not in ("http", "https"):
            raise ConfigurationError(ErrorKind.INVALID_SCHEME, f"got {value!r}")
        client._scheme = value

    return apply


def api_version(version: str) -> Option:
    """API version path segment, e.g. ``v1`` in ``/api/v1/``."""

    def apply(client: "BaseClient"):
        cleaned = (version or "").strip("/")
        if not cleaned or "/" in cleaned:
            raise ConfigurationError(
                ErrorKind.INVALID_API_VERSION, repr(version)
            )
        client._api_version = cleaned

    return apply


def rate_limit(reqps: int) -> Option:
    """
    Requests per second this client may dispatch (1-255).

    Please respect the limits of community provided instances.
    """

    def apply(client: "BaseClient"):
        if isinstance(reqps, bool) or not 1 <= reqps <= MAX_RATE:
            raise ConfigurationError(ErrorKind.RATE_LIMIT_RANGE, f"got {reqps}")
        client._limiter = RateLimiter(reqps)

    return apply


def origin(url: str) -> Option:
    """
    ``Origin`` header sent with every request.

    Set it to the URL of the project using this library so that instance
    operators can reach out (or throttle) instead of blocking everyone.
    Can only be set when the client is constructed.
    """

    def apply(client: "BaseClient"):
        if client._constructed:
            raise ConfigurationError(ErrorKind.ORIGIN_CHANGE)
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(ErrorKind.INVALID_ORIGIN, str(e)) from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConfigurationError(ErrorKind.INVALID_ORIGIN, repr(url))
        client._headers["Origin"] = str(parsed)

    return apply


def http_client(transport: httpx.AsyncClient) -> Option:
    """
    Use ``transport`` for all requests instead of a client-owned one.

    The caller keeps ownership: ``aclose()`` does not close it. It must
    have a timeout and can only be set once.
    """

    def apply(client: "BaseClient"):
        if client._constructed or client._http is not None:
            raise ConfigurationError(ErrorKind.HTTP_CLIENT_CHANGE)
        if all(v is None for v in transport.timeout.as_dict().values()):
            raise ConfigurationError(ErrorKind.HTTP_CLIENT_TIMEOUT)
        client._http = transport
        client._owns_http = False

    return apply


def request_timeout(seconds: Union[int, float]) -> Option:
    """Timeout applied to every request, in seconds."""

    def apply(client: "BaseClient"):
        if isinstance(seconds, bool) or not seconds > 0:
            raise ConfigurationError(
                ErrorKind.HTTP_CLIENT_TIMEOUT, f"got {seconds}"
            )
        client._timeout = float(seconds)

    return apply


def auth_token(token: str) -> Option:
    """Bearer token for authenticated tiers; an empty token removes it."""

    def apply(client: "BaseClient"):
        if token:
            client._headers["Authorization"] = f"Bearer {token}"
        elif "Authorization" in client._headers:
            del client._headers["Authorization"]

    return apply


def collect_request_stats(enabled: bool = True) -> Option:
    """Attach RequestStats timings to every response envelope."""

    def apply(client: "BaseClient"):
        client._collect_stats = bool(enabled)

    return apply


def default_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """The transport a client creates when none was given."""
    return httpx.AsyncClient(
        timeout=timeout,
        limits=httpx.Limits(
            max_connections=DEFAULT_MAX_CONNECTIONS,
            max_keepalive_connections=DEFAULT_MAX_CONNECTIONS,
        ),
    )
