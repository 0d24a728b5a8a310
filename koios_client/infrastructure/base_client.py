"""Base class owning connection state and request dispatch."""

import asyncio
import dataclasses
import logging
import platform
import threading
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, TypeVar, Union

import httpx
from pydantic_core import to_json

from ..application.exceptions import (
    DataShapeError,
    DeadlineExceededError,
    ErrorKind,
    KoiosError,
    ProtocolError,
    RequestOptionsError,
    TransportError,
    ValidationError,
)

from .options import (
    DEFAULT_API_VERSION,
    DEFAULT_ORIGIN,
    DEFAULT_PORT,
    DEFAULT_RATE_LIMIT,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT,
    MAINNET_HOST,
    Option,
    default_http_client,
)
from .rate_limiter import RateLimiter
from .request_options import RequestOptions
from .response import (
    RequestStats,
    Response,
    read_and_unmarshal_response,
)
from .tracing import stats_trace

T = TypeVar("T")

LIBRARY_VERSION = "1.0.0"
PROJECT_URL = "https://pypi.org/project/koios-client/"

# Attributes copied by snapshots (configure rollback) and light clones.
_STATE = (
    "_scheme",
    "_host",
    "_port",
    "_api_version",
    "_limiter",
    "_timeout",
    "_collect_stats",
    "_http",
    "_owns_http",
)

Body = Union[bytes, Any]


def user_agent() -> str:
    return (
        f"koios-client-python/{LIBRARY_VERSION} "
        f"({platform.system()} {platform.machine()}) "
        f"python/{platform.python_version()} {PROJECT_URL}"
    )


class BaseClient:
    """
    Shared state and the single request-dispatch primitive.

    URL components and common headers are read and written under one
    lock that is never held across I/O. The HTTP transport and the rate
    limiter are shared by every task using the client.
    """

    def __init__(self, *options: Option):
        """
        Initializes the client.

        Args:
            *options: Options from ``koios_client.infrastructure.options``,
                      applied in order.

        Raises:
            ConfigurationError: On the first invalid option.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lock = threading.RLock()
        self._init_state()

        with self._lock:
            for option in options:
                option(self)
            if self._limiter is None:
                self._limiter = RateLimiter(DEFAULT_RATE_LIMIT)
            if "Origin" not in self._headers:
                self._headers["Origin"] = DEFAULT_ORIGIN
            if self._http is None:
                self._http = default_http_client(
                    self._timeout or DEFAULT_TIMEOUT
                )
                self._owns_http = True
            self._constructed = True

        self.logger.debug(
            f"Client ready: {self.base_url} "
            f"({self._limiter.rate} req/s, own transport: {self._owns_http})"
        )

    def _init_state(self):
        self._scheme = DEFAULT_SCHEME
        self._host = MAINNET_HOST
        self._port = DEFAULT_PORT
        self._api_version = DEFAULT_API_VERSION
        self._headers = httpx.Headers(
            {
                "Accept": "application/json",
                "Accept-Encoding": "gzip, deflate",
                "User-Agent": user_agent(),
            }
        )
        self._limiter: Optional[RateLimiter] = None
        self._http: Optional[httpx.AsyncClient] = None
        self._owns_http = False
        self._timeout: Optional[float] = None
        self._collect_stats = False
        self._constructed = False
        self._total = 0
        self._last_request_at: Optional[datetime] = None

    # --- State ---

    def _netloc(self) -> str:
        if self._port in (80, 443):
            return self._host
        return f"{self._host}:{self._port}"

    @property
    def base_url(self) -> str:
        """Resolved base URL, e.g. ``https://api.koios.rest/api/v1/``."""
        with self._lock:
            return f"{self._scheme}://{self._netloc()}/api/{self._api_version}/"

    @property
    def server_url(self) -> str:
        with self._lock:
            return f"{self._scheme}://{self._netloc()}/"

    @property
    def total_requests(self) -> int:
        """Number of requests dispatched so far."""
        with self._lock:
            return self._total

    @property
    def last_request_at(self) -> Optional[datetime]:
        with self._lock:
            return self._last_request_at

    @property
    def collect_request_stats(self) -> bool:
        with self._lock:
            return self._collect_stats

    @property
    def rate_limit(self) -> int:
        with self._lock:
            return self._limiter.rate

    @property
    def headers(self) -> httpx.Headers:
        """A copy of the headers sent with every request."""
        with self._lock:
            return self._headers.copy()

    def new_request_options(self) -> RequestOptions:
        return RequestOptions()

    def configure(self, *options: Option):
        """
        Apply options to a constructed client.

        Either every option is applied or, when one fails, none is.
        Requests that already resolved their URL are not affected.

        Raises:
            ConfigurationError: On the first invalid option.
        """
        with self._lock:
            snapshot = {name: getattr(self, name) for name in _STATE}
            headers = self._headers.copy()
            try:
                for option in options:
                    option(self)
            except Exception:
                for name, value in snapshot.items():
                    setattr(self, name, value)
                self._headers = headers
                raise
            base_url = self.base_url
        self.logger.debug(f"Client reconfigured: {base_url}")

    def with_options(self, *options: Option) -> "BaseClient":
        """
        Return a light clone with ``options`` applied.

        The clone shares the transport and, unless ``rate_limit`` is among
        the options, the rate limiter. Its request counter starts at zero.
        """
        clone = self.__class__.__new__(self.__class__)
        clone.logger = self.logger
        clone._lock = threading.RLock()
        clone._init_state()
        with self._lock:
            for name in _STATE:
                setattr(clone, name, getattr(self, name))
            clone._headers = self._headers.copy()
        clone._http = None
        clone._owns_http = False

        for option in options:
            option(clone)
        if clone._http is None:
            clone._http = self._http
        clone._constructed = True
        return clone

    # --- Dispatch ---

    def _prepare(
        self,
        method: str,
        path: str,
        body: Optional[Body],
        opts: Optional[RequestOptions],
    ) -> httpx.Request:
        """Lock ``opts`` and build the request against the current base URL."""
        if opts is None:
            opts = RequestOptions()
        opts.lock()

        method = method.upper()
        with self._lock:
            base_url = f"{self._scheme}://{self._netloc()}/api/{self._api_version}/"
            headers = self._headers.copy()
            timeout = self._timeout
            transport = self._http

        url = httpx.URL(base_url).join(path.lstrip("/"))
        if opts.query:
            url = url.copy_merge_params(opts.query)

        for key in {key for key, _ in opts.headers.multi_items()}:
            if key in headers:
                del headers[key]
        headers = httpx.Headers(headers.multi_items() + opts.headers.multi_items())

        content = None
        if body is not None:
            if isinstance(body, (bytes, bytearray)):
                content = bytes(body)
            else:
                content = to_json(body, by_alias=True)
        if method == "POST" and "Content-Type" not in headers:
            headers["Content-Type"] = "application/json"

        kwargs = {"timeout": timeout} if timeout else {}
        return transport.build_request(
            method, url, content=content, headers=headers, **kwargs
        )

    async def _dispatch(
        self, request: httpx.Request, res: Optional[Response] = None
    ) -> httpx.Response:
        """Wait for a rate-limit permit, count the request and send it."""
        with self._lock:
            limiter = self._limiter
            collect_stats = self._collect_stats

        await limiter.acquire()

        with self._lock:
            self._total += 1
            self._last_request_at = datetime.now(timezone.utc)
            total = self._total

        if res is not None and collect_stats:
            res.stats = RequestStats()
            request.extensions["trace"] = stats_trace(res.stats)

        self.logger.debug(f"#{total} {request.method} {request.url}")
        return await self._http.send(request, stream=True)

    async def perform(
        self,
        method: str,
        path: str,
        body: Optional[Body] = None,
        opts: Optional[RequestOptions] = None,
        *,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """
        Send one request and return the raw, streamed response.

        The caller must read or close the response. Transport failures are
        raised as the underlying ``httpx.HTTPError``.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the base URL, e.g. ``tip``.
            body: JSON-serializable payload, or raw bytes.
            opts: Request options; fresh ones are used when None.
            timeout: Deadline in seconds for getting the response headers.

        Raises:
            RequestOptionsError: If ``opts`` was already used.
            DeadlineExceededError: If ``timeout`` elapsed.
        """
        request = self._prepare(method, path, body, opts)
        if timeout is None:
            return await self._dispatch(request)
        try:
            return await asyncio.wait_for(self._dispatch(request), timeout)
        except asyncio.TimeoutError as e:
            raise DeadlineExceededError(
                ErrorKind.CANCELLED, f"{request.method} {request.url} after {timeout}s"
            ) from e

    async def get(
        self,
        path: str,
        opts: Optional[RequestOptions] = None,
        *,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        return await self.perform("GET", path, None, opts, timeout=timeout)

    async def post(
        self,
        path: str,
        body: Optional[Body] = None,
        opts: Optional[RequestOptions] = None,
        *,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        return await self.perform("POST", path, body, opts, timeout=timeout)

    async def head(
        self,
        path: str,
        opts: Optional[RequestOptions] = None,
        *,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        return await self.perform("HEAD", path, None, opts, timeout=timeout)

    async def fetch(
        self,
        method: str,
        path: str,
        dest: Any = Any,
        body: Optional[Body] = None,
        opts: Optional[RequestOptions] = None,
        *,
        res: Optional[Response] = None,
        timeout: Optional[float] = None,
    ) -> Response:
        """
        Perform a request and decode its JSON body into ``dest``.

        Every failure, including invalid options, transport errors and
        deadlines, is recorded on the envelope and raised as its
        ResponseError.

        Returns:
            The envelope with ``data`` set.

        Raises:
            ResponseError: If the call failed at any stage.
        """
        if res is None:
            res = Response()
        if timeout is None:
            return await self._fetch(res, method, path, dest, body, opts)
        try:
            return await asyncio.wait_for(
                self._fetch(res, method, path, dest, body, opts), timeout
            )
        except asyncio.TimeoutError as e:
            derr = DeadlineExceededError(
                ErrorKind.CANCELLED, f"{method} {path} after {timeout}s"
            )
            derr.__cause__ = e
            raise res.fail(derr)

    async def _fetch(
        self,
        res: Response,
        method: str,
        path: str,
        dest: Any,
        body: Optional[Body],
        opts: Optional[RequestOptions],
    ) -> Response:
        try:
            request = self._prepare(method, path, body, opts)
        except KoiosError as e:
            raise res.fail(e)
        res.apply_request(request.method, str(request.url))

        try:
            rsp = await self._dispatch(request, res)
        except httpx.TimeoutException as e:
            derr = DeadlineExceededError(ErrorKind.CANCELLED, str(e) or "timeout")
            derr.__cause__ = e
            raise res.fail(derr)
        except httpx.HTTPError as e:
            terr = TransportError(ErrorKind.TRANSPORT, str(e) or type(e).__name__)
            terr.__cause__ = e
            raise res.fail(terr)

        status_error = None
        if not rsp.is_success:
            status_error = ProtocolError(
                ErrorKind.RESPONSE, f"{rsp.status_code} {rsp.reason_phrase}".strip()
            )
        return await read_and_unmarshal_response(rsp, res, dest, status_error)

    # --- Endpoint helpers ---

    @staticmethod
    def _query(
        res: Response, opts: Optional[RequestOptions], **params: Any
    ) -> RequestOptions:
        """Set endpoint query parameters on ``opts``; None values are skipped."""
        if opts is None:
            opts = RequestOptions()
        try:
            for key, value in params.items():
                if value is None:
                    continue
                if isinstance(value, bool):
                    value = "true" if value else "false"
                opts.query_set(key, value)
        except RequestOptionsError as e:
            raise res.fail(e)
        return opts

    @staticmethod
    def _require(
        res: Response, kind: ErrorKind, value: Union[str, Iterable[str], None]
    ) -> List[str]:
        """
        Validate required identifiers before anything is dispatched.

        Returns:
            The identifiers as a list.

        Raises:
            ResponseError: Wrapping ValidationError(kind) when ``value`` is
                           empty or contains an empty identifier.
        """
        if value is None:
            values = []
        elif isinstance(value, str):
            values = [value]
        else:
            values = list(value)
        if not values or not all(values):
            raise res.fail(ValidationError(kind))
        return values

    @staticmethod
    def _single(many: Response) -> Response:
        """
        Narrow a list envelope to its only item.

        Raises:
            ResponseError: Wrapping DataShapeError(NO_DATA) for no items or
                           DataShapeError(TOO_MANY_RESULTS) for several.
        """
        single = dataclasses.replace(many, data=None, error=None)
        items = many.data or []
        if len(items) == 1:
            single.data = items[0]
            return single
        kind = ErrorKind.NO_DATA if not items else ErrorKind.TOO_MANY_RESULTS
        raise single.fail(DataShapeError(kind, f"got {len(items)} results"))

    # --- Lifecycle ---

    async def aclose(self):
        """Close the transport if this client created it."""
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self.logger.debug("Transport closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.base_url!r})"
