"""
Response envelope and the decode pipeline shared by every endpoint.

Each endpoint call gets one ``Response`` envelope. The pipeline fills it
step by step (request, status, headers, body) and ends with either
``data`` populated or ``error`` populated, never both.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Generic, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_json, to_jsonable_python

from ..application.exceptions import (
    DecodeError,
    ErrorKind,
    KoiosError,
    ProtocolError,
    TransportError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)

_BODY_PREVIEW = 1024


@dataclass
class RequestStats:
    """Timing breakdown of one request, in seconds."""

    req_started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    dns_lookup_dur: Optional[float] = None
    tls_hs_dur: Optional[float] = None
    est_cxn_dur: Optional[float] = None
    ttfb: Optional[float] = None
    req_dur: Optional[float] = None
    _started: float = field(default_factory=time.perf_counter, repr=False)

    def elapsed(self) -> float:
        return time.perf_counter() - self._started

    def finish(self):
        self.req_dur = self.elapsed()

    @property
    def req_dur_str(self) -> str:
        if self.req_dur is None:
            return ""
        return f"{self.req_dur * 1000:.3f}ms"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "req_started_at": self.req_started_at.isoformat(),
            "dns_lookup_dur": self.dns_lookup_dur,
            "tls_hs_dur": self.tls_hs_dur,
            "est_cxn_dur": self.est_cxn_dur,
            "ttfb": self.ttfb,
            "req_dur": self.req_dur,
            "req_dur_str": self.req_dur_str,
        }


class _ServerError(BaseModel):
    """Structured error body sent by the API (PostgREST style)."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[Union[str, int]] = None
    message: Optional[str] = None
    hint: Optional[Any] = None
    details: Optional[Any] = None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return to_json(value).decode("utf-8")


class ResponseError(KoiosError):
    """
    The error recorded in a response envelope and raised by endpoints.

    It wraps the underlying failure (available as ``error`` and as
    ``__cause__``) and adds whatever the server reported about it. Its kind
    mirrors the wrapped error, so ``is_`` works on either.
    """

    def __init__(
        self,
        error: Optional[BaseException] = None,
        response: Optional["Response"] = None,
    ):
        super().__init__(getattr(error, "kind", None) or ErrorKind.RESPONSE)
        self.code = ""
        self.message = str(error) if error is not None else self.kind.value
        self.hint = ""
        self.details = ""
        self.response = response
        self.__cause__ = error

    @property
    def error(self) -> Optional[BaseException]:
        return self.__cause__

    @property
    def code_int(self) -> int:
        try:
            return int(self.code)
        except ValueError:
            return 0

    def to_dict(self) -> Dict[str, str]:
        out = {"code": self.code, "message": self.message}
        if self.hint:
            out["hint"] = self.hint
        if self.details:
            out["details"] = self.details
        return out

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ResponseError(code={self.code!r}, message={self.message!r})"


@dataclass
class Response(Generic[T]):
    """Uniform result of an endpoint call."""

    request_url: str = ""
    request_method: str = ""
    status_code: int = 0
    status: str = ""
    date: str = ""
    content_range: str = ""
    content_location: str = ""
    error: Optional[ResponseError] = None
    stats: Optional[RequestStats] = None
    data: Optional[T] = None

    def apply_request(self, method: str, url: str):
        self.request_method = method
        self.request_url = url

    def apply_response(self, rsp: httpx.Response):
        """Record status and the pagination/date headers of ``rsp``."""
        self.status_code = rsp.status_code
        self.status = f"{rsp.status_code} {rsp.reason_phrase}".strip()
        self.date = rsp.headers.get("date", "")
        self.content_range = rsp.headers.get("content-range", "")
        self.content_location = rsp.headers.get("content-location", "")

    def apply_error(
        self, body: Optional[bytes], err: Optional[BaseException]
    ) -> ResponseError:
        """
        Record ``err`` (and the server's error body, if any) on the envelope.

        The message is the underlying error text when the server sent no
        message, otherwise ``"<underlying>: <server message>"``. A body that
        is not a JSON error object leaves the message untouched.

        Returns:
            The envelope's ResponseError.
        """
        if self.error is None:
            self.error = ResponseError(err, response=self)
        elif err is not None:
            self.error.kind = getattr(err, "kind", None) or self.error.kind
            self.error.message = str(err)
            self.error.__cause__ = err
        rerr = self.error

        if body:
            try:
                server = _ServerError.model_validate_json(body)
            except PydanticValidationError:
                server = None
            if server is not None:
                if server.code is not None and str(server.code):
                    rerr.code = str(server.code)
                rerr.hint = _as_text(server.hint)
                rerr.details = _as_text(server.details)
                if server.message:
                    underlying = str(err) if err is not None else ""
                    rerr.message = (
                        f"{underlying}: {server.message}"
                        if underlying
                        else server.message
                    )
        return rerr

    def ready(self):
        """Finalize stats and fall back to the HTTP status as error code."""
        if self.stats is not None and self.stats.req_dur is None:
            self.stats.finish()
        if self.error is not None and not self.error.code and self.status_code:
            self.error.code = str(self.status_code)

    def fail(
        self, err: BaseException, body: Optional[bytes] = None
    ) -> ResponseError:
        """Apply ``err``, finalize the envelope and return its error."""
        rerr = self.apply_error(body, err)
        self.ready()
        logger.debug(
            f"{self.request_method} {self.request_url} failed: {rerr}"
        )
        return rerr

    def raise_for_error(self):
        if self.error is not None:
            raise self.error

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping; empty header fields are omitted."""
        out: Dict[str, Any] = {}
        for name in (
            "request_url",
            "request_method",
            "status",
            "date",
            "content_range",
            "content_location",
        ):
            value = getattr(self, name)
            if value:
                out[name] = value
        if self.status_code:
            out["status_code"] = self.status_code
        if self.error is not None:
            out["error"] = self.error.to_dict()
        if self.stats is not None:
            out["stats"] = self.stats.to_dict()
        if self.data is not None:
            out["data"] = to_jsonable_python(
                self.data, by_alias=True, fallback=str
            )
        return out


@lru_cache(maxsize=None)
def _adapter(dest: Any) -> TypeAdapter:
    return TypeAdapter(dest)


def decode(dest: Any, body: bytes) -> Any:
    """Validate a JSON body against ``dest`` (a model or typing construct)."""
    return _adapter(dest).validate_json(body)


def _preview(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace")
    if len(text) > _BODY_PREVIEW:
        return text[:_BODY_PREVIEW] + "..."
    return text


async def read_and_unmarshal_response(
    rsp: Optional[httpx.Response],
    res: Response,
    dest: Any,
    error: Optional[BaseException] = None,
) -> Response:
    """
    Turn a raw (streamed) HTTP response into ``res.data`` or ``res.error``.

    The response stream is always closed. ``error`` is a failure detected
    before the body was read, e.g. a non-2xx status.

    Args:
        rsp: The raw response, or None if none was received.
        res: The envelope to fill.
        dest: The type the JSON body decodes to.
        error: A prior failure for this call, if any.

    Returns:
        ``res`` with ``data`` set.

    Raises:
        ResponseError: The envelope's error, when any step failed.
    """
    if rsp is None:
        raise res.fail(error or ProtocolError(ErrorKind.RESPONSE, "no response"))

    res.apply_response(rsp)
    try:
        try:
            body = await rsp.aread()
        finally:
            await rsp.aclose()
    except httpx.DecodingError as e:
        # The server answered, but with a body its Content-Encoding can't undo.
        derr = DecodeError(ErrorKind.DECODE, str(e) or type(e).__name__)
        derr.__cause__ = e
        raise res.fail(derr)
    except (httpx.HTTPError, httpx.StreamError) as e:
        terr = TransportError(ErrorKind.TRANSPORT, str(e) or type(e).__name__)
        terr.__cause__ = e
        raise res.fail(terr)

    content_type = rsp.headers.get("content-type", "")
    if "json" not in content_type.lower():
        perr = ProtocolError(ErrorKind.RESPONSE_NOT_JSON, _preview(body))
        perr.__cause__ = error
        raise res.fail(perr)

    if error is not None or not body:
        raise res.fail(
            error or ProtocolError(ErrorKind.RESPONSE, "empty body"), body
        )

    try:
        res.data = decode(dest, body)
    except (PydanticValidationError, ValueError) as e:
        derr = DecodeError(ErrorKind.DECODE, str(e))
        derr.__cause__ = e
        raise res.fail(derr, body)

    res.ready()
    logger.debug(f"{res.request_method} {res.request_url}: {res.status}")
    return res
