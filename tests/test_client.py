"""
Tests for the client core: construction, configuration, dispatch,
request counting, rate limiting, deadlines and cancellation.
"""

import asyncio
import json
import time

import httpx
import pytest

from koios_client.application.exceptions import (
    ConfigurationError,
    DeadlineExceededError,
    ErrorKind,
)
from koios_client.infrastructure import options as opt
from koios_client.infrastructure.api_client import KoiosClient
from koios_client.infrastructure.request_options import RequestOptions
from koios_client.infrastructure.response import ResponseError

from conftest import TEST_BASE_URL, RecordingHandler, json_response

TIP = [{"hash": "abc", "epoch_no": 320, "block_height": 1, "block_time": 1650000000}]


class TestConstruction:
    """Test options, defaults and configuration changes."""

    @pytest.mark.asyncio
    async def test_zero_options_is_usable(self):
        async with KoiosClient() as client:
            assert client.base_url == "https://api.koios.rest/api/v1/"
            assert client.server_url == "https://api.koios.rest/"
            assert client.rate_limit == opt.DEFAULT_RATE_LIMIT
            assert client.headers["Origin"] == opt.DEFAULT_ORIGIN
            assert client.total_requests == 0
            assert client.last_request_at is None

    @pytest.mark.asyncio
    async def test_port_in_base_url(self):
        async with KoiosClient(opt.host(opt.PREPROD_HOST), opt.port(8453)) as client:
            assert client.base_url == "https://preprod.koios.rest:8453/api/v1/"

        async with KoiosClient(opt.scheme("http"), opt.port(80)) as client:
            assert client.base_url == "http://api.koios.rest/api/v1/"

    @pytest.mark.parametrize(
        "option,kind",
        [
            (lambda: opt.scheme("ftp"), ErrorKind.INVALID_SCHEME),
            (lambda: opt.host(""), ErrorKind.INVALID_HOST),
            (lambda: opt.port(0), ErrorKind.INVALID_PORT),
            (lambda: opt.port(70000), ErrorKind.INVALID_PORT),
            (lambda: opt.api_version(""), ErrorKind.INVALID_API_VERSION),
            (lambda: opt.rate_limit(0), ErrorKind.RATE_LIMIT_RANGE),
            (lambda: opt.rate_limit(256), ErrorKind.RATE_LIMIT_RANGE),
            (lambda: opt.origin("not a url"), ErrorKind.INVALID_ORIGIN),
            (lambda: opt.request_timeout(0), ErrorKind.HTTP_CLIENT_TIMEOUT),
            (
                lambda: opt.http_client(httpx.AsyncClient(timeout=None)),
                ErrorKind.HTTP_CLIENT_TIMEOUT,
            ),
        ],
    )
    def test_invalid_option_fails_construction(self, option, kind):
        with pytest.raises(ConfigurationError) as exc:
            KoiosClient(option())
        assert exc.value.is_(kind)

    def test_http_client_only_once(self):
        first = httpx.AsyncClient()
        second = httpx.AsyncClient()

        with pytest.raises(ConfigurationError) as exc:
            KoiosClient(opt.http_client(first), opt.http_client(second))
        assert exc.value.is_(ErrorKind.HTTP_CLIENT_CHANGE)

        client = KoiosClient(opt.http_client(first))
        with pytest.raises(ConfigurationError) as exc:
            client.configure(opt.http_client(second))
        assert exc.value.is_(ErrorKind.HTTP_CLIENT_CHANGE)

    def test_origin_is_construction_only(self, make_client):
        client = make_client(RecordingHandler(), opt.origin("https://example.org"))
        assert client.headers["Origin"] == "https://example.org"

        with pytest.raises(ConfigurationError) as exc:
            client.configure(opt.origin("https://other.example.org"))
        assert exc.value.is_(ErrorKind.ORIGIN_CHANGE)

    def test_configure_is_atomic(self, make_client):
        client = make_client(RecordingHandler())

        with pytest.raises(ConfigurationError):
            client.configure(opt.host("other.example.org"), opt.rate_limit(0))

        assert client.base_url == TEST_BASE_URL
        assert client.rate_limit == 255

    def test_configure_switches_network(self, make_client):
        client = make_client(RecordingHandler())
        client.configure(opt.host(opt.PREVIEW_HOST), opt.scheme("https"), opt.port(443))

        assert client.base_url == "https://preview.koios.rest/api/v1/"

    def test_with_options_clone(self, make_client):
        client = make_client(RecordingHandler())
        clone = client.with_options(opt.api_version("v2"))

        assert clone.base_url == "http://localhost:8080/api/v2/"
        assert client.base_url == TEST_BASE_URL
        assert clone.rate_limit == client.rate_limit
        assert isinstance(clone, KoiosClient)

    @pytest.mark.asyncio
    async def test_aclose_keeps_borrowed_transport_open(self):
        transport = httpx.AsyncClient(transport=httpx.MockTransport(RecordingHandler()))
        client = KoiosClient(opt.http_client(transport))
        await client.aclose()

        assert not transport.is_closed
        await transport.aclose()


class TestDispatch:
    """Test the requests the client puts on the wire."""

    @pytest.mark.asyncio
    async def test_common_headers(self, make_client):
        handler = RecordingHandler(TIP)
        client = make_client(handler, opt.auth_token("secret"))

        await client.get_tip()

        request = handler.last
        assert str(request.url) == TEST_BASE_URL + "tip"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Accept-Encoding"] == "gzip, deflate"
        assert request.headers["User-Agent"].startswith("koios-client-python/")
        assert request.headers["Origin"] == opt.DEFAULT_ORIGIN
        assert request.headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_pagination_and_query(self, make_client):
        handler = RecordingHandler(TIP, **{"Content-Range": "10-19/*"})
        client = make_client(handler)
        opts = RequestOptions().set_page_size(10).set_current_page(2)
        opts.query_set("select", "hash,block_time")

        res = await client.get_blocks(opts)

        assert handler.last.headers["Range"] == "10-19"
        assert handler.last.url.params["select"] == "hash,block_time"
        assert res.content_range == "10-19/*"
        assert res.request_method == "GET"
        assert res.request_url.startswith(TEST_BASE_URL + "blocks")

    @pytest.mark.asyncio
    async def test_post_body(self, make_client):
        handler = RecordingHandler([{"address": "addr1"}])
        client = make_client(handler)

        res = await client.get_address_info("addr1")

        assert handler.last.method == "POST"
        assert handler.last.headers["Content-Type"] == "application/json"
        assert json.loads(handler.last.content) == {"_addresses": ["addr1"]}
        assert res.data.address == "addr1"

    @pytest.mark.asyncio
    async def test_reused_options_are_rejected(self, make_client):
        client = make_client(RecordingHandler(TIP))
        opts = client.new_request_options()
        await client.get_blocks(opts)

        with pytest.raises(ResponseError) as exc:
            await client.get_blocks(opts)

        assert exc.value.is_(ErrorKind.REQUEST_OPTIONS_USED)
        assert client.total_requests == 1

    @pytest.mark.asyncio
    async def test_raw_perform(self, make_client):
        client = make_client(RecordingHandler(TIP))

        rsp = await client.get("/tip")
        try:
            body = await rsp.aread()
        finally:
            await rsp.aclose()

        assert rsp.status_code == 200
        assert json.loads(body) == TIP

    @pytest.mark.asyncio
    async def test_raw_perform_propagates_transport_errors(self, make_client):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(refuse)

        with pytest.raises(httpx.ConnectError):
            await client.head("tip")
        assert client.total_requests == 1

    @pytest.mark.asyncio
    async def test_request_stats(self, make_client):
        client = make_client(RecordingHandler(TIP), opt.collect_request_stats())

        res = await client.get_tip()

        assert res.stats is not None
        assert res.stats.req_dur >= 0
        assert res.stats.dns_lookup_dur is None


class TestRequestCounter:
    """Test that every dispatched request is counted exactly once."""

    @pytest.mark.asyncio
    async def test_counts_successes_and_failures(self, make_client):
        state = {"status": 200}

        async def handler(request):
            return json_response(TIP, state["status"])

        client = make_client(handler)

        await client.get_tip()
        assert client.total_requests == 1
        assert client.last_request_at is not None

        state["status"] = 500
        with pytest.raises(ResponseError):
            await client.get_tip()
        assert client.total_requests == 2

    @pytest.mark.asyncio
    async def test_transport_failure_is_counted(self, make_client):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(refuse)

        with pytest.raises(ResponseError) as exc:
            await client.get_tip()

        assert exc.value.is_(ErrorKind.TRANSPORT)
        assert exc.value.retryable
        assert isinstance(exc.value.error.__cause__, httpx.ConnectError)
        assert client.total_requests == 1

    @pytest.mark.asyncio
    async def test_validation_failure_is_not_counted(self, make_client):
        handler = RecordingHandler()
        client = make_client(handler)

        with pytest.raises(ResponseError) as exc:
            await client.get_address_info("")

        assert exc.value.is_(ErrorKind.NO_ADDRESS)
        assert not exc.value.retryable
        assert client.total_requests == 0
        assert handler.requests == []


class TestConcurrency:
    """Test rate limiting, URL snapshots, deadlines and cancellation."""

    @pytest.mark.asyncio
    async def test_three_requests_at_one_per_second(self, make_client):
        client = make_client(RecordingHandler(TIP), opt.rate_limit(1))
        started = time.monotonic()

        results = await asyncio.gather(*(client.get_tip() for _ in range(3)))

        assert time.monotonic() - started >= 1.95
        assert client.total_requests == 3
        assert all(res.error is None for res in results)

    @pytest.mark.asyncio
    async def test_dispatch_never_exceeds_rate(self, make_client):
        times = []

        async def handler(request):
            times.append(time.monotonic())
            return json_response(TIP)

        client = make_client(handler, opt.rate_limit(4))
        await asyncio.gather(*(client.get_tip() for _ in range(9)))

        times.sort()
        for i in range(len(times) - 4):
            assert times[i + 4] - times[i] >= 1.0 - 0.02

    @pytest.mark.asyncio
    async def test_in_flight_request_keeps_its_url(self, make_client):
        entered = asyncio.Event()
        release = asyncio.Event()
        urls = []

        async def handler(request):
            urls.append(request.url.host)
            if len(urls) == 1:
                entered.set()
                await release.wait()
            return json_response(TIP)

        client = make_client(handler)
        first = asyncio.create_task(client.get_tip())
        await entered.wait()

        client.configure(opt.host("mirror.example.org"))
        release.set()
        await first
        await client.get_tip()

        assert urls == ["localhost", "mirror.example.org"]

    @pytest.mark.asyncio
    async def test_perform_deadline(self, make_client):
        async def slow(request):
            await asyncio.sleep(5)
            return json_response(TIP)

        client = make_client(slow)

        with pytest.raises(DeadlineExceededError) as exc:
            await client.get("tip", timeout=0.05)
        assert exc.value.is_(ErrorKind.CANCELLED)

    @pytest.mark.asyncio
    async def test_fetch_deadline(self, make_client):
        async def slow(request):
            await asyncio.sleep(5)
            return json_response(TIP)

        client = make_client(slow)

        with pytest.raises(ResponseError) as exc:
            await client.fetch("GET", "tip", timeout=0.05)
        assert exc.value.is_(ErrorKind.CANCELLED)
        assert exc.value.retryable

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, make_client):
        entered = asyncio.Event()

        async def slow(request):
            entered.set()
            await asyncio.sleep(5)
            return json_response(TIP)

        client = make_client(slow)
        task = asyncio.create_task(client.get_tip())
        await entered.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
