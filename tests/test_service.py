"""
Tests for the query service behind the command line.
"""

import pytest

from koios_client.application.exceptions import ErrorKind, RequestOptionsError, ValidationError
from koios_client.application.service import COMMANDS, QueryService

from conftest import RecordingHandler

TIP = [{"hash": "abc", "epoch_no": 320, "block_height": 1, "block_time": 1650000000}]


class TestQueryService:
    """Test command dispatch and paging."""

    @pytest.mark.asyncio
    async def test_tip(self, make_client):
        service = QueryService(make_client(RecordingHandler(TIP)))

        document = await service.run("tip")

        assert document["status_code"] == 200
        assert document["data"]["hash"] == "abc"
        assert "error" not in document

    @pytest.mark.asyncio
    async def test_paging_is_sent_as_range(self, make_client):
        handler = RecordingHandler([])
        service = QueryService(make_client(handler))

        await service.run("blocks", page=3, page_size=50)

        assert handler.last.headers["Range"] == "100-149"

    @pytest.mark.asyncio
    async def test_epoch_argument(self, make_client):
        handler = RecordingHandler([])
        service = QueryService(make_client(handler))

        await service.run("epoch-info", ["320"])

        assert handler.last.url.params["_epoch_no"] == "320"

    @pytest.mark.asyncio
    async def test_bad_epoch_argument(self, make_client):
        handler = RecordingHandler([])
        service = QueryService(make_client(handler))

        with pytest.raises(ValidationError) as exc:
            await service.run("totals", ["latest"])

        assert exc.value.is_(ErrorKind.INVALID_ARGUMENT)
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_invalid_page(self, make_client):
        service = QueryService(make_client(RecordingHandler([])))

        with pytest.raises(RequestOptionsError) as exc:
            await service.run("blocks", page=0)
        assert exc.value.is_(ErrorKind.INVALID_PAGINATION)

    @pytest.mark.asyncio
    async def test_raw_get(self, make_client):
        handler = RecordingHandler([{"policy_id": "aa"}])
        service = QueryService(make_client(handler))

        document = await service.run("get", ["asset_list"])

        assert handler.last.url.path == "/api/v1/asset_list"
        assert document["data"] == [{"policy_id": "aa"}]

    @pytest.mark.asyncio
    async def test_unknown_command(self, make_client):
        service = QueryService(make_client(RecordingHandler()))

        with pytest.raises(ValidationError) as exc:
            await service.run("nope")
        assert exc.value.is_(ErrorKind.INVALID_ARGUMENT)

    def test_every_command_is_callable(self):
        assert all(callable(command) for command in COMMANDS.values())
