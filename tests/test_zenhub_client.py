import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp

from peekabow.domain.exceptions import (
    AuthenticationException,
    NotFoundException,
    ServiceUnavailableException,
    UnexpectedResponseException,
)
from peekabow.infrastructure.zenhub_client import ZenHubClient

BOARD_BODY = {
    "pipelines": [
        {"name": "Backlog", "issues": [{"issue_number": 1}]},
        {"name": "In Progress", "issues": [{"issue_number": 7}, {"issue_number": 8}]},
    ]
}


def _mock_response(status: int = 200, body=None, json_error: Exception = None) -> AsyncMock:
    resp = AsyncMock()
    resp.status = status
    if json_error is not None:
        resp.json = AsyncMock(side_effect=json_error)
    else:
        resp.json = AsyncMock(return_value=body)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


def _mock_session(*responses) -> AsyncMock:
    session = AsyncMock()
    session.get = MagicMock(side_effect=list(responses))
    return session


class TestZenHubClient(unittest.TestCase):
    def test_authentication_header(self) -> None:
        client = ZenHubClient(token="zh-token")
        self.assertEqual(client.headers["X-Authentication-Token"], "zh-token")

    def test_board_url_uses_repository_id(self) -> None:
        client = ZenHubClient(token="t", api_url="https://zenhub.example/")
        self.assertEqual(client.board_url(555), "https://zenhub.example/p1/repositories/555/board")

    def test_api_url_from_environment(self) -> None:
        with patch.dict("os.environ", {"ZENHUB_API_URL": "https://zh.internal"}):
            client = ZenHubClient(token="t")
        self.assertEqual(client.board_url(1), "https://zh.internal/p1/repositories/1/board")


class TestFetchBoard(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_board_decodes_pipelines(self) -> None:
        client = ZenHubClient(token="zh-token", api_url="https://api.zenhub.io")
        session = _mock_session(_mock_response(body=BOARD_BODY))

        board = await client.fetch_board(session, 555)

        self.assertEqual([p.name for p in board.pipelines], ["Backlog", "In Progress"])
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://api.zenhub.io/p1/repositories/555/board")
        self.assertEqual(kwargs["headers"]["X-Authentication-Token"], "zh-token")

    async def test_same_response_yields_same_board(self) -> None:
        client = ZenHubClient(token="zh-token")
        session = _mock_session(_mock_response(body=BOARD_BODY), _mock_response(body=BOARD_BODY))

        first = await client.fetch_board(session, 555)
        second = await client.fetch_board(session, 555)

        self.assertEqual(first, second)

    async def test_unauthorized_raises_authentication(self) -> None:
        client = ZenHubClient(token="bad")
        session = _mock_session(_mock_response(status=401))

        with self.assertRaises(AuthenticationException):
            await client.fetch_board(session, 555)

    async def test_unknown_repository_raises_not_found(self) -> None:
        client = ZenHubClient(token="zh-token")
        session = _mock_session(_mock_response(status=404))

        with self.assertRaises(NotFoundException):
            await client.fetch_board(session, 555)

    async def test_server_error_raises_service_unavailable(self) -> None:
        client = ZenHubClient(token="zh-token")
        session = _mock_session(_mock_response(status=503))

        with self.assertRaises(ServiceUnavailableException) as ctx:
            await client.fetch_board(session, 555)

        self.assertEqual(ctx.exception.status, 503)

    async def test_transport_error_raises_service_unavailable(self) -> None:
        client = ZenHubClient(token="zh-token")
        session = AsyncMock()
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("no route to host"))

        with self.assertRaises(ServiceUnavailableException):
            await client.fetch_board(session, 555)

    async def test_non_json_body_raises_unexpected_response(self) -> None:
        client = ZenHubClient(token="zh-token")
        session = _mock_session(_mock_response(json_error=ValueError("Expecting value")))

        with self.assertRaises(UnexpectedResponseException):
            await client.fetch_board(session, 555)

    async def test_wrong_shape_raises_unexpected_response(self) -> None:
        client = ZenHubClient(token="zh-token")
        session = _mock_session(_mock_response(body={"pipelines": "nope"}))

        with self.assertRaises(UnexpectedResponseException):
            await client.fetch_board(session, 555)
