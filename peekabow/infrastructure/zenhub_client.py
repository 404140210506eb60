import aiohttp
import asyncio
import logging
import os
from typing import Optional

from peekabow.domain.models import Board
from peekabow.domain.exceptions import (
    AuthenticationException,
    NotFoundException,
    ServiceUnavailableException,
    UnexpectedResponseException,
)
from peekabow.infrastructure.acl import ZenHubTranslator

logger = logging.getLogger(__name__)

SERVICE_NAME = "ZenHub"
DEFAULT_API_URL = "https://api.zenhub.io"

class ZenHubClient:
    """
    Client for the ZenHub REST API. Only the board endpoint is used.
    """

    def __init__(self, token: str, api_url: Optional[str] = None):
        self.headers = {
            "X-Authentication-Token": token,
            "Accept": "application/json",
            "User-Agent": "peekabow",
        }
        self.api_url = (api_url or os.getenv("ZENHUB_API_URL") or DEFAULT_API_URL).rstrip("/")

    def board_url(self, repository_id: int) -> str:
        return f"{self.api_url}/p1/repositories/{repository_id}/board"

    async def fetch_board(self, session: aiohttp.ClientSession, repository_id: int) -> Board:
        """
        Fetches the full board (every pipeline and its issue numbers) for a repository.

        Args:
            session (aiohttp.ClientSession): Session shared for the whole run.
            repository_id (int): GitHub's numeric repository id.

        Returns:
            Board: The pipelines in the order ZenHub returns them.
        """
        url = self.board_url(repository_id)
        try:
            async with session.get(url, headers=self.headers) as response:
                if response.status in {401, 403}:
                    raise AuthenticationException(SERVICE_NAME, f"token rejected (HTTP {response.status})")

                if response.status == 404:
                    raise NotFoundException(
                        SERVICE_NAME, f"no board for repository {repository_id}; is it connected to ZenHub?"
                    )

                if not 200 <= response.status < 300:
                    raise ServiceUnavailableException(
                        SERVICE_NAME, f"board endpoint answered HTTP {response.status}", status=response.status
                    )

                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    raise UnexpectedResponseException(SERVICE_NAME, f"board response is not JSON: {e}") from e

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ServiceUnavailableException(SERVICE_NAME, f"request failed: {e}") from e

        board = ZenHubTranslator.to_board(body)
        logger.info(f"Board for {repository_id} has {len(board.pipelines)} pipelines.")
        return board
