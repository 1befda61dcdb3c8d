"""
Network side of treefetch: contents listings and raw file streams.
"""

from typing import List, Optional, Union

import httpx

from ..models import ContentEntry, RepositoryDescriptor
from ..infrastructure.auth_manager import AuthManager
from ..infrastructure.connectivity import ConnectivityMonitor
from ..infrastructure.error_handler import GenericTransferError, handle_api_error
from ..infrastructure.logger import logger


USER_AGENT = "treefetch"
API_HEADERS = {"Accept": "application/vnd.github.v3+json"}


def build_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """HTTP client for the whole run; individual calls carry no timeout."""

    return httpx.AsyncClient(
        transport=transport,
        headers={"User-Agent": USER_AGENT},
        timeout=None,
        follow_redirects=True,
    )


class GitHubAPIService:
    """Issues every request of a run through the auth manager."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth_manager: AuthManager,
        monitor: Optional[ConnectivityMonitor] = None
    ):
        self.client = client
        self.auth_manager = auth_manager
        self.monitor = monitor
        self.api_calls = 0

    async def _send(self, url: str, stream: bool = False, headers: Optional[dict] = None) -> httpx.Response:
        async def request(auth: Optional[httpx.Auth]) -> httpx.Response:
            if self.monitor is not None:
                self.monitor.raise_if_lost()
            self.api_calls += 1
            req = self.client.build_request("GET", url, headers=headers)
            if auth is None:
                return await self.client.send(req, stream=stream)
            return await self.client.send(req, auth=auth, stream=stream)

        logger.debug(f"GET {url}")
        return await self.auth_manager.send(request)

    @handle_api_error
    async def list_contents(
        self,
        descriptor: RepositoryDescriptor,
        path: str
    ) -> Union[ContentEntry, List[ContentEntry]]:
        """
        List a remote path.

        Returns a single entry when the path is a file and a list when it is
        a directory.
        """

        response = await self._send(descriptor.listing_url(path), headers=API_HEADERS)
        payload = response.json()

        if isinstance(payload, list):
            return [ContentEntry.from_api(item) for item in payload]
        if isinstance(payload, dict):
            return ContentEntry.from_api(payload)
        raise GenericTransferError(f"Unexpected listing payload for '{path or '/'}'")

    @handle_api_error
    async def open_stream(self, url: str) -> httpx.Response:
        """Open a streamed GET; the caller must close the response."""

        return await self._send(url, stream=True)


__all__ = [
    "USER_AGENT",
    "build_client",
    "GitHubAPIService",
]
