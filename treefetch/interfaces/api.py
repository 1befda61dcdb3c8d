"""
Python API for treefetch.

    import asyncio
    from treefetch.interfaces.api import GitHubFetcher

    fetcher = GitHubFetcher(auth="octocat:ghp_xxx")
    result = asyncio.run(fetcher.fetch("https://github.com/acme/widgets/tree/main/docs", out="downloads"))
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import httpx

from ..core import FetchOrchestrator, resolve
from ..models import DownloadResult, FetchOptions
from ..services import DownloadService, GitHubAPIService, build_client
from ..infrastructure.auth_manager import AuthManager
from ..infrastructure.connectivity import ConnectivityMonitor
from ..infrastructure.error_handler import ConfigError
from ..infrastructure.logger import logger


class GitHubFetcher:
    """High level entry point: one ``fetch`` call per repository URL."""

    def __init__(
        self,
        auth: Optional[str] = None,
        always_use_auth: bool = False,
        timeout: Optional[int] = None,
        verbose: bool = False,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            auth: Credential as ``username:secret``
            always_use_auth: Attach the credential to every request from the start
            timeout: Connectivity grace period in ms; 0 or None disables the monitor
            verbose: Log at DEBUG level
            progress_callback: Called with (completed, expected_total) after each file
            transport: Custom httpx transport
        """

        self.auth = auth
        self.always_use_auth = always_use_auth
        self.timeout = timeout
        self.progress_callback = progress_callback
        self.transport = transport
        self.verbose = verbose
        self.set_verbose(verbose)

        self.orchestrator: Optional[FetchOrchestrator] = None

    @classmethod
    def from_options(cls, options: FetchOptions, **kwargs) -> "GitHubFetcher":
        return cls(
            auth = options.auth,
            always_use_auth = options.always_use_auth,
            timeout = options.timeout,
            verbose = options.verbose,
            progress_callback = options.progress_callback,
            **kwargs
        )

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def _credential(self) -> Optional[Tuple[str, str]]:
        if not self.auth:
            return None
        username, sep, secret = self.auth.partition(":")
        if not sep or not username or not secret:
            raise ConfigError("auth must be given as username:secret")
        return username, secret

    async def fetch(
        self,
        url: str,
        out: Union[str, Path] = ".",
        file_name: Optional[str] = None,
        root_directory: Optional[Union[str, bool]] = None,
        force_per_file: bool = False
    ) -> DownloadResult:
        """
        Download what ``url`` points at into ``out``.

        Raises:
            FetchError: on any fatal failure, after partial output was removed
        """

        descriptor = resolve(url, file_name=file_name, root_directory=root_directory)
        credential = self._credential()

        if credential is None and self.always_use_auth:
            logger.warning("--always-use-auth given without credentials, ignoring")

        async with build_client(self.transport) as client:
            monitor = ConnectivityMonitor(self.timeout)
            auth_manager = AuthManager(credential, force_always=self.always_use_auth)
            github_service = GitHubAPIService(client, auth_manager, monitor)
            download_service = DownloadService(
                github_service, progress_callback=self.progress_callback
            )
            self.orchestrator = FetchOrchestrator(github_service, download_service, monitor)

            return await self.orchestrator.execute(
                descriptor, Path(out), force_per_file=force_per_file
            )

    async def fetch_options(self, options: FetchOptions) -> DownloadResult:
        return await self.fetch(
            options.url,
            out = options.out,
            file_name = options.file_name,
            root_directory = options.root_directory,
            force_per_file = options.force_per_file,
        )
