"""
Download engine: writes one remote file to its local pathname.
"""

import os
from pathlib import Path
from typing import Callable, List, Optional

from ..models import LocalPathname, TransferStats
from ..infrastructure.error_handler import handle_api_error
from ..infrastructure.logger import logger
from .github_api import GitHubAPIService


class DownloadService:
    """Fetches file bytes and keeps the transfer counters up to date."""

    def __init__(
        self,
        github_service: GitHubAPIService,
        chunk_size: int = 8192,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ):
        self.github_service = github_service
        self.chunk_size = chunk_size
        self.progress_callback = progress_callback
        self.written_files: List[Path] = []
        self.created_files: List[Path] = []
        self.created_directories: List[Path] = []

    @staticmethod
    def ensure_directory(path: Path) -> None:
        """Create ``path`` and any missing ancestors."""

        if not path.is_dir():
            logger.debug(f"Creating directory {path}")
            path.mkdir(parents=True, exist_ok=True)

    @handle_api_error
    async def download(self, url: str, pathname: LocalPathname, stats: TransferStats) -> int:
        """
        Stream ``url`` into ``pathname``, overwriting any existing file.

        Args:
            url: Direct download URL
            pathname: Local destination
            stats: Transfer counters, ``completed`` is incremented on success

        Returns:
            Number of bytes written
        """

        response = await self.github_service.open_stream(url)
        try:
            self._make_directory(pathname.directory)
            bytes_written = await self._write(response, pathname.path)
        finally:
            await response.aclose()

        stats.complete_file(bytes_written)
        logger.debug(f"Downloaded {pathname.path} ({bytes_written} bytes)")

        if self.progress_callback:
            self.progress_callback(stats.completed, stats.expected_total)
        if stats.is_complete:
            logger.info(f"All {stats.completed} file(s) downloaded")

        return bytes_written

    def _make_directory(self, directory: Path) -> None:
        top = None
        for path in (directory, *directory.parents):
            if path.exists():
                break
            top = path
        self.ensure_directory(directory)
        if top is not None:
            self.created_directories.append(top)

    async def _write(self, response, target: Path) -> int:
        """Stream into a sibling part file and move it over ``target`` when complete."""

        part = target.with_name(f".{target.name}.part")
        existed = target.exists()
        bytes_written = 0
        try:
            with open(part, "wb") as fh:
                async for chunk in response.aiter_bytes(self.chunk_size):
                    fh.write(chunk)
                    bytes_written += len(chunk)
            os.replace(part, target)
        except BaseException:
            if part.exists():
                part.unlink()
            raise

        self.written_files.append(target)
        if not existed:
            self.created_files.append(target)
        return bytes_written


__all__ = [
    "DownloadService",
]
