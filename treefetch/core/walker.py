"""
Breadth-first traversal of the contents API.
"""

from collections import deque
from pathlib import Path
from typing import Deque, List, Optional, Union

from ..models import ContentEntry, LocalPathname, RepositoryDescriptor, TransferStats
from ..services import DownloadService, GitHubAPIService
from ..infrastructure.logger import logger


Listing = Union[ContentEntry, List[ContentEntry]]


def map_local_pathname(descriptor: RepositoryDescriptor, out: Path, remote_path: str) -> LocalPathname:
    """
    Map a remote path to its place on disk.

    The parent of the sub-path is stripped so the requested directory itself
    becomes the top local folder, then the result is re-rooted under
    ``out`` and the optional root directory.
    """

    parent = descriptor.sub_path_parent
    relative = remote_path.strip("/")
    if parent and relative.startswith(parent + "/"):
        relative = relative[len(parent) + 1:]

    base = out / descriptor.root_directory_name if descriptor.root_directory_name else out
    directory, _, filename = relative.rpartition("/")
    return LocalPathname(base / directory if directory else base, filename)


class ContentTreeWalker:
    """Discovers files under the descriptor's sub-path and downloads them in order."""

    def __init__(self, github_service: GitHubAPIService, download_service: DownloadService):
        self.github_service = github_service
        self.download_service = download_service
        self.skipped_entries: List[str] = []

    async def walk(
        self,
        descriptor: RepositoryDescriptor,
        out: Path,
        stats: TransferStats,
        initial_listing: Optional[Listing] = None
    ) -> None:
        """
        Walk the tree rooted at ``descriptor.sub_path``.

        Args:
            descriptor: Resolved repository descriptor
            out: Output directory
            stats: Transfer counters; ``expected_total`` grows per file found
            initial_listing: Listing of the seed path if the caller already has it
        """

        queue: Deque[str] = deque([descriptor.sub_path])
        pending_listing = initial_listing

        while queue:
            path = queue.popleft()
            if pending_listing is not None:
                listing, pending_listing = pending_listing, None
            else:
                listing = await self.github_service.list_contents(descriptor, path)

            entries = [listing] if isinstance(listing, ContentEntry) else listing
            logger.debug(f"Listing '{path or '/'}': {len(entries)} entries")

            for entry in entries:
                if entry.is_directory:
                    queue.append(entry.path)
                elif entry.is_downloadable_file:
                    pathname = map_local_pathname(descriptor, out, entry.path)
                    stats.discover()
                    await self.download_service.download(entry.download_url, pathname, stats)
                else:
                    logger.warning(f"Skipping '{entry.path}': unsupported entry type '{entry.type}'")
                    self.skipped_entries.append(entry.path)

        stats.finish_traversal()
        stats.downloaded_whole_directory = True
        logger.debug(f"Traversal finished, {stats.expected_total} file(s) discovered")


__all__ = [
    "map_local_pathname",
    "ContentTreeWalker",
]
