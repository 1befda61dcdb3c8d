"""
Orchestrator for a complete fetch: picks the download mode, drives the
walker and download engine, and rolls back on fatal errors.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models import (
    ContentEntry, DownloadMode, DownloadResult, LocalPathname,
    RepositoryDescriptor, TransferStats
)
from ..services import GitHubAPIService, DownloadService
from ..infrastructure.connectivity import ConnectivityMonitor
from ..infrastructure.error_handler import GenericTransferError
from .cleanup import RollbackPlan
from .walker import ContentTreeWalker

from treefetch.infrastructure.logger import logger


def archive_file_name(descriptor: RepositoryDescriptor) -> str:
    name = descriptor.download_file_name
    return name if name.endswith(".zip") else f"{name}.zip"


def rooted_directory(descriptor: RepositoryDescriptor, out: Path) -> Optional[Path]:
    """Top-level directory a directory download creates under ``out``."""

    if descriptor.root_directory_name:
        return out / descriptor.root_directory_name
    if descriptor.sub_path:
        return out / descriptor.root_name
    return None


####
##      FETCH ORCHESTRATOR
#####
class FetchOrchestrator:
    """
    Runs one fetch end to end. Strictly sequential: one request in flight
    at a time, with the connectivity monitor as the only background task.
    """

    def __init__(
        self,
        github_service: GitHubAPIService,
        download_service: DownloadService,
        monitor: Optional[ConnectivityMonitor] = None
    ):
        self.github_service = github_service
        self.download_service = download_service
        self.monitor = monitor
        self.walker = ContentTreeWalker(github_service, download_service)
        self.current_stats: Optional[TransferStats] = None

    async def execute(
        self,
        descriptor: RepositoryDescriptor,
        out: Path,
        force_per_file: bool = False
    ) -> DownloadResult:
        """
        Fetch what ``descriptor`` points at into ``out``.

        Args:
            descriptor: Resolved repository descriptor
            out: Output directory
            force_per_file: Walk the contents API even at the repository root

        Returns:
            DownloadResult of the completed run

        Raises:
            FetchError: after rolling back any partial output
        """

        logger.debug(f"Starting fetch of {descriptor.display_name}:/{descriptor.sub_path}")

        stats = TransferStats()
        self.current_stats = stats
        started_at = datetime.now()
        plan: Optional[RollbackPlan] = None

        if self.monitor is not None:
            self.monitor.start()

        try:
            if not descriptor.sub_path and not force_per_file:
                mode = DownloadMode.ARCHIVE
                pathname = LocalPathname(out, archive_file_name(descriptor))
                plan = RollbackPlan.decide(out, pathname.path)
                await self._download_one(descriptor.archive_url, pathname, stats)
            else:
                listing = await self.github_service.list_contents(descriptor, descriptor.sub_path)

                if isinstance(listing, ContentEntry):
                    mode = DownloadMode.SINGLE_FILE
                    if not listing.is_downloadable_file:
                        raise GenericTransferError(
                            f"'{listing.path}' is a {listing.type or 'unknown entry'} and cannot be downloaded"
                        )
                    pathname = LocalPathname(out, descriptor.download_file_name)
                    plan = RollbackPlan.decide(out, pathname.path)
                    await self._download_one(listing.download_url, pathname, stats)
                else:
                    mode = DownloadMode.DIRECTORY
                    plan = RollbackPlan.decide(out, rooted_directory(descriptor, out))
                    await self.walker.walk(descriptor, out, stats, initial_listing=listing)

            result = DownloadResult(
                repository = descriptor.display_name,
                mode = mode,
                stats = stats,
                started_at = started_at,
                downloaded_files = list(self.download_service.written_files),
                skipped_entries = list(self.walker.skipped_entries),
            )
            result.mark_completed()

            logger.info(
                f"Fetched {stats.completed}/{stats.expected_total} file(s) "
                f"({stats.bytes_written} bytes) from {descriptor.display_name}"
            )
            return result

        except Exception as e:
            logger.error(f"Fetch failed: {e}")
            if plan is not None:
                self._rollback(plan)
            raise

        finally:
            if self.monitor is not None:
                await self.monitor.stop()

    async def _download_one(self, url: str, pathname: LocalPathname, stats: TransferStats) -> None:
        stats.discover()
        await self.download_service.download(url, pathname, stats)
        stats.finish_traversal()

    def _rollback(self, plan: RollbackPlan) -> None:
        try:
            plan.run(
                self.download_service.created_files,
                self.download_service.created_directories,
            )
        except OSError as e:
            logger.error(f"Rollback incomplete, remove {plan.target} manually: {e}")
