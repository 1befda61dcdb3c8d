"""
Download domain models for treefetch.

This module contains data classes and enums representing listing entries,
transfer counters and the result of a fetch operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class DownloadMode(Enum):
    """Mutually exclusive ways a single run fetches content."""

    ARCHIVE = "archive"             # Whole branch as a ZIP archive
    SINGLE_FILE = "single_file"     # The URL points at one file
    DIRECTORY = "directory"         # Walk a directory via the contents API


class DownloadStatus(Enum):
    """Status enumeration for fetch operations."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ContentEntry:
    """One item returned by the contents API."""

    path: str
    type: str  # 'file', 'dir', 'symlink', 'submodule'
    download_url: Optional[str] = None
    size: int = 0
    sha: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ContentEntry":
        return cls(
            path = payload.get("path", ""),
            type = payload.get("type", ""),
            download_url = payload.get("download_url"),
            size = payload.get("size") or 0,
            sha = payload.get("sha"),
        )

    @property
    def is_directory(self) -> bool:
        return self.type == "dir"

    @property
    def is_downloadable_file(self) -> bool:
        return self.type == "file" and bool(self.download_url)


@dataclass
class TransferStats:
    """
    Counters shared by the walker and the download engine.

    ``expected_total`` grows while the walker discovers files, so completion
    is only meaningful once ``is_traversal_done`` is set.
    """

    expected_total: int = 0
    completed: int = 0
    is_traversal_done: bool = False
    downloaded_whole_directory: bool = False
    bytes_written: int = 0

    @property
    def is_complete(self) -> bool:
        return self.is_traversal_done and self.completed == self.expected_total

    def discover(self) -> None:
        self.expected_total += 1

    def complete_file(self, size: int = 0) -> None:
        if self.completed >= self.expected_total:
            raise RuntimeError("Completed a file that was never discovered")
        self.completed += 1
        self.bytes_written += size

    def finish_traversal(self) -> None:
        self.is_traversal_done = True


@dataclass
class DownloadResult:
    """Result of one fetch operation."""

    repository: str
    mode: DownloadMode
    stats: TransferStats
    status: DownloadStatus = DownloadStatus.IN_PROGRESS

    downloaded_files: List[Path] = field(default_factory=list)
    skipped_entries: List[str] = field(default_factory=list)

    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.status == DownloadStatus.COMPLETED and self.stats.is_complete

    @property
    def duration_seconds(self) -> float:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0.0

    def mark_completed(self) -> None:
        self.completed_at = datetime.now()
        self.status = DownloadStatus.COMPLETED

    def mark_failed(self, message: str) -> None:
        self.completed_at = datetime.now()
        self.status = DownloadStatus.FAILED
        self.error_message = message


__all__ = [
    "DownloadMode",
    "DownloadStatus",
    "ContentEntry",
    "TransferStats",
    "DownloadResult",
]
