"""
Core data models API surface for treefetch.

This file re-exports model classes from domain-specific modules so callers
can write `from treefetch.models import X`.
"""

from .descriptor import (
    RootDirectoryMode,
    RepositoryDescriptor,
    LocalPathname,
)
from .download import (
    DownloadMode,
    DownloadStatus,
    ContentEntry,
    TransferStats,
    DownloadResult,
)
from .config import FetchOptions

__all__ = [
    # Repository models
    "RootDirectoryMode",
    "RepositoryDescriptor",
    "LocalPathname",
    # Download models
    "DownloadMode",
    "DownloadStatus",
    "ContentEntry",
    "TransferStats",
    "DownloadResult",
    # Config models
    "FetchOptions",
]
