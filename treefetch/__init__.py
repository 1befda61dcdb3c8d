"""
treefetch: download a directory, a single file or a whole repository from
GitHub given only its web URL.
"""

from .interfaces.api import GitHubFetcher
from .core.resolver import resolve
from .models import DownloadResult, FetchOptions, RepositoryDescriptor
from .infrastructure.error_handler import FetchError

__version__ = "0.1.0"

__all__ = [
    "GitHubFetcher",
    "resolve",
    "DownloadResult",
    "FetchOptions",
    "RepositoryDescriptor",
    "FetchError",
]
