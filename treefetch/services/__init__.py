from .github_api import GitHubAPIService, build_client
from .download import DownloadService

__all__ = [
    "GitHubAPIService",
    "DownloadService",
    "build_client",
]
