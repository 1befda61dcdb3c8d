from .api import GitHubFetcher

__all__ = [
    "GitHubFetcher",
]
