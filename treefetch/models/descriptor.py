"""
Repository domain models for treefetch.

This module contains the immutable descriptor resolved from a GitHub URL
and the local path type the walker hands to the download engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import quote


GITHUB_API_ROOT = "https://api.github.com"
GITHUB_WEB_ROOT = "https://github.com"


class RootDirectoryMode(Enum):
    """How downloaded content is nested under the output directory."""

    OMIT = "omit"               # Write straight into the output directory
    REPO_NAME = "repo_name"     # Nest under a folder named after the repository
    EXPLICIT = "explicit"       # Nest under a caller supplied folder name


@dataclass(frozen=True)
class RepositoryDescriptor:
    """Immutable description of what a repository URL points at."""

    owner: str
    repo: str
    branch: str
    sub_path: str
    root_name: str
    download_file_name: str
    root_directory_name: str
    api_url_prefix: str
    api_url_postfix: str
    root_directory_mode: RootDirectoryMode = RootDirectoryMode.REPO_NAME

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ValueError("Repository owner and name are required")

        if not self.api_url_prefix.endswith("/contents/"):
            raise ValueError(f"Invalid contents endpoint: {self.api_url_prefix}")

    @property
    def display_name(self) -> str:
        return f'{self.owner}/{self.repo}@{self.branch}'

    @property
    def archive_url(self) -> str:
        """Zip archive of the whole branch."""

        return f"{GITHUB_WEB_ROOT}/{self.owner}/{self.repo}/archive/{quote(self.branch)}.zip"

    @property
    def sub_path_parent(self) -> str:
        """Remote prefix stripped from every path when mapping to disk."""

        if "/" not in self.sub_path:
            return ""
        return self.sub_path.rsplit("/", 1)[0]

    def listing_url(self, path: str) -> str:
        """Contents API URL for a remote path on the resolved branch."""

        return f"{self.api_url_prefix}{quote(path.strip('/'))}{self.api_url_postfix}"


@dataclass(frozen=True)
class LocalPathname:
    """Destination of one downloaded file."""

    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename


__all__ = [
    "GITHUB_API_ROOT",
    "GITHUB_WEB_ROOT",
    "RootDirectoryMode",
    "RepositoryDescriptor",
    "LocalPathname",
]
