"""
Configuration models for treefetch runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union


PROBE_INTERVAL_MS = 2000


@dataclass
class FetchOptions:
    """
    Normalized options for one fetch.

    Filled from command line flags and the JSON config file; the core does
    not know which source a value came from.
    """

    url: str
    out: Path = Path(".")
    auth: Optional[str] = None  # "username:secret"
    always_use_auth: bool = False
    timeout: Optional[int] = None  # Connectivity grace period in ms

    # Output shaping
    file_name: Optional[str] = None
    root_directory: Optional[Union[str, bool]] = None

    # Walk the contents API even at the repository root instead of
    # downloading the branch archive
    force_per_file: bool = False

    verbose: bool = False
    progress_callback: Optional[Callable[[int, int], None]] = None

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("Repository URL is required")
        self.out = Path(self.out)
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout cannot be negative")


__all__ = [
    "PROBE_INTERVAL_MS",
    "FetchOptions",
]
