"""
Rollback of partially written output after a fatal error.
"""

import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from ..infrastructure.logger import logger


class RollbackMode(Enum):
    NEW_ROOT = "new_root"     # The output directory did not exist; remove what we created above it
    ARTIFACT = "artifact"     # The output directory existed; remove only this run's artifact


@dataclass(frozen=True)
class RollbackPlan:
    """Decided once, before anything is written."""

    mode: RollbackMode
    target: Optional[Path]
    target_preexisted: bool = False

    @classmethod
    def decide(cls, out: Path, artifact: Optional[Path]) -> "RollbackPlan":
        """
        Args:
            out: Output directory of the run
            artifact: The file or rooted directory this run produces, if any
        """

        out = Path(os.path.abspath(out))
        if not out.exists():
            top = out
            while not top.parent.exists() and top.parent != top:
                top = top.parent
            return cls(RollbackMode.NEW_ROOT, top)

        if artifact is None:
            return cls(RollbackMode.ARTIFACT, None, True)
        artifact = Path(os.path.abspath(artifact))
        return cls(RollbackMode.ARTIFACT, artifact, artifact.exists())

    def run(self, created_files: Iterable[Path] = (), created_directories: Iterable[Path] = ()) -> None:
        """Remove this run's output; pre-existing content is never touched."""

        if self.mode is RollbackMode.NEW_ROOT or not self.target_preexisted:
            if self.target is not None:
                _remove(self.target)
            return

        # The artifact was already there: only drop what this run created
        for path in created_files:
            if path.is_file():
                logger.debug(f"Rolling back {path}")
                path.unlink()
        for path in created_directories:
            if path.is_dir():
                _remove(path)


def _remove(path: Path) -> None:
    if path.is_dir():
        logger.info(f"Removing partially downloaded directory {path}")
        shutil.rmtree(path)
    elif path.exists():
        logger.info(f"Removing partially downloaded file {path}")
        path.unlink()


__all__ = [
    "RollbackMode",
    "RollbackPlan",
]
