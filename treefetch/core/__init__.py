from .resolver import resolve
from .walker import ContentTreeWalker, map_local_pathname
from .cleanup import RollbackMode, RollbackPlan
from .orchestrator import FetchOrchestrator

__all__ = [
    "resolve",
    "ContentTreeWalker",
    "map_local_pathname",
    "RollbackMode",
    "RollbackPlan",
    "FetchOrchestrator",
]
