"""
Background connectivity monitor.

Runs next to the transfer as an asyncio task and never touches transfer
state. Its only output is a write-once ConnectivityLostError that the main
flow checks before every network call.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import httpx

from ..models.config import PROBE_INTERVAL_MS
from .error_handler import ConnectivityLostError
from .logger import logger


PROBE_URL = "https://github.com"
PROBE_TIMEOUT = 10.0


class ConnectivityMonitor:
    """Periodic reachability probe with a grace period before aborting."""

    def __init__(
        self,
        timeout_ms: Optional[int],
        interval_ms: int = PROBE_INTERVAL_MS,
        probe: Optional[Callable[[], Awaitable[bool]]] = None,
        probe_url: str = PROBE_URL
    ):
        self.timeout_ms = timeout_ms or 0
        self.interval_ms = interval_ms
        self.probe_url = probe_url
        self._probe = probe or self._probe_host
        self._task: Optional[asyncio.Task] = None
        self._lost: Optional[ConnectivityLostError] = None

    @property
    def enabled(self) -> bool:
        return self.timeout_ms > 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def lost(self) -> Optional[ConnectivityLostError]:
        return self._lost

    def start(self) -> None:
        if not self.enabled:
            logger.debug("Connectivity monitor disabled (no timeout configured)")
            return
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="treefetch-connectivity")

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Connectivity monitor failed: {e!r}")

    def raise_if_lost(self) -> None:
        """Called by the main flow at every network boundary."""

        if self._lost is not None:
            raise self._lost

    async def _run(self) -> None:
        interval = self.interval_ms / 1000
        grace = self.timeout_ms / 1000

        while True:
            await asyncio.sleep(interval)
            if await self._reachable():
                continue

            logger.warning(
                f"Network unreachable, waiting up to {self.timeout_ms} ms for it to come back"
            )
            await asyncio.sleep(grace)
            if await self._reachable():
                logger.info("Network connection restored")
                continue

            self._lost = ConnectivityLostError(
                f"Network unreachable for more than {self.timeout_ms} ms, aborting"
            )
            logger.error(self._lost.message)
            return

    async def _reachable(self) -> bool:
        try:
            return await self._probe()
        except Exception as e:
            logger.debug(f"Connectivity probe raised {e!r}, treating host as unreachable")
            return False

    async def _probe_host(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=PROBE_TIMEOUT) as client:
                await client.head(self.probe_url)
        except httpx.TransportError as e:
            logger.debug(f"Connectivity probe failed: {e!r}")
            return False
        return True


__all__ = [
    "PROBE_URL",
    "ConnectivityMonitor",
]
