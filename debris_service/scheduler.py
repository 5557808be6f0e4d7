"""
Periodic recomputation of debris positions.

The scheduler owns an asyncio task that refreshes the service on a fixed
interval, independently of any screen lifecycle.
"""

import asyncio
from typing import Optional

from debris_service.orbital_data_service import OrbitalDataService
from logging_config import get_logger

logger = get_logger(__name__)


class RefreshScheduler:
    """Calls ``calculate_debris_positions`` every ``interval_seconds``."""

    def __init__(self, service: OrbitalDataService, interval_seconds: Optional[float] = None):
        if interval_seconds is None:
            interval_seconds = service.config.refresh_interval
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.service = service
        self.interval_seconds = interval_seconds
        self.refresh_count = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> None:
        """Refresh once; failures are logged and do not propagate."""
        try:
            positions = await self.service.calculate_debris_positions()
        except Exception:
            logger.exception("scheduled_refresh_failed")
            return
        self.refresh_count += 1
        logger.debug("scheduled_refresh_done", positions=len(positions), count=self.refresh_count)

    async def _run(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Start refreshing on the running event loop. No-op if already running."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("scheduler_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the refresh task and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("scheduler_stopped", refreshes=self.refresh_count)
