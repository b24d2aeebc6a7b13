"""Periodic and manual crawl triggering with a re-entrancy guard."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..exceptions import CrawlInProgressError
from ..pipeline.models import CrawlSummary

logger = logging.getLogger(__name__)

CycleRunner = Callable[[], Awaitable[CrawlSummary]]


class CrawlScheduler:
    """Run crawl cycles on an interval and on demand, never two at once."""

    def __init__(self, run_cycle: CycleRunner, interval_hours: float = 6.0) -> None:
        self.run_cycle = run_cycle
        self.interval_seconds = interval_hours * 3600
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self.last_summary: Optional[CrawlSummary] = None

    @property
    def running(self) -> bool:
        """True while a cycle is in progress."""
        return self._lock.locked()

    async def run_once(self) -> CrawlSummary:
        """
        Run one cycle under the guard.

        Raises:
            CrawlInProgressError: another cycle is running
        """
        if self._lock.locked():
            raise CrawlInProgressError("A crawl cycle is already in progress")

        async with self._lock:
            summary = await self.run_cycle()
            self.last_summary = summary
            return summary

    async def trigger(self) -> Dict[str, Any]:
        """Manually run one cycle and report {success, message, summary}."""
        logger.info("Starting manual crawling job")
        try:
            summary = await self.run_once()
        except CrawlInProgressError as e:
            logger.warning("Manual crawl refused: %s", e)
            return {"success": False, "message": str(e), "summary": None}
        except Exception as e:
            logger.error("Manual crawling job failed: %s", e)
            return {"success": False, "message": str(e), "summary": None}

        logger.info("Manual crawling job completed successfully")
        return {
            "success": True,
            "message": (
                f"Crawling completed: {summary.total_saved} new articles "
                f"out of {summary.total_found} found"
            ),
            "summary": summary.model_dump(mode="json"),
        }

    async def _tick(self) -> None:
        logger.info("Starting scheduled crawling job")
        try:
            await self.run_once()
        except CrawlInProgressError:
            logger.info("Skipping scheduled crawl: a cycle is already running")
        except Exception as e:
            logger.error("Scheduled crawling job failed: %s", e)
        else:
            logger.info("Scheduled crawling job completed successfully")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self._tick()

    def start(self) -> None:
        """Start the periodic loop on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop())
            logger.info("Scheduler started (every %.1f hours)", self.interval_seconds / 3600)

    async def stop(self) -> None:
        """Cancel the periodic loop."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Scheduler stopped")
