"""Background deadline sweeper.

Every ``interval_seconds`` it opens a fresh session and runs
``FinalizeService.finalize_due_deadlines``. Runs never overlap: the next one
starts only after the previous one returned. The sweep itself is synchronous
SQLAlchemy work, so it runs in a worker thread to keep the event loop free.

Started and stopped by the application's startup/shutdown hooks.
"""
import asyncio
import logging
import time
from typing import Callable, Optional

from sqlalchemy.orm import Session

from datepoll.services.finalize_service import FinalizeService, SweepResult, build_finalize_service
from datepoll.services.store import SqlAlchemyVoteStore, VoteStore

logger = logging.getLogger(__name__)


class DeadlineSweeper:
    """Periodic deadline check.

    Example:
        >>> sweeper = DeadlineSweeper(session_factory=SessionLocal, interval_seconds=60)
        >>> await sweeper.start()
        >>> # ... application runs ...
        >>> await sweeper.stop()
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval_seconds: int = 60,
        service_factory: Callable[[VoteStore], FinalizeService] = build_finalize_service,
    ) -> None:
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._service_factory = service_factory
        self._running: bool = False
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval_seconds(self) -> int:
        return self._interval

    async def start(self) -> None:
        """Start the sweep loop. Calling it twice is a no-op."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Deadline sweeper started (every %ss)", self._interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Deadline sweeper stopped")

    async def _run_loop(self) -> None:
        while self._running:
            started = time.monotonic()
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Deadline sweep run failed")
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, self._interval - elapsed))

    async def run_once(self) -> SweepResult:
        """Run a single sweep in a worker thread."""
        return await asyncio.to_thread(self.sweep)

    def sweep(self) -> SweepResult:
        db = self._session_factory()
        try:
            return self._service_factory(SqlAlchemyVoteStore(db)).finalize_due_deadlines()
        finally:
            db.close()
