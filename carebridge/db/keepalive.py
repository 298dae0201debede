"""Periodic database ping so idle connections are not dropped by the server."""

import asyncio
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from carebridge.core.logging import get_logger
from carebridge.db.repository import UserRepository

logger = get_logger(__name__)


class DatabaseKeepAlive:
    """Runs `SELECT 1` every `interval` seconds in a background task."""

    def __init__(self, session_factory: Callable[[], Session], interval: float):
        self.session_factory = session_factory
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def ping(self) -> bool:
        """Ping once. Failures are logged and reported as False."""
        session = self.session_factory()
        try:
            UserRepository(session).ping()
            logger.debug("Database ping successful", at=datetime.utcnow().isoformat())
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False
        finally:
            session.close()

    async def _run(self):
        while True:
            await asyncio.to_thread(self.ping)
            await asyncio.sleep(self.interval)

    def start(self):
        if self.is_running:
            logger.info("Keep-alive service already running")
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Keep-alive service started - pinging every {self.interval}s")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Keep-alive service stopped")
