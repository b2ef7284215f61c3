import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, Hashable

from perf_review.core.exceptions import OperationInProgressError

logger = logging.getLogger(__name__)


class SubmissionGuard:
    """
    Per-key in-flight guard for session creation and submits.

    A second call for a key that is already running is rejected, not queued,
    so a double-click cannot produce two creates or two submits.
    One instance is owned by the application (app.state); nothing here is module-global.
    """

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}

    def is_busy(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            logger.warning(f"Rejected concurrent operation for {key}")
            raise OperationInProgressError(str(key))
        async with lock:
            try:
                yield
            finally:
                self._locks.pop(key, None)
