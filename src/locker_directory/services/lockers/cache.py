"""Time-bounded snapshot cache with single-flight refresh."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional, TypeVar

from ...models.domain import CacheSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LockerCache:
    """Holds the last-known-good snapshot.

    The snapshot reference is swapped wholesale on ``put`` so readers always
    see one complete list. ``coalesce`` shares a single in-flight refresh
    between concurrent callers.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._snapshot: Optional[CacheSnapshot] = None
        self._inflight: Optional[asyncio.Future] = None

    def now(self) -> datetime:
        return self._clock()

    def is_fresh(self, snapshot: CacheSnapshot) -> bool:
        return self.now() - snapshot.fetched_at <= self.ttl

    def get(self) -> tuple[Optional[CacheSnapshot], bool]:
        snapshot = self._snapshot
        if snapshot is None:
            return None, False
        return snapshot, self.is_fresh(snapshot)

    def put(self, snapshot: CacheSnapshot) -> None:
        self._snapshot = snapshot
        logger.debug(f"Cached {len(snapshot.locations)} lockers from {snapshot.source.value}")

    def invalidate(self) -> None:
        self._snapshot = None

    def age(self) -> Optional[timedelta]:
        snapshot = self._snapshot
        if snapshot is None:
            return None
        return self.now() - snapshot.fetched_at

    @property
    def refreshing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def coalesce(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``factory`` unless a refresh is already running; then await that one."""
        inflight = self._inflight
        if inflight is None or inflight.done():
            inflight = asyncio.ensure_future(factory())
            self._inflight = inflight
            inflight.add_done_callback(self._clear_inflight)
        else:
            logger.debug("Joining in-flight locker refresh")
        # shield: one caller's cancellation must not abort the shared refresh
        return await asyncio.shield(inflight)

    def _clear_inflight(self, future: asyncio.Future) -> None:
        if self._inflight is future:
            self._inflight = None
