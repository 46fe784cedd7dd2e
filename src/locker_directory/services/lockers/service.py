"""Locker directory orchestration: acquisition, fallback and queries."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ...config import Settings, settings as default_settings
from ...data.static_lockers import get_static_lockers
from ...models.domain import (
    CacheSnapshot,
    LocationSource,
    LockerLocation,
    NearbyLocker,
    SearchFilters,
)
from . import normalizer
from . import search as geo_search
from .cache import LockerCache
from .errors import CORS_ADVISORY, ErrorKind, LockerDirectoryError, classify_transport_error
from .transport import DirectTransport, LockerTransport, ProxyTransport


@dataclass(frozen=True, slots=True)
class TierOutcome:
    """Result of one network tier: either locations or a classified failure."""

    tier: LocationSource
    locations: tuple[LockerLocation, ...] = ()
    error_kind: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, tier: LocationSource, locations: Sequence[LockerLocation]) -> "TierOutcome":
        return cls(tier=tier, locations=tuple(locations))

    @classmethod
    def failure(cls, tier: LocationSource, error: LockerDirectoryError) -> "TierOutcome":
        return cls(tier=tier, error_kind=error.kind, message=str(error))


@dataclass(frozen=True, slots=True)
class FetchResult:
    locations: tuple[LockerLocation, ...]
    source: LocationSource
    fetched_at: datetime
    cors_detected: bool = False
    attempts: tuple[TierOutcome, ...] = field(default_factory=tuple)

    @property
    def advisory(self) -> Optional[str]:
        return CORS_ADVISORY if self.cors_detected else None


class LockerDirectoryService:
    """Directory of locker locations that always answers with a usable list.

    Tier order: fresh cache, relay (proxy), direct upstream call, any cached
    snapshot, then the curated static dataset.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        proxy: LockerTransport | None = None,
        direct: LockerTransport | None = None,
        cache: LockerCache | None = None,
        static_loader: Callable[[], Sequence[LockerLocation]] = get_static_lockers,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.proxy = proxy or ProxyTransport(self.settings)
        self.direct = direct or DirectTransport(self.settings)
        self.cache = cache or LockerCache(ttl=timedelta(seconds=self.settings.cache_ttl_seconds))
        self._static_loader = static_loader
        self.logger = logger or logging.getLogger(__name__)
        self._cors_detected = False

    # -- configuration overrides used by diagnostics -------------------------

    def set_api_key(self, api_key: str | None) -> None:
        self._apply_settings(self.settings.model_copy(update={"api_key": api_key}))

    def set_sandbox_mode(self, use_sandbox: bool) -> None:
        self._apply_settings(self.settings.model_copy(update={"use_sandbox": use_sandbox}))
        # Sandbox and production data must not mix.
        self.cache.invalidate()

    def _apply_settings(self, new_settings: Settings) -> None:
        self.settings = new_settings
        for transport in (self.proxy, self.direct):
            if hasattr(transport, "settings"):
                transport.settings = new_settings

    @property
    def cors_detected(self) -> bool:
        return self._cors_detected

    # -- acquisition ----------------------------------------------------------

    async def fetch_all(self, force_refresh: bool = False) -> FetchResult:
        """Return the best available locker list; never raises for network failures."""
        if not force_refresh:
            snapshot, fresh = self.cache.get()
            if snapshot is not None and fresh:
                self.logger.debug("Serving lockers from fresh cache")
                return FetchResult(
                    locations=snapshot.locations,
                    source=LocationSource.CACHE,
                    fetched_at=snapshot.fetched_at,
                    cors_detected=self._cors_detected,
                )
        return await self.cache.coalesce(self._refresh)

    async def _refresh(self) -> FetchResult:
        attempts: list[TierOutcome] = []
        for tier, transport in ((LocationSource.PROXY, self.proxy), (LocationSource.DIRECT, self.direct)):
            outcome = await self._attempt(tier, transport)
            attempts.append(outcome)
            if outcome.ok:
                snapshot = CacheSnapshot(
                    locations=outcome.locations,
                    fetched_at=self.cache.now(),
                    source=tier,
                )
                self.cache.put(snapshot)
                cors = self._record_cors(attempts)
                self.logger.info(f"Loaded {len(outcome.locations)} lockers via {tier.value}")
                return FetchResult(
                    locations=snapshot.locations,
                    source=tier,
                    fetched_at=snapshot.fetched_at,
                    cors_detected=cors,
                    attempts=tuple(attempts),
                )

        cors = self._record_cors(attempts)
        if cors:
            self.logger.warning(f"{CORS_ADVISORY}: direct upstream calls are blocked by the browser origin policy")

        snapshot, _ = self.cache.get()
        if snapshot is not None:
            self.logger.warning(
                f"All network tiers failed; serving {len(snapshot.locations)} cached lockers "
                f"from {snapshot.fetched_at.isoformat()}"
            )
            return FetchResult(
                locations=snapshot.locations,
                source=LocationSource.CACHE,
                fetched_at=snapshot.fetched_at,
                cors_detected=cors,
                attempts=tuple(attempts),
            )

        static = tuple(self._static_loader())
        self.logger.warning(f"All network tiers failed and no cache; serving {len(static)} static lockers")
        return FetchResult(
            locations=static,
            source=LocationSource.STATIC,
            fetched_at=self.cache.now(),
            cors_detected=cors,
            attempts=tuple(attempts),
        )

    async def _attempt(self, tier: LocationSource, transport: LockerTransport) -> TierOutcome:
        try:
            raw = await asyncio.wait_for(transport.fetch(), timeout=transport.timeout)
            locations = normalizer.extract_usable(raw)
        except LockerDirectoryError as exc:
            self.logger.warning(f"Locker tier '{tier.value}' failed ({exc.kind.value}): {exc}")
            return TierOutcome.failure(tier, exc)
        except Exception as exc:
            error = classify_transport_error(exc)
            self.logger.warning(f"Locker tier '{tier.value}' failed ({error.kind.value}): {exc}")
            return TierOutcome.failure(tier, error)
        return TierOutcome.success(tier, locations)

    def _record_cors(self, attempts: Sequence[TierOutcome]) -> bool:
        if any(outcome.error_kind is ErrorKind.CORS_BLOCKED for outcome in attempts):
            self._cors_detected = True
        return self._cors_detected

    # -- queries ----------------------------------------------------------------

    async def get_lockers(self, force_refresh: bool = False) -> tuple[LockerLocation, ...]:
        result = await self.fetch_all(force_refresh)
        return result.locations

    async def search(self, filters: SearchFilters) -> list[LockerLocation]:
        lockers = await self.get_lockers()
        results = geo_search.search(lockers, filters)
        self.logger.debug(f"Search returned {len(results)} lockers")
        return results

    async def nearby(self, latitude: float, longitude: float, radius_km: float = 10.0) -> list[NearbyLocker]:
        lockers = await self.get_lockers()
        results = geo_search.nearby(lockers, latitude, longitude, radius_km)
        self.logger.debug(f"Found {len(results)} lockers within {radius_km}km")
        return results

    async def get_locker(self, locker_id: str) -> Optional[LockerLocation]:
        for locker in await self.get_lockers():
            if locker.id == locker_id:
                return locker
        return None

    async def available_cities(self) -> list[str]:
        return geo_search.available_cities(await self.get_lockers())

    async def available_provinces(self) -> list[str]:
        return geo_search.available_provinces(await self.get_lockers())

    def cache_status(self) -> dict:
        snapshot, fresh = self.cache.get()
        age = self.cache.age()
        return {
            "cached": snapshot is not None,
            "fresh": fresh,
            "size": len(snapshot.locations) if snapshot else 0,
            "source": snapshot.source.value if snapshot else None,
            "fetched_at": snapshot.fetched_at.isoformat() if snapshot else None,
            "age_seconds": round(age.total_seconds(), 1) if age is not None else None,
            "ttl_seconds": int(self.cache.ttl.total_seconds()),
            "refreshing": self.cache.refreshing,
            "cors_detected": self._cors_detected,
        }

    def invalidate_cache(self) -> None:
        self.cache.invalidate()
