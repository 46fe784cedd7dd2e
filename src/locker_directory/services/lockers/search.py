"""Stateless query helpers over a locker list."""

from __future__ import annotations

from typing import Iterable, Sequence

from ...models.domain import LockerLocation, NearbyLocker, SearchFilters
from ..geospatial import haversine_km


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.lower()


def distance_to(location: LockerLocation, latitude: float, longitude: float) -> float:
    return haversine_km(latitude, longitude, location.latitude, location.longitude)


def search(locations: Sequence[LockerLocation], filters: SearchFilters) -> list[LockerLocation]:
    """Apply text, region, status and radius filters.

    Source order is preserved unless a radius filter is active, in which case
    results are sorted by ascending distance.
    """
    results: Iterable[LockerLocation] = locations

    query = (filters.search_query or "").strip().lower()
    if query:
        results = [
            locker
            for locker in results
            if _contains(locker.name, query) or _contains(locker.address, query) or _contains(locker.city, query)
        ]

    city = (filters.city or "").strip().lower()
    if city:
        results = [locker for locker in results if _contains(locker.city, city)]

    province = (filters.province or "").strip().lower()
    if province:
        results = [locker for locker in results if _contains(locker.province, province)]

    if filters.active_only:
        results = [locker for locker in results if locker.is_active]

    if filters.has_radius:
        return [
            entry.location
            for entry in nearby(results, filters.latitude, filters.longitude, filters.radius_km)
        ]
    return list(results)


def nearby(
    locations: Iterable[LockerLocation],
    latitude: float,
    longitude: float,
    radius_km: float,
) -> list[NearbyLocker]:
    """Return lockers within ``radius_km`` annotated with distance, nearest first."""
    annotated = [
        NearbyLocker(location=locker, distance_km=distance_to(locker, latitude, longitude))
        for locker in locations
    ]
    within = [entry for entry in annotated if entry.distance_km <= radius_km]
    within.sort(key=lambda entry: entry.distance_km)
    return within


def available_cities(locations: Iterable[LockerLocation]) -> list[str]:
    return sorted({locker.city for locker in locations})


def available_provinces(locations: Iterable[LockerLocation]) -> list[str]:
    return sorted({locker.province for locker in locations})
