"""Domain models for locker locations and directory snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class LocationSource(str, Enum):
    """Provenance of a locker list returned by the directory."""

    PROXY = "proxy"
    DIRECT = "direct"
    CACHE = "cache"
    STATIC = "static"


@dataclass(frozen=True, slots=True)
class LockerLocation:
    """Represents a physical parcel-locker location in canonical form."""

    id: str
    name: str
    address: str
    city: str
    province: str
    postal_code: str
    latitude: float
    longitude: float
    opening_hours: str = ""
    contact_number: str = ""
    is_active: bool = True
    locker_capacity: Optional[int] = None
    available_slots: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SearchFilters:
    search_query: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None
    active_only: bool = False

    @property
    def has_radius(self) -> bool:
        return self.latitude is not None and self.longitude is not None and self.radius_km is not None


@dataclass(frozen=True, slots=True)
class NearbyLocker:
    location: LockerLocation
    distance_km: float


@dataclass(frozen=True, slots=True)
class CacheSnapshot:
    """Complete normalized locker list captured at a point in time."""

    locations: tuple[LockerLocation, ...]
    fetched_at: datetime
    source: LocationSource
