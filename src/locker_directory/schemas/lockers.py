"""Locker directory API schemas."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import LockerLocation, NearbyLocker


class LockerModel(BaseModel):
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

    @classmethod
    def from_domain(cls, locker: LockerLocation) -> "LockerModel":
        return cls(**asdict(locker))


class NearbyLockerModel(LockerModel):
    distance_km: float

    @classmethod
    def from_nearby(cls, entry: NearbyLocker) -> "NearbyLockerModel":
        return cls(**asdict(entry.location), distance_km=round(entry.distance_km, 3))


class TierOutcomeModel(BaseModel):
    tier: str
    ok: bool
    count: int = 0
    error_kind: Optional[str] = None
    message: str = ""


class LockerListResponse(BaseModel):
    items: List[LockerModel]
    total: int
    source: str
    fetched_at: datetime
    cors_detected: bool = False
    advisory: Optional[str] = None
    attempts: List[TierOutcomeModel] = Field(default_factory=list)


class LockerSearchResponse(BaseModel):
    items: List[LockerModel]
    total: int


class NearbyLockersResponse(BaseModel):
    items: List[NearbyLockerModel]
    total: int
    radius_km: float
