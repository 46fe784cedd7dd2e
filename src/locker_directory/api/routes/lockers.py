"""Locker directory endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import SearchFilters
from ...schemas.lockers import (
    LockerListResponse,
    LockerModel,
    LockerSearchResponse,
    NearbyLockerModel,
    NearbyLockersResponse,
    TierOutcomeModel,
)
from ...services.lockers import FetchResult, LockerDirectoryService
from ..dependencies import get_directory

router = APIRouter(prefix="/lockers", tags=["lockers"])


def _list_response(result: FetchResult) -> LockerListResponse:
    return LockerListResponse(
        items=[LockerModel.from_domain(locker) for locker in result.locations],
        total=len(result.locations),
        source=result.source.value,
        fetched_at=result.fetched_at,
        cors_detected=result.cors_detected,
        advisory=result.advisory,
        attempts=[
            TierOutcomeModel(
                tier=outcome.tier.value,
                ok=outcome.ok,
                count=len(outcome.locations),
                error_kind=outcome.error_kind.value if outcome.error_kind else None,
                message=outcome.message,
            )
            for outcome in result.attempts
        ],
    )


@router.get("", response_model=LockerListResponse, status_code=status.HTTP_200_OK)
async def list_lockers(
    force_refresh: bool = Query(default=False, description="Bypass the cache and re-query upstream."),
    directory: LockerDirectoryService = Depends(get_directory),
) -> LockerListResponse:
    return _list_response(await directory.fetch_all(force_refresh))


@router.post("/refresh", response_model=LockerListResponse, status_code=status.HTTP_200_OK)
async def refresh_lockers(directory: LockerDirectoryService = Depends(get_directory)) -> LockerListResponse:
    return _list_response(await directory.fetch_all(force_refresh=True))


@router.get("/search", response_model=LockerSearchResponse, status_code=status.HTTP_200_OK)
async def search_lockers(
    search_query: str | None = Query(default=None, description="Matches name, address or city"),
    city: str | None = Query(default=None),
    province: str | None = Query(default=None),
    latitude: float | None = Query(default=None, ge=-90, le=90),
    longitude: float | None = Query(default=None, ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0),
    active_only: bool = Query(default=False),
    directory: LockerDirectoryService = Depends(get_directory),
) -> LockerSearchResponse:
    filters = SearchFilters(
        search_query=search_query,
        city=city,
        province=province,
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
        active_only=active_only,
    )
    results = await directory.search(filters)
    return LockerSearchResponse(items=[LockerModel.from_domain(locker) for locker in results], total=len(results))


@router.get("/nearby", response_model=NearbyLockersResponse, status_code=status.HTTP_200_OK)
async def nearby_lockers(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(default=10.0, gt=0, le=2000),
    directory: LockerDirectoryService = Depends(get_directory),
) -> NearbyLockersResponse:
    results = await directory.nearby(latitude, longitude, radius_km)
    return NearbyLockersResponse(
        items=[NearbyLockerModel.from_nearby(entry) for entry in results],
        total=len(results),
        radius_km=radius_km,
    )


@router.get("/cities", response_model=List[str], status_code=status.HTTP_200_OK)
async def list_cities(directory: LockerDirectoryService = Depends(get_directory)) -> List[str]:
    return await directory.available_cities()


@router.get("/provinces", response_model=List[str], status_code=status.HTTP_200_OK)
async def list_provinces(directory: LockerDirectoryService = Depends(get_directory)) -> List[str]:
    return await directory.available_provinces()


@router.get("/{locker_id}", response_model=LockerModel, status_code=status.HTTP_200_OK)
async def get_locker(locker_id: str, directory: LockerDirectoryService = Depends(get_directory)) -> LockerModel:
    locker = await directory.get_locker(locker_id)
    if locker is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Locker '{locker_id}' not found")
    return LockerModel.from_domain(locker)
