"""FastAPI dependencies resolving the services held on application state."""

from __future__ import annotations

from fastapi import Request

from ..services.lockers import LockerDirectoryService, LockerRelay
from ..services.shipping import ShippingClient


def get_directory(request: Request) -> LockerDirectoryService:
    return request.app.state.directory


def get_shipping_client(request: Request) -> ShippingClient:
    return request.app.state.shipping


def get_relay(request: Request) -> LockerRelay:
    return request.app.state.relay
