"""First-party relay request/response schemas (camelCase wire format)."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel


class RelayRequest(BaseModel):
    apiKey: Optional[str] = None
    endpoints: Optional[List[str]] = None
    useSandbox: bool = False
    test: bool = False


class RelayResponse(BaseModel):
    success: bool
    lockers: List[Any] = []
    error: Optional[str] = None
    message: Optional[str] = None
    source: Optional[str] = None
    method: Optional[str] = None
    strategy: Optional[str] = None
    totalPages: Optional[int] = None
    totalCount: int = 0
    endpoints: Optional[List[str]] = None
    timestamp: Optional[str] = None
