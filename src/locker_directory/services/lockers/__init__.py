"""Locker directory services."""

from .cache import LockerCache
from .errors import (
    CorsBlocked,
    ErrorKind,
    LockerDirectoryError,
    MalformedResponse,
    NetworkUnavailable,
    NoUsableRecords,
    UpstreamError,
)
from .relay import LockerRelay, RelayResult
from .service import FetchResult, LockerDirectoryService, TierOutcome
from .transport import DirectTransport, ProxyTransport, check_relay_health

__all__ = [
    "LockerCache",
    "LockerDirectoryService",
    "FetchResult",
    "TierOutcome",
    "LockerRelay",
    "RelayResult",
    "ProxyTransport",
    "DirectTransport",
    "check_relay_health",
    "ErrorKind",
    "LockerDirectoryError",
    "NetworkUnavailable",
    "CorsBlocked",
    "UpstreamError",
    "MalformedResponse",
    "NoUsableRecords",
]
