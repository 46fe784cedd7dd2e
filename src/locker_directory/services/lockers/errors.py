"""Failure taxonomy for locker acquisition and shipping actions."""

from __future__ import annotations

import asyncio
from enum import Enum

import httpx

# Reason-less messages browsers attach to requests blocked by the same-origin policy.
_CORS_SIGNATURES = ("network error", "failed to fetch", "load failed")

CORS_ADVISORY = "CorsBlocked - deploy Proxy"


class ErrorKind(str, Enum):
    NETWORK_UNAVAILABLE = "network_unavailable"
    CORS_BLOCKED = "cors_blocked"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"
    NO_USABLE_RECORDS = "no_usable_records"


class LockerDirectoryError(Exception):
    """Base class for failures raised while acquiring locker data."""

    kind: ErrorKind = ErrorKind.NETWORK_UNAVAILABLE


class NetworkUnavailable(LockerDirectoryError):
    kind = ErrorKind.NETWORK_UNAVAILABLE


class CorsBlocked(LockerDirectoryError):
    """Cross-origin request blocked; a relay deployment is required."""

    kind = ErrorKind.CORS_BLOCKED


class UpstreamError(LockerDirectoryError):
    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedResponse(LockerDirectoryError):
    kind = ErrorKind.MALFORMED_RESPONSE


class NoUsableRecords(LockerDirectoryError):
    kind = ErrorKind.NO_USABLE_RECORDS


def _looks_like_cors(message: str) -> bool:
    text = message.strip().lower()
    return not text or text in _CORS_SIGNATURES


def classify_transport_error(exc: BaseException, *, url: str | None = None) -> LockerDirectoryError:
    """Map a low-level request failure onto the directory error taxonomy."""
    if isinstance(exc, LockerDirectoryError):
        return exc
    target = f" ({url})" if url else ""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        return UpstreamError(
            f"Upstream returned HTTP {response.status_code}{target}",
            status_code=response.status_code,
            body=response.text[:500],
        )
    if isinstance(exc, httpx.TimeoutException):
        return NetworkUnavailable(f"Request timed out{target}")
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return NetworkUnavailable(f"Request timed out{target}")
    if isinstance(exc, (httpx.TransportError, OSError)):
        message = str(exc)
        if _looks_like_cors(message):
            return CorsBlocked(f"Network error without reason{target}; deploy the relay tier")
        return NetworkUnavailable(f"Network failure{target}: {message}")
    if isinstance(exc, ValueError):
        return MalformedResponse(f"Response body is not valid JSON{target}: {exc}")
    return NetworkUnavailable(f"Unexpected transport failure{target}: {exc}")
