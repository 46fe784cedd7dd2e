"""Normalization of heterogeneous upstream locker payloads.

Upstream listings arrive as a bare array or wrapped in one of several
container keys, and individual records use inconsistent field names.
Each record is routed through the first matching schema probe; the generic
alias extractor handles anything the probes do not recognise. Records that
violate the location invariants are dropped one at a time.
"""

from __future__ import annotations

import hashlib
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from ...models.domain import LockerLocation
from ..geospatial import is_valid_coordinate
from .errors import MalformedResponse, NoUsableRecords

logger = logging.getLogger(__name__)

CONTAINER_KEYS: tuple[str, ...] = ("terminals", "lockers", "data", "results", "items")

ID_ALIASES = ("id", "locker_id", "location_id", "pudo_id", "terminal_id", "code")
NAME_ALIASES = ("name", "location_name", "terminal_name", "title")
ADDRESS_ALIASES = ("address", "street_address", "full_address", "formatted_address", "address_line_1")
CITY_ALIASES = ("city", "town", "locality", "suburb")
PROVINCE_ALIASES = ("province", "region", "administrative_area", "state")
POSTAL_CODE_ALIASES = ("postal_code", "postalCode", "zip_code", "zip", "postcode")
LATITUDE_ALIASES = ("latitude", "lat")
LONGITUDE_ALIASES = ("longitude", "lng", "lon", "long")
HOURS_ALIASES = ("opening_hours", "openinghours", "hours", "operating_hours", "trading_hours")
CONTACT_ALIASES = ("contact_number", "phone", "telephone", "contact_phone")
CAPACITY_ALIASES = ("locker_capacity", "capacity")
SLOTS_ALIASES = ("available_slots", "slots_available")
STATUS_FIELDS = ("is_active", "active", "status", "state", "enabled")

TRUTHY_STATUS = frozenset({"active", "enabled", "open", "1", "yes", "true"})
FALSY_STATUS = frozenset({"inactive", "disabled", "closed", "0", "no", "false"})

DEFAULT_NAME = "Unknown Locker"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def first_present(record: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Return the first non-null, non-empty value among ``aliases``."""
    for alias in aliases:
        value = record.get(alias)
        if not _is_blank(value):
            return value
    return None


def _text(value: Any) -> str:
    if _is_blank(value) or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def parse_coordinate(value: Any) -> float:
    """Parse a coordinate; anything non-numeric resolves to 0 (unset)."""
    if isinstance(value, bool) or _is_blank(value):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool) or _is_blank(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if math.isfinite(number) else None


def interpret_status(value: Any) -> bool | None:
    """Map a boolean/string/numeric status signal to active/inactive.

    Returns None when the value is not a recognised status signal.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUTHY_STATUS:
            return True
        if token in FALSY_STATUS:
            return False
    return None


def resolve_active(record: Mapping[str, Any]) -> bool:
    """Any explicit falsy status signal deactivates the record; otherwise it stays active."""
    for field in STATUS_FIELDS:
        if field in record and interpret_status(record[field]) is False:
            return False
    return True


def resolve_province(record: Mapping[str, Any]) -> Any:
    # "state" doubles as a status field; a status token is never a province.
    for alias in PROVINCE_ALIASES:
        value = record.get(alias)
        if _is_blank(value):
            continue
        if alias in STATUS_FIELDS and interpret_status(value) is not None:
            continue
        return value
    return None


def stable_locker_id(name: str, latitude: float, longitude: float) -> str:
    digest = hashlib.sha1(f"{name}|{latitude:.6f}|{longitude:.6f}".encode("utf-8")).hexdigest()
    return f"locker_{digest[:12]}"


def format_opening_hours(value: Any) -> str:
    """Flatten structured opening hours into free text."""
    if isinstance(value, list):
        parts: list[str] = []
        for entry in value:
            if isinstance(entry, Mapping):
                day = _text(entry.get("day") or entry.get("day_of_week"))
                start = _text(entry.get("start_time") or entry.get("open") or entry.get("from"))
                end = _text(entry.get("end_time") or entry.get("close") or entry.get("to"))
                span = f"{start}-{end}" if start and end else start or end
                parts.append(f"{day}: {span}" if day else span)
            else:
                parts.append(_text(entry))
        return "; ".join(part for part in parts if part)
    if isinstance(value, Mapping):
        return "; ".join(f"{day}: {_text(hours)}" for day, hours in value.items() if _text(hours))
    return _text(value)


@dataclass(frozen=True, slots=True)
class RecordFields:
    """Intermediate field bag produced by a schema extractor."""

    id: Any
    name: Any
    address: Any
    city: Any
    province: Any
    postal_code: Any
    latitude: Any
    longitude: Any
    opening_hours: Any
    contact_number: Any
    is_active: bool
    locker_capacity: Any = None
    available_slots: Any = None


def extract_generic(record: Mapping[str, Any]) -> RecordFields:
    """Resolve every canonical field through its ordered alias list."""
    return RecordFields(
        id=first_present(record, ID_ALIASES),
        name=first_present(record, NAME_ALIASES),
        address=first_present(record, ADDRESS_ALIASES),
        city=first_present(record, CITY_ALIASES),
        province=resolve_province(record),
        postal_code=first_present(record, POSTAL_CODE_ALIASES),
        latitude=first_present(record, LATITUDE_ALIASES),
        longitude=first_present(record, LONGITUDE_ALIASES),
        opening_hours=first_present(record, HOURS_ALIASES),
        contact_number=first_present(record, CONTACT_ALIASES),
        is_active=resolve_active(record),
        locker_capacity=first_present(record, CAPACITY_ALIASES),
        available_slots=first_present(record, SLOTS_ALIASES),
    )


def _is_pudo_record(record: Mapping[str, Any]) -> bool:
    return "code" in record and isinstance(record.get("detailed_address"), Mapping)


def extract_pudo(record: Mapping[str, Any]) -> RecordFields:
    """PUDO ``lockers-data`` records: code + structured detailed_address."""
    detail = record["detailed_address"]
    place = record.get("place") if isinstance(record.get("place"), Mapping) else {}
    generic = extract_generic(record)
    return RecordFields(
        id=first_present(record, ID_ALIASES),
        name=generic.name,
        address=first_present(detail, ("formatted_address",)) or generic.address,
        city=first_present(detail, ("locality", "city", "sublocality"))
        or first_present(place, ("town",))
        or generic.city,
        province=first_present(detail, ("province", "administrative_area_level_1")) or generic.province,
        postal_code=first_present(detail, ("postal_code",))
        or first_present(place, ("postalCode", "postal_code"))
        or generic.postal_code,
        latitude=generic.latitude,
        longitude=generic.longitude,
        opening_hours=generic.opening_hours,
        contact_number=generic.contact_number,
        is_active=generic.is_active,
        locker_capacity=generic.locker_capacity,
        available_slots=generic.available_slots,
    )


def _is_nested_geometry_record(record: Mapping[str, Any]) -> bool:
    if isinstance(record.get("location"), Mapping):
        return True
    geometry = record.get("geometry")
    return isinstance(geometry, Mapping) and isinstance(geometry.get("coordinates"), list)


def extract_nested_geometry(record: Mapping[str, Any]) -> RecordFields:
    """Records carrying coordinates under ``location`` or GeoJSON ``geometry``."""
    generic = extract_generic(record)
    latitude, longitude = generic.latitude, generic.longitude
    location = record.get("location")
    if isinstance(location, Mapping):
        latitude = first_present(location, LATITUDE_ALIASES) or latitude
        longitude = first_present(location, LONGITUDE_ALIASES) or longitude
    geometry = record.get("geometry")
    if isinstance(geometry, Mapping):
        coordinates = geometry.get("coordinates")
        if isinstance(coordinates, list) and len(coordinates) >= 2:
            # GeoJSON order is [lon, lat]
            longitude, latitude = coordinates[0], coordinates[1]
    properties = record.get("properties")
    if isinstance(properties, Mapping):
        props = extract_generic(properties)
        return RecordFields(
            id=generic.id or props.id,
            name=generic.name or props.name,
            address=generic.address or props.address,
            city=generic.city or props.city,
            province=generic.province or props.province,
            postal_code=generic.postal_code or props.postal_code,
            latitude=latitude,
            longitude=longitude,
            opening_hours=generic.opening_hours or props.opening_hours,
            contact_number=generic.contact_number or props.contact_number,
            is_active=generic.is_active and props.is_active,
            locker_capacity=generic.locker_capacity or props.locker_capacity,
            available_slots=generic.available_slots or props.available_slots,
        )
    return RecordFields(
        id=generic.id,
        name=generic.name,
        address=generic.address,
        city=generic.city,
        province=generic.province,
        postal_code=generic.postal_code,
        latitude=latitude,
        longitude=longitude,
        opening_hours=generic.opening_hours,
        contact_number=generic.contact_number,
        is_active=generic.is_active,
        locker_capacity=generic.locker_capacity,
        available_slots=generic.available_slots,
    )


SchemaProbe = tuple[str, Callable[[Mapping[str, Any]], bool], Callable[[Mapping[str, Any]], RecordFields]]

SCHEMA_PROBES: tuple[SchemaProbe, ...] = (
    ("pudo", _is_pudo_record, extract_pudo),
    ("nested_geometry", _is_nested_geometry_record, extract_nested_geometry),
)


def detect_schema(record: Mapping[str, Any]) -> str:
    for name, probe, _ in SCHEMA_PROBES:
        if probe(record):
            return name
    return "generic"


def _extract_fields(record: Mapping[str, Any]) -> RecordFields:
    for _, probe, extractor in SCHEMA_PROBES:
        if probe(record):
            return extractor(record)
    return extract_generic(record)


def to_location(record: Mapping[str, Any]) -> LockerLocation | None:
    """Build a canonical location from one raw record, or None when invalid."""
    fields = _extract_fields(record)
    latitude = parse_coordinate(fields.latitude)
    longitude = parse_coordinate(fields.longitude)
    if not is_valid_coordinate(latitude, longitude):
        return None
    city = _text(fields.city)
    province = _text(fields.province)
    if not city or not province:
        return None

    name = _text(fields.name) or DEFAULT_NAME
    locker_id = _text(fields.id) or stable_locker_id(name, latitude, longitude)
    return LockerLocation(
        id=locker_id,
        name=name,
        address=_text(fields.address),
        city=city,
        province=province,
        postal_code=_text(fields.postal_code),
        latitude=latitude,
        longitude=longitude,
        opening_hours=format_opening_hours(fields.opening_hours),
        contact_number=_text(fields.contact_number),
        is_active=fields.is_active,
        locker_capacity=_optional_int(fields.locker_capacity),
        available_slots=_optional_int(fields.available_slots),
    )


def find_records(raw: Any, *, depth: int = 0) -> list[Any] | None:
    """Locate the record array in a payload, probing container keys in priority order."""
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, Mapping):
        return None
    for key in CONTAINER_KEYS:
        value = raw.get(key)
        if isinstance(value, list):
            return value
    if depth == 0:
        for key in CONTAINER_KEYS:
            value = raw.get(key)
            if isinstance(value, Mapping):
                nested = find_records(value, depth=1)
                if nested is not None:
                    return nested
    return None


def normalize_records(records: Iterable[Any]) -> list[LockerLocation]:
    locations: list[LockerLocation] = []
    dropped = 0
    for record in records:
        if not isinstance(record, Mapping):
            dropped += 1
            continue
        try:
            location = to_location(record)
        except (TypeError, ValueError, OverflowError, KeyError, AttributeError) as exc:
            dropped += 1
            logger.warning(f"Dropping locker record that failed extraction ({type(exc).__name__}: {exc})")
            continue
        if location is None:
            dropped += 1
            logger.debug(f"Dropping locker record failing invariants: {record!r:.200}")
            continue
        locations.append(location)
    if dropped:
        logger.info(f"Normalizer dropped {dropped} invalid locker records, kept {len(locations)}")
    return locations


def extract(raw: Any) -> list[LockerLocation]:
    """Map an arbitrary upstream payload to canonical locations.

    Raises MalformedResponse when no recognisable container is present.
    """
    records = find_records(raw)
    if records is None:
        keys = sorted(raw.keys()) if isinstance(raw, Mapping) else type(raw).__name__
        raise MalformedResponse(f"No locker container found in response (shape: {keys})")
    return normalize_records(records)


def extract_usable(raw: Any) -> list[LockerLocation]:
    """Like :func:`extract` but treats an empty result as a failure."""
    locations = extract(raw)
    if not locations:
        raise NoUsableRecords("Locker container present but no record passed validation")
    return locations
