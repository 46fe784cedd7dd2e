import pytest

from locker_directory.services.lockers import normalizer
from locker_directory.services.lockers.errors import MalformedResponse, NoUsableRecords


def _raw(idx: int, **overrides) -> dict:
    record = {
        "id": f"L{idx}",
        "name": f"Locker {idx}",
        "address": f"{idx} Main Road",
        "city": "Johannesburg",
        "province": "Gauteng",
        "postal_code": "2000",
        "latitude": -26.1 - idx * 0.01,
        "longitude": 28.0 + idx * 0.01,
    }
    record.update(overrides)
    return record


def test_records_without_coordinates_are_dropped():
    records = [
        _raw(1),
        _raw(2, latitude=0, longitude=0),
        _raw(3, latitude=None, longitude=None),
        _raw(4, latitude="not-a-number"),
        {k: v for k, v in _raw(5).items() if k not in ("latitude", "longitude")},
        _raw(6, longitude=0),
    ]

    locations = normalizer.extract(records)

    assert [location.id for location in locations] == ["L1"]


def test_equivalent_payload_shapes_normalize_identically():
    records = [_raw(1), _raw(2), _raw(3, id=None)]

    bare = normalizer.extract(records)
    wrapped_data = normalizer.extract({"data": records})
    wrapped_terminals = normalizer.extract({"terminals": records})

    assert bare == wrapped_data == wrapped_terminals
    assert len(bare) == 3


def test_container_keys_probed_in_priority_order():
    payload = {"results": [_raw(3)], "data": [_raw(2)], "terminals": [_raw(1)]}

    locations = normalizer.extract(payload)

    assert [location.id for location in locations] == ["L1"]


def test_nested_container_is_found():
    payload = {"data": {"lockers": [_raw(1), _raw(2)]}, "meta": {"total": 2}}

    assert len(normalizer.extract(payload)) == 2


def test_id_alias_priority_prefers_earliest_alias():
    record = _raw(1, id="primary", locker_id="secondary", pudo_id="tertiary")
    without_id = _raw(2, id=None, locker_id="secondary", location_id="other")

    first, second = normalizer.extract([record, without_id])

    assert first.id == "primary"
    assert second.id == "secondary"


def test_field_aliases_are_resolved():
    record = {
        "locker_id": "X1",
        "location_name": "Clicks Cresta",
        "street_address": "Cresta Shopping Centre",
        "town": "Randburg",
        "region": "Gauteng",
        "zip_code": "2194",
        "lat": "-26.1089",
        "lng": "27.9616",
        "hours": "Mon-Sun: 8:00-20:00",
        "phone": "011 678 0000",
        "capacity": "24",
    }

    (location,) = normalizer.extract([record])

    assert location.id == "X1"
    assert location.name == "Clicks Cresta"
    assert location.address == "Cresta Shopping Centre"
    assert location.city == "Randburg"
    assert location.province == "Gauteng"
    assert location.postal_code == "2194"
    assert location.latitude == pytest.approx(-26.1089)
    assert location.longitude == pytest.approx(27.9616)
    assert location.opening_hours == "Mon-Sun: 8:00-20:00"
    assert location.contact_number == "011 678 0000"
    assert location.locker_capacity == 24


def test_records_missing_city_or_province_are_dropped():
    records = [_raw(1, city=""), _raw(2, province=None), _raw(3)]

    assert [location.id for location in normalizer.extract(records)] == ["L3"]


@pytest.mark.parametrize(
    "status_fields, expected",
    [
        ({}, True),
        ({"is_active": False}, False),
        ({"active": "yes"}, True),
        ({"status": "inactive"}, False),
        ({"status": "Open"}, True),
        ({"state": "closed"}, False),
        ({"enabled": 0}, False),
        ({"enabled": "1"}, True),
        ({"status": "under review"}, True),
        ({"status": "weird", "enabled": "disabled"}, False),
        ({"is_active": True, "status": "inactive"}, False),
        ({"status": "active", "enabled": False}, False),
        ({"active": "yes", "status": "open"}, True),
    ],
)
def test_active_status_truth_table(status_fields, expected):
    (location,) = normalizer.extract([_raw(1, **status_fields)])

    assert location.is_active is expected


def test_missing_id_gets_deterministic_identifier():
    record = _raw(1, id=None)

    first = normalizer.extract([record])[0]
    second = normalizer.extract([dict(record)])[0]

    assert first.id == second.id
    assert first.id.startswith("locker_")


def test_pudo_lockers_data_schema():
    record = {
        "code": "CG54",
        "name": "Sasol Rivonia Uplifted",
        "latitude": "-26.0531",
        "longitude": "28.0598",
        "address": "Rivonia Road",
        "detailed_address": {
            "formatted_address": "412 Rivonia Rd, Rivonia, Sandton, 2191",
            "locality": "Sandton",
            "province": "Gauteng",
            "postal_code": "2191",
        },
        "openinghours": [
            {"day": "Monday", "start_time": "08:00", "end_time": "17:00"},
            {"day": "Saturday", "start_time": "08:00", "end_time": "13:00"},
        ],
    }

    assert normalizer.detect_schema(record) == "pudo"
    (location,) = normalizer.extract({"lockers": [record]})

    assert location.id == "CG54"
    assert location.city == "Sandton"
    assert location.province == "Gauteng"
    assert location.postal_code == "2191"
    assert location.address.startswith("412 Rivonia Rd")
    assert location.opening_hours == "Monday: 08:00-17:00; Saturday: 08:00-13:00"


def test_geojson_feature_schema():
    feature = {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [28.0567, -26.1076]},
        "properties": {"id": "g1", "name": "Pick n Pay Sandton City", "city": "Sandton", "province": "Gauteng"},
    }

    assert normalizer.detect_schema(feature) == "nested_geometry"
    (location,) = normalizer.extract({"results": [feature]})

    assert location.id == "g1"
    assert location.latitude == pytest.approx(-26.1076)
    assert location.longitude == pytest.approx(28.0567)


def test_nested_location_object_schema():
    record = _raw(1, latitude=None, longitude=None, location={"lat": -33.9, "lng": 18.42})

    (location,) = normalizer.extract([record])

    assert (location.latitude, location.longitude) == (-33.9, 18.42)


def test_non_mapping_records_are_skipped():
    locations = normalizer.extract([_raw(1), "garbage", None, 42])

    assert len(locations) == 1


def test_unrecognised_payload_shape_is_malformed():
    with pytest.raises(MalformedResponse):
        normalizer.extract({"message": "ok", "count": 0})
    with pytest.raises(MalformedResponse):
        normalizer.extract("<html>blocked</html>")


def test_container_without_usable_records():
    with pytest.raises(NoUsableRecords):
        normalizer.extract_usable({"data": [_raw(1, latitude=0, longitude=0)]})
    with pytest.raises(NoUsableRecords):
        normalizer.extract_usable([])


def test_state_holding_a_status_token_is_not_a_province():
    closed = {k: v for k, v in _raw(1, state="closed").items() if k != "province"}
    named = {k: v for k, v in _raw(2, state="Gauteng").items() if k != "province"}

    locations = normalizer.extract([closed, named])

    assert [location.id for location in locations] == ["L2"]
    assert locations[0].province == "Gauteng"
    assert locations[0].is_active is True


@pytest.mark.parametrize("capacity", ["inf", float("inf"), "nan", 1e400])
def test_non_finite_capacity_is_ignored(capacity):
    locations = normalizer.extract([_raw(1), _raw(2, capacity=capacity), _raw(3)])

    assert [location.id for location in locations] == ["L1", "L2", "L3"]
    assert locations[1].locker_capacity is None


def test_extraction_error_drops_only_that_record(monkeypatch: pytest.MonkeyPatch):
    original = normalizer._optional_int

    def exploding(value):
        if value == "boom":
            raise OverflowError("cannot convert")
        return original(value)

    monkeypatch.setattr(normalizer, "_optional_int", exploding)

    locations = normalizer.extract([_raw(1), _raw(2, available_slots="boom"), _raw(3, capacity="12")])

    assert [location.id for location in locations] == ["L1", "L3"]
    assert locations[1].locker_capacity == 12
