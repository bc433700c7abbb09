from __future__ import annotations

import pytest

from charging_snapshot.common.errors import ParseError
from charging_snapshot.common.models import ElementKind, OutputRecord, Snapshot, SourceRecord


def _element(**overrides):
    element = {
        "type": "node",
        "id": 42,
        "lat": 47.0,
        "lon": 8.0,
        "timestamp": "2024-01-01T00:00:00Z",
        "version": 3,
        "changeset": 555,
        "user": "alice",
        "uid": 7,
        "tags": {"amenity": "charging_station", "operator": "ewz"},
    }
    element.update(overrides)
    return element


def test_source_record_from_dict_reads_all_fields():
    record = SourceRecord.from_dict(_element())

    assert record.kind is ElementKind.NODE
    assert record.id == 42
    assert record.position == (47.0, 8.0)
    assert record.observed_at == "2024-01-01T00:00:00Z"
    assert record.revision == 3
    assert record.changeset == 555
    assert record.editor_uid == 7
    assert record.editor_name == "alice"
    assert record.attributes == {"amenity": "charging_station", "operator": "ewz"}


def test_optional_fields_may_be_missing():
    element = _element()
    for key in ("lat", "lon", "changeset", "user", "uid"):
        del element[key]

    record = SourceRecord.from_dict(element)

    assert record.position is None
    assert record.changeset is None
    assert record.editor_uid is None
    assert record.editor_name is None


def test_integer_coordinates_become_floats():
    record = SourceRecord.from_dict(_element(lat=47, lon=8))
    assert isinstance(record.lat, float)
    assert record.position == (47.0, 8.0)


@pytest.mark.parametrize("kind", ["area", "relation"])
def test_area_and_relation_kinds(kind):
    assert SourceRecord.from_dict(_element(type=kind)).kind.value == kind


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "way"},
        {"type": None},
        {"id": -1},
        {"id": 2**64},
        {"id": "42"},
        {"id": True},
        {"version": 2**32},
        {"timestamp": 1704067200},
        {"tags": ["amenity"]},
        {"tags": {"capacity": 4}},
        {"lat": "47.0"},
        {"user": 12},
    ],
)
def test_invalid_fields_raise_parse_error(overrides):
    with pytest.raises(ParseError):
        SourceRecord.from_dict(_element(**overrides))


def test_missing_required_field_names_the_field():
    element = _element()
    del element["tags"]
    with pytest.raises(ParseError, match="'tags'"):
        SourceRecord.from_dict(element, index=3)


def test_output_record_drops_changeset_and_uid():
    out = OutputRecord.from_source(SourceRecord.from_dict(_element())).to_dict()

    assert list(out) == ["id", "lat", "lon", "timestamp", "type", "version", "user", "tags"]
    assert "changeset" not in out
    assert "uid" not in out
    assert out["type"] == "node"


def test_output_record_omits_absent_optional_fields():
    element = _element(type="relation")
    for key in ("lat", "lon", "user"):
        del element[key]

    out = OutputRecord.from_source(SourceRecord.from_dict(element)).to_dict()

    assert "lat" not in out
    assert "lon" not in out
    assert "user" not in out
    assert None not in out.values()


def test_snapshot_count_tracks_records():
    records = [OutputRecord.from_source(SourceRecord.from_dict(_element(id=i))) for i in (3, 1, 2)]
    snapshot = Snapshot(generated_at=1700000000, records=records)

    payload = snapshot.to_dict()
    assert snapshot.record_count == 3
    assert payload["timestamp"] == 1700000000
    assert payload["count"] == 3
    assert [item["id"] for item in payload["elements"]] == [3, 1, 2]


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), 10**400])
def test_non_finite_coordinates_raise_parse_error(value):
    with pytest.raises(ParseError):
        SourceRecord.from_dict(_element(lat=value))
