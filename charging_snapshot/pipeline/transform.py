"""Response parsing and projection into the snapshot envelope."""

from __future__ import annotations

import json
from typing import Sequence

from charging_snapshot.common.errors import EmptyDatasetError, ParseError
from charging_snapshot.common.models import OutputRecord, OverpassResponse, Snapshot, SourceRecord
from charging_snapshot.common.time_utils import epoch_seconds


def _reject_constant(token: str):
    raise ParseError(f"Failed to parse Overpass API response as JSON: invalid token {token}")


def _decode(raw: bytes):
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise ParseError(f"Failed to parse Overpass API response as JSON: {exc}") from exc


def parse_overpass_response(raw: bytes) -> OverpassResponse:
    payload = _decode(raw)
    if not isinstance(payload, dict):
        raise ParseError("Failed to parse Overpass API response: top level is not an object")
    if "elements" not in payload:
        raise ParseError("Failed to parse Overpass API response: missing field 'elements'")
    elements = payload["elements"]
    if not isinstance(elements, list):
        raise ParseError("Failed to parse Overpass API response: 'elements' is not an array")

    return OverpassResponse(
        version=payload.get("version"),
        generator=payload.get("generator"),
        elements=[SourceRecord.from_dict(element, index) for index, element in enumerate(elements)],
    )


def ensure_not_empty(elements: Sequence[SourceRecord]) -> None:
    if not elements:
        raise EmptyDatasetError()


def transform_elements(elements: Sequence[SourceRecord]) -> Snapshot:
    ensure_not_empty(elements)
    records = [OutputRecord.from_source(element) for element in elements]
    return Snapshot(generated_at=epoch_seconds(), records=records)


def extract_remark(raw: bytes) -> str | None:
    """Return the top-level ``remark`` of a response body, or None. Never raises."""
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, ValueError, TypeError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    remark = payload.get("remark")
    return remark if isinstance(remark, str) else None
