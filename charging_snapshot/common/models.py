"""Data models for Overpass elements and the persisted snapshot."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from charging_snapshot.common.errors import ParseError

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class ElementKind(str, Enum):
    NODE = "node"
    AREA = "area"
    RELATION = "relation"


def _require(element: dict, key: str, ctx: str) -> Any:
    if key not in element or element[key] is None:
        raise ParseError(f"Missing field '{key}' in {ctx}")
    return element[key]


def _unsigned(value: Any, key: str, ctx: str, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ParseError(f"Invalid value for '{key}' in {ctx}: expected unsigned integer, got {value!r}")
    return value


def _optional_unsigned(element: dict, key: str, ctx: str) -> int | None:
    value = element.get(key)
    if value is None:
        return None
    return _unsigned(value, key, ctx, U64_MAX)


def _optional_float(element: dict, key: str, ctx: str) -> float | None:
    value = element.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Invalid value for '{key}' in {ctx}: expected number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ParseError(f"Invalid value for '{key}' in {ctx}: number out of range") from exc
    if not math.isfinite(number):
        raise ParseError(f"Invalid value for '{key}' in {ctx}: expected finite number, got {value!r}")
    return number


def _string(value: Any, key: str, ctx: str) -> str:
    if not isinstance(value, str):
        raise ParseError(f"Invalid value for '{key}' in {ctx}: expected string, got {value!r}")
    return value


def _tags(value: Any, ctx: str) -> dict[str, str]:
    if not isinstance(value, dict):
        raise ParseError(f"Invalid value for 'tags' in {ctx}: expected object")
    for key, tag_value in value.items():
        if not isinstance(tag_value, str):
            raise ParseError(f"Invalid tag '{key}' in {ctx}: expected string value, got {tag_value!r}")
    return dict(value)


@dataclass(frozen=True)
class SourceRecord:
    kind: ElementKind
    id: int
    observed_at: str
    revision: int
    attributes: dict[str, str]
    lat: float | None = None
    lon: float | None = None
    changeset: int | None = None
    editor_uid: int | None = None
    editor_name: str | None = None

    @property
    def position(self) -> tuple[float, float] | None:
        if self.lat is None or self.lon is None:
            return None
        return (self.lat, self.lon)

    @classmethod
    def from_dict(cls, element: Any, index: int = 0) -> "SourceRecord":
        ctx = f"elements[{index}]"
        if not isinstance(element, dict):
            raise ParseError(f"Invalid {ctx}: expected object")

        raw_kind = _require(element, "type", ctx)
        try:
            kind = ElementKind(raw_kind)
        except ValueError as exc:
            raise ParseError(f"Unsupported element type in {ctx}: {raw_kind!r}") from exc

        editor_name = element.get("user")
        if editor_name is not None:
            editor_name = _string(editor_name, "user", ctx)

        return cls(
            kind=kind,
            id=_unsigned(_require(element, "id", ctx), "id", ctx, U64_MAX),
            observed_at=_string(_require(element, "timestamp", ctx), "timestamp", ctx),
            revision=_unsigned(_require(element, "version", ctx), "version", ctx, U32_MAX),
            attributes=_tags(_require(element, "tags", ctx), ctx),
            lat=_optional_float(element, "lat", ctx),
            lon=_optional_float(element, "lon", ctx),
            changeset=_optional_unsigned(element, "changeset", ctx),
            editor_uid=_optional_unsigned(element, "uid", ctx),
            editor_name=editor_name,
        )


@dataclass(frozen=True)
class OverpassResponse:
    version: Any
    generator: Any
    elements: list[SourceRecord]


@dataclass(frozen=True)
class OutputRecord:
    id: int
    observed_at: str
    kind: ElementKind
    revision: int
    attributes: dict[str, str]
    lat: float | None = None
    lon: float | None = None
    editor_name: str | None = None

    @classmethod
    def from_source(cls, record: SourceRecord) -> "OutputRecord":
        return cls(
            id=record.id,
            observed_at=record.observed_at,
            kind=record.kind,
            revision=record.revision,
            attributes=record.attributes,
            lat=record.lat,
            lon=record.lon,
            editor_name=record.editor_name,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id}
        if self.lat is not None:
            out["lat"] = self.lat
        if self.lon is not None:
            out["lon"] = self.lon
        out["timestamp"] = self.observed_at
        out["type"] = self.kind.value
        out["version"] = self.revision
        if self.editor_name is not None:
            out["user"] = self.editor_name
        out["tags"] = dict(self.attributes)
        return out


@dataclass(frozen=True)
class Snapshot:
    generated_at: int
    records: list[OutputRecord] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.generated_at,
            "count": self.record_count,
            "elements": [record.to_dict() for record in self.records],
        }
