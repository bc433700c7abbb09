"""Raw response and compressed snapshot export."""

from __future__ import annotations

from pathlib import Path

from charging_snapshot.common.fs import write_bytes, write_gzip_json
from charging_snapshot.common.models import Snapshot


def write_raw_response(path: Path, raw: bytes) -> Path:
    return write_bytes(path, raw)


def write_snapshot(path: Path, snapshot: Snapshot) -> Path:
    return write_gzip_json(path, snapshot.to_dict())
