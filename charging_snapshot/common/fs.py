"""Filesystem helpers."""

from __future__ import annotations

import gzip
import json
import logging
from pathlib import Path
from typing import Any

from charging_snapshot.common.constants import GZIP_COMPRESSLEVEL, SNAPSHOT_JSON_INDENT
from charging_snapshot.common.errors import IoError

logger = logging.getLogger(__name__)

SIZE_UNITS = (
    ("B", 1),
    ("K", 1024),
    ("M", 1024 * 1024),
    ("G", 1024 * 1024 * 1024),
)


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_bytes(path: Path, payload: bytes) -> Path:
    try:
        ensure_dir(path.parent)
        path.write_bytes(payload)
    except OSError as exc:
        raise IoError(f"Failed to write file: {path}: {exc}") from exc
    return path


def write_gzip_json(path: Path, payload: Any) -> Path:
    body = json.dumps(payload, ensure_ascii=False, indent=SNAPSHOT_JSON_INDENT, allow_nan=False).encode("utf-8")
    try:
        ensure_dir(path.parent)
        with gzip.open(path, "wb", compresslevel=GZIP_COMPRESSLEVEL) as f:
            f.write(body)
    except OSError as exc:
        raise IoError(f"Failed to create output file: {path}: {exc}") from exc
    return path


def format_bytes(size: int) -> str:
    for unit, factor in reversed(SIZE_UNITS[1:]):
        if size >= factor:
            return f"{size / factor:.1f}{unit}"
    return f"{size}B"


def file_size_human(path: Path) -> str:
    try:
        size = path.stat().st_size
    except OSError as exc:
        logger.debug("Failed to get file size for '%s': %s", path, exc)
        return "unknown"
    return format_bytes(size)
