"""Configuration loading and resolution into run settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from charging_snapshot.common.constants import (
    DEFAULT_ENDPOINT,
    DEFAULT_OUTFILE_COMPRESSED,
    DEFAULT_OUTFILE_RAW,
    DEFAULT_TIMEOUT_SECONDS,
    OVERPASS_ENDPOINTS,
    TIMEOUT_BUFFER_SECONDS,
    USER_AGENT,
)
from charging_snapshot.common.errors import ConfigError
from charging_snapshot.common.fs import read_yaml
from charging_snapshot.common.schema import validate_positive_int, validate_run_config

DEFAULTS: dict[str, Any] = {
    "overpass_api_endpoint": DEFAULT_ENDPOINT,
    "timeout_seconds": DEFAULT_TIMEOUT_SECONDS,
    "timeout_buffer_seconds": TIMEOUT_BUFFER_SECONDS,
    "keep_intermediate": False,
    "outfile_raw": DEFAULT_OUTFILE_RAW,
    "outfile_compressed": DEFAULT_OUTFILE_COMPRESSED,
    "user_agent": USER_AGENT,
}


@dataclass(frozen=True)
class RunSettings:
    endpoint_url: str
    timeout_seconds: int
    timeout_buffer_seconds: int
    keep_intermediate: bool
    outfile_raw: Path
    outfile_compressed: Path
    user_agent: str = USER_AGENT


def resolve_endpoint(value: str) -> str:
    """Map ``switzerland``/``world`` to their interpreter URL; pass http(s) URLs through."""
    if value in OVERPASS_ENDPOINTS:
        return OVERPASS_ENDPOINTS[value]
    if value.startswith("http://") or value.startswith("https://"):
        return value
    raise ConfigError(
        f"Invalid value '{value}'. Expected 'switzerland', 'world', or a URL starting with http:// or https://"
    )


def load_run_config(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        cfg = read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return validate_run_config(cfg)


def resolve_settings(file_config: Mapping[str, Any] | None, overrides: Mapping[str, Any]) -> RunSettings:
    """Merge built-in defaults, the config file, and explicit CLI values, in that order."""
    merged = dict(DEFAULTS)
    merged.update(file_config or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})

    return RunSettings(
        endpoint_url=resolve_endpoint(merged["overpass_api_endpoint"]),
        timeout_seconds=validate_positive_int(merged["timeout_seconds"], "timeout_seconds"),
        timeout_buffer_seconds=int(merged["timeout_buffer_seconds"]),
        keep_intermediate=bool(merged["keep_intermediate"]),
        outfile_raw=Path(merged["outfile_raw"]),
        outfile_compressed=Path(merged["outfile_compressed"]),
        user_agent=merged["user_agent"],
    )
