"""Minimal strict schema for the YAML run config."""

from __future__ import annotations

from charging_snapshot.common.errors import ConfigError

RUN_CONFIG_TYPES: dict[str, tuple[type, ...]] = {
    "overpass_api_endpoint": (str,),
    "timeout_seconds": (int,),
    "timeout_buffer_seconds": (int,),
    "keep_intermediate": (bool,),
    "outfile_raw": (str,),
    "outfile_compressed": (str,),
    "user_agent": (str,),
}


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str) -> None:
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_types(obj: dict, types: dict[str, tuple[type, ...]], ctx: str) -> None:
    for key, value in obj.items():
        expected = types[key]
        # bool is an int subclass; only accept it where bool is asked for.
        if isinstance(value, bool) and bool not in expected:
            raise ConfigError(f"Invalid type for {ctx}.{key}: expected {expected[0].__name__}, got bool")
        if not isinstance(value, expected):
            raise ConfigError(
                f"Invalid type for {ctx}.{key}: expected {expected[0].__name__}, got {type(value).__name__}"
            )


def validate_positive_int(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return value


def validate_run_config(cfg: object) -> dict:
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError("run config must be a mapping")
    _assert_no_unknown_keys(cfg, set(RUN_CONFIG_TYPES), "run config")
    _assert_types(cfg, RUN_CONFIG_TYPES, "run config")
    if "timeout_seconds" in cfg:
        validate_positive_int(cfg["timeout_seconds"], "timeout_seconds")
    if "timeout_buffer_seconds" in cfg and cfg["timeout_buffer_seconds"] < 0:
        raise ConfigError("timeout_buffer_seconds must not be negative")
    return cfg
