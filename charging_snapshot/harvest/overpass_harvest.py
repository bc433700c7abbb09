"""Overpass query construction and download."""

from __future__ import annotations

from charging_snapshot.common.constants import TIMEOUT_BUFFER_SECONDS, USER_AGENT
from charging_snapshot.common.http import HttpClient, TimeoutConfig
from charging_snapshot.common.schema import validate_positive_int

CHARGING_STATION_FILTER = "[amenity=charging_station]"
ELEMENT_SELECTORS = ("node", "area", "relation")


def build_overpass_query(timeout_seconds: int) -> str:
    timeout = validate_positive_int(timeout_seconds, "timeout_seconds")
    selectors = "".join(f"  {selector}{CHARGING_STATION_FILTER};\n" for selector in ELEMENT_SELECTORS)
    return (
        f"[out:json][timeout:{timeout}];\n"
        "(\n"
        f"{selectors}"
        ");\n"
        "out meta qt;"
    )


def transport_timeout(timeout_seconds: int, buffer_seconds: int = TIMEOUT_BUFFER_SECONDS) -> TimeoutConfig:
    total = float(timeout_seconds + buffer_seconds)
    return TimeoutConfig(connect=min(30.0, total), total=total)


def fetch_overpass(
    endpoint_url: str,
    query: str,
    timeout_seconds: int,
    http_client: HttpClient | None = None,
    *,
    buffer_seconds: int = TIMEOUT_BUFFER_SECONDS,
    user_agent: str = USER_AGENT,
) -> bytes:
    owns_client = http_client is None
    client = http_client or HttpClient(user_agent=user_agent)
    try:
        return client.post_text(
            endpoint_url,
            body=query,
            timeout=transport_timeout(timeout_seconds, buffer_seconds),
        )
    finally:
        if owns_client:
            client.close()
