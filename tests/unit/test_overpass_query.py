from __future__ import annotations

import pytest

from charging_snapshot.common.errors import ConfigError
from charging_snapshot.harvest.overpass_harvest import build_overpass_query, fetch_overpass, transport_timeout


def test_build_overpass_query_requests_all_kinds_with_metadata():
    query = build_overpass_query(900)

    assert query.startswith("[out:json][timeout:900];")
    assert "node[amenity=charging_station];" in query
    assert "area[amenity=charging_station];" in query
    assert "relation[amenity=charging_station];" in query
    assert query.endswith("out meta qt;")


def test_build_overpass_query_is_pure():
    assert build_overpass_query(120) == build_overpass_query(120)
    assert "[timeout:120]" in build_overpass_query(120)


@pytest.mark.parametrize("value", [0, -5, True, "900"])
def test_build_overpass_query_rejects_non_positive_timeout(value):
    with pytest.raises(ConfigError):
        build_overpass_query(value)


def test_transport_timeout_adds_fixed_buffer():
    assert transport_timeout(900).total == 930.0
    assert transport_timeout(10).total == 40.0
    assert transport_timeout(10, buffer_seconds=5).total == 15.0


class RecordingClient:
    def __init__(self, body: bytes):
        self.body = body
        self.calls = []
        self.closed = False

    def post_text(self, url, *, body, timeout=None, headers=None):
        self.calls.append({"url": url, "body": body, "timeout": timeout})
        return self.body

    def close(self):
        self.closed = True


def test_fetch_overpass_uses_buffered_transport_timeout():
    client = RecordingClient(b"{}")
    raw = fetch_overpass("https://overpass.example/api/interpreter", "q", 900, client)

    assert raw == b"{}"
    assert client.calls[0]["url"] == "https://overpass.example/api/interpreter"
    assert client.calls[0]["body"] == "q"
    assert client.calls[0]["timeout"].total == 930.0
    assert client.closed is False


def test_fetch_overpass_owns_client_when_none_given(monkeypatch):
    created = []

    class FakeHttpClient(RecordingClient):
        def __init__(self, *, user_agent):
            super().__init__(b'{"elements": []}')
            self.user_agent = user_agent
            created.append(self)

    monkeypatch.setattr("charging_snapshot.harvest.overpass_harvest.HttpClient", FakeHttpClient)

    raw = fetch_overpass("https://overpass.example/api/interpreter", "q", 60, user_agent="charging-snapshot-test")

    assert raw == b'{"elements": []}'
    assert created[0].user_agent == "charging-snapshot-test"
    assert created[0].closed is True
