"""HTTP client with a whole-call deadline for long-running Overpass queries."""

from __future__ import annotations

import time
from dataclasses import dataclass
from types import TracebackType

import requests

from charging_snapshot.common.constants import DOWNLOAD_CHUNK_SIZE, USER_AGENT
from charging_snapshot.common.errors import RemoteError, TransportError


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    total: float = 120.0


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.user_agent = user_agent
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        status = response.status_code
        if not 200 <= status < 300:
            raise RemoteError(status, f"HTTP request to {url} failed with status: {status}")

    def request_bytes(
        self,
        method: str,
        url: str,
        *,
        data: str | bytes | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> bytes:
        """Send one request and return the complete body.

        ``timeout.total`` is both the socket read timeout and a deadline checked
        after every body chunk, so a body that trickles in past the deadline is
        cut off. A read that stalls once the deadline is near can still block for
        up to another ``total`` before the check runs.
        """
        req_timeout = timeout or self.timeout
        deadline = time.monotonic() + req_timeout.total

        try:
            response = self.session.request(
                method=method,
                url=url,
                data=data,
                headers=self._headers(headers),
                timeout=(min(req_timeout.connect, req_timeout.total), req_timeout.total),
                stream=True,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Failed to send request to {url}: {exc}") from exc

        try:
            self._raise_for_status(response, url)
            chunks: list[bytes] = []
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise TransportError(f"Response from {url} not complete after {req_timeout.total:g} seconds")
                if chunk:
                    chunks.append(chunk)
        except requests.RequestException as exc:
            raise TransportError(f"Failed to read response body from {url}: {exc}") from exc
        finally:
            response.close()

        return b"".join(chunks)

    def post_text(
        self,
        url: str,
        *,
        body: str,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> bytes:
        merged = {"Content-Type": "text/plain"}
        if headers:
            merged.update(headers)
        return self.request_bytes(
            "POST",
            url,
            data=body.encode("utf-8"),
            headers=merged,
            timeout=timeout,
        )
