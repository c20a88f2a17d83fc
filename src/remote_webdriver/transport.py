"""HTTP transport performing one wire protocol exchange at a time."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from .config import TransportConfig
from .errors import TransportFailure
from .models import RawResponse

LOGGER = logging.getLogger(__name__)


class Transport(ABC):
    """Interface for sending a single HTTP request."""

    @abstractmethod
    def request(self, method: str, url: str, body: Optional[str] = None) -> RawResponse:
        """Send one request and return headers and body, or raise TransportFailure."""

    def close(self) -> None:
        """Release any held connections."""


class HttpxTransport(Transport):
    """Transport backed by a synchronous :class:`httpx.Client`.

    Redirects are not followed: legacy servers answer session creation with a
    303 whose ``Location`` header carries the new session id.
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        *,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config or TransportConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify,
            follow_redirects=False,
        )

    def request(self, method: str, url: str, body: Optional[str] = None) -> RawResponse:
        headers = {
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }
        content: Optional[bytes] = None
        if body is not None:
            headers["Content-Type"] = "application/json;charset=UTF-8"
            content = body.encode("utf-8")
        try:
            response = self._client.request(
                method,
                url,
                content=content,
                headers=headers,
                follow_redirects=False,
            )
        except httpx.HTTPError as exc:
            LOGGER.debug("Transport error for %s %s: %s", method, redact_url(url), exc)
            raise TransportFailure(f"{method} {redact_url(url)} failed: {exc}") from exc
        text = response.text if response.content else None
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=text,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def redact_url(url: str) -> str:
    """Hide credentials embedded in a URL before it is logged."""

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return url
    if not parsed.password:
        return url
    return str(parsed.copy_with(username=parsed.username, password="xxxxx"))
