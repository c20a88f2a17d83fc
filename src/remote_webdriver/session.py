"""Session creation against a wire protocol server."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional

from .config import WaitConfig
from .errors import SessionCreationFailed
from .executor import CommandExecutor
from .models import Capabilities, CapabilitiesLike, RawResponse, Session
from .transport import Transport, redact_url

LOGGER = logging.getLogger(__name__)

VENDOR_SESSION_KEY = "webdriver.remote.sessionid"


def _from_location_header(response: RawResponse) -> Optional[str]:
    # Selenium 2.33 and older redirect to /session/<id>.
    location = response.header("Location")
    if not location:
        return None
    session_id = location.strip().rstrip("/").rsplit("/", 1)[-1]
    return session_id or None


def _from_body(response: RawResponse) -> Optional[str]:
    # Selenium 2.34 and newer.
    data = response.json()
    if not data:
        return None
    session_id = data.get("sessionId")
    if isinstance(session_id, str) and session_id:
        return session_id
    return None


def _from_vendor_value(response: RawResponse) -> Optional[str]:
    data = response.json()
    if not data:
        return None
    value = data.get("value")
    if not isinstance(value, Mapping):
        return None
    session_id = value.get(VENDOR_SESSION_KEY)
    if isinstance(session_id, str) and session_id:
        return session_id
    return None


SESSION_ID_RESOLVERS: tuple[Callable[[RawResponse], Optional[str]], ...] = (
    _from_location_header,
    _from_body,
    _from_vendor_value,
)


def resolve_session_id(response: RawResponse) -> Optional[str]:
    """Return the session id from the first response shape that carries one."""

    for resolver in SESSION_ID_RESOLVERS:
        session_id = resolver(response)
        if session_id:
            LOGGER.debug("Resolved session id via %s", resolver.__name__)
            return session_id
    return None


class SessionInitiator:
    """Open sessions by negotiating capabilities with the server."""

    def __init__(self, transport: Transport, *, wait: Optional[WaitConfig] = None) -> None:
        self._transport = transport
        self._wait = wait or WaitConfig()

    @property
    def transport(self) -> Transport:
        return self._transport

    def create_session(self, server_url: str, capabilities: CapabilitiesLike) -> Session:
        if isinstance(capabilities, Capabilities):
            desired = capabilities.to_wire()
        else:
            desired = dict(capabilities)
        executor = CommandExecutor(server_url, self._transport)
        LOGGER.info(
            "Creating %s session at %s",
            desired.get("browserName", "unknown"),
            redact_url(executor.server_url),
        )
        response = executor.execute("POST", "/session", {"desiredCapabilities": desired})

        session_id = resolve_session_id(response)
        if not session_id:
            raise SessionCreationFailed(_creation_failure_message(server_url, response), response)

        LOGGER.info("Session %s created", session_id)
        return Session(
            server_url=executor.server_url,
            session_id=session_id,
            browser_name=desired.get("browserName"),
            capabilities=_negotiated_capabilities(response, desired),
            wait=self._wait,
        )


def _negotiated_capabilities(response: RawResponse, desired: dict[str, Any]) -> dict[str, Any]:
    value = response.value
    if isinstance(value, Mapping) and value and VENDOR_SESSION_KEY not in value:
        return dict(value)
    return dict(desired)


def _creation_failure_message(server_url: str, response: RawResponse) -> str:
    message = f"Did not get a session id from {redact_url(server_url)}\n"
    if response.body:
        return message + response.body
    if response.headers:
        return message + "\n".join(f"{key}: {value}" for key, value in response.headers.items())
    return message + "No response from server."
