"""Command execution: send one command and decode the status envelope."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .errors import (
    ElementNotVisible,
    NoActiveSession,
    NoSuchElement,
    OverParallelLimit,
    StaleElementReference,
    UnknownStatusCode,
    WireFailure,
)
from .models import Command, RawResponse
from .status import StatusEntry, StatusKind, find
from .transport import Transport, redact_url

LOGGER = logging.getLogger(__name__)

SESSION_PLACEHOLDER = ":sessionId"
PARALLEL_LIMIT_MARKER = "Please upgrade to add more parallel sessions"

_FAILURE_TYPES: dict[StatusKind, type[WireFailure]] = {
    StatusKind.NO_SUCH_ELEMENT: NoSuchElement,
    StatusKind.STALE_ELEMENT_REFERENCE: StaleElementReference,
    StatusKind.ELEMENT_NOT_VISIBLE: ElementNotVisible,
}


@dataclass(frozen=True)
class CommandOutcome:
    """Tagged result of one command.

    ``entry`` is ``None`` when the body was not a protocol envelope (for
    example a raw screenshot); such responses are always successful.
    """

    command: Command
    response: RawResponse
    entry: Optional[StatusEntry] = None
    error: Optional[WireFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[StatusKind]:
        if self.entry is None:
            return None
        return self.entry.kind

    @property
    def over_parallel_limit(self) -> bool:
        return isinstance(self.error, OverParallelLimit)

    def unwrap(self) -> RawResponse:
        """Return the response, raising the failure if the command failed."""

        if self.error is not None:
            raise self.error
        return self.response

    @property
    def value(self) -> Any:
        return self.unwrap().value


class CommandExecutor:
    """Serialize commands, send them through a transport and decode replies."""

    def __init__(
        self,
        server_url: str,
        transport: Transport,
        *,
        session_id: Optional[str] = None,
    ) -> None:
        self._server_url = server_url.rstrip("/")
        self._transport = transport
        self._session_id = session_id or None

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def transport(self) -> Transport:
        return self._transport

    def for_session(self, session_id: str) -> "CommandExecutor":
        """Return an executor bound to *session_id* sharing this transport."""

        return CommandExecutor(self._server_url, self._transport, session_id=session_id)

    def build_url(self, path: str) -> str:
        if SESSION_PLACEHOLDER in path:
            if not self._session_id:
                raise NoActiveSession(f"Command {path!r} requires an active session")
            path = path.replace(SESSION_PLACEHOLDER, self._session_id)
        return self._server_url + path

    def send(self, method: str, path: str, payload: Any = None) -> CommandOutcome:
        """Send a command and return its outcome without raising wire failures.

        Transport failures and unknown status codes are fatal and always raise.
        """

        command = Command(method=method, path=path, payload=payload)
        url = self.build_url(path)
        body = json.dumps(payload) if payload is not None else None
        LOGGER.debug("%s %s %s", method, path, body or "")
        response = self._transport.request(method, url, body)
        return self._decode(command, url, body, response)

    def execute(self, method: str, path: str, payload: Any = None) -> RawResponse:
        """Send a command and return the raw response, raising on failure."""

        return self.send(method, path, payload).unwrap()

    def execute_value(self, method: str, path: str, payload: Any = None) -> Any:
        """Send a command and return the ``value`` of its envelope."""

        return self.execute(method, path, payload).value

    def _decode(
        self,
        command: Command,
        url: str,
        body: Optional[str],
        response: RawResponse,
    ) -> CommandOutcome:
        data = response.json()
        if data is None or "status" not in data:
            return CommandOutcome(command=command, response=response)

        code = data["status"]
        if isinstance(code, bool) or not isinstance(code, int):
            raise UnknownStatusCode(code, response.body)
        entry = find(code)
        if entry is None:
            raise UnknownStatusCode(code, response.body)
        if entry.is_success:
            return CommandOutcome(command=command, response=response, entry=entry)

        server_message = _server_message(data)
        message = _diagnostic(entry, command.method, redact_url(url), body, server_message, response.body)
        LOGGER.debug("Command failed: %s", message)
        failure_type = _FAILURE_TYPES.get(entry.kind, WireFailure)
        if entry.kind is StatusKind.UNKNOWN_ERROR and PARALLEL_LIMIT_MARKER in message:
            failure_type = OverParallelLimit
        error = failure_type(
            message,
            entry=entry,
            response=response,
            server_message=server_message,
        )
        return CommandOutcome(command=command, response=response, entry=entry, error=error)


def _server_message(data: dict[str, Any]) -> Optional[str]:
    value = data.get("value")
    if isinstance(value, dict) and value.get("message") is not None:
        return str(value["message"])
    return None


def _diagnostic(
    entry: StatusEntry,
    method: str,
    url: str,
    payload: Optional[str],
    server_message: Optional[str],
    raw_body: Optional[str],
) -> str:
    lines = [
        f"{entry.code} - {entry.kind.value} - {entry.description}",
        f"Request: {method} {url}",
        f"Payload: {payload or ''}",
    ]
    if server_message is not None:
        lines.append(f"Message: {server_message}")
    else:
        lines.append(f"Response: {raw_body}")
    return "\n".join(lines)
