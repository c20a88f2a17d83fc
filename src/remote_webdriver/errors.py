"""Exceptions raised by the wire protocol client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import RawResponse
    from .status import StatusEntry


class WebDriverError(RuntimeError):
    """Base class for every error raised by the client."""


class TransportFailure(WebDriverError):
    """Raised when the HTTP exchange itself fails."""


class NoActiveSession(WebDriverError):
    """Raised when a session-scoped command is issued without a session id."""


class UnknownStatusCode(WebDriverError):
    """Raised when a response carries a status code missing from the table."""

    def __init__(self, code: object, body: Optional[str] = None) -> None:
        message = f"Unknown status code {code!r} returned from server."
        if body:
            message = f"{message}\n{body}"
        super().__init__(message)
        self.code = code
        self.body = body


class SessionCreationFailed(WebDriverError):
    """Raised when no session id can be resolved from the creation response."""

    def __init__(self, message: str, response: Optional["RawResponse"] = None) -> None:
        super().__init__(message)
        self.response = response


class ParallelLimitRetryExhausted(SessionCreationFailed):
    """Raised when waiting for a free provider slot runs out of budget."""

    def __init__(self, message: str, *, attempts: int, elapsed: float) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.elapsed = elapsed


class LocatorParseError(WebDriverError, ValueError):
    """Raised for locator strings that do not name a known strategy."""


class WindowNotFound(WebDriverError):
    """Raised when no window with the requested title could be selected."""


class WireFailure(WebDriverError):
    """A command failed with a recognised, non-zero wire status."""

    def __init__(
        self,
        message: str,
        *,
        entry: "StatusEntry",
        response: Optional["RawResponse"] = None,
        server_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.entry = entry
        self.response = response
        self.server_message = server_message

    @property
    def code(self) -> int:
        return self.entry.code

    @property
    def kind(self):
        return self.entry.kind


class NoSuchElement(WireFailure):
    """Status 7: no element matched the locator."""


class StaleElementReference(WireFailure):
    """Status 10: the element is no longer attached to the DOM."""


class ElementNotVisible(WireFailure):
    """Status 11: the element exists but is not visible."""


class OverParallelLimit(WireFailure):
    """Status 13 reporting that the account has no free parallel sessions."""


class WebDriverAssertionError(AssertionError):
    """Raised by the assert helpers when the observed value does not match."""

    def __init__(self, message: str, *, expected: object = None, actual: object = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
