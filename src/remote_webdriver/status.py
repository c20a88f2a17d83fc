"""Status codes of the JSON wire protocol."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .errors import UnknownStatusCode


class StatusKind(str, enum.Enum):
    """Symbolic names of the wire status codes."""

    SUCCESS = "Success"
    NO_SUCH_DRIVER = "NoSuchDriver"
    NO_SUCH_ELEMENT = "NoSuchElement"
    NO_SUCH_FRAME = "NoSuchFrame"
    UNKNOWN_COMMAND = "UnknownCommand"
    STALE_ELEMENT_REFERENCE = "StaleElementReference"
    ELEMENT_NOT_VISIBLE = "ElementNotVisible"
    INVALID_ELEMENT_STATE = "InvalidElementState"
    UNKNOWN_ERROR = "UnknownError"
    ELEMENT_IS_NOT_SELECTABLE = "ElementIsNotSelectable"
    JAVASCRIPT_ERROR = "JavaScriptError"
    XPATH_LOOKUP_ERROR = "XPathLookupError"
    TIMEOUT = "Timeout"
    NO_SUCH_WINDOW = "NoSuchWindow"
    INVALID_COOKIE_DOMAIN = "InvalidCookieDomain"
    UNABLE_TO_SET_COOKIE = "UnableToSetCookie"
    UNEXPECTED_ALERT_OPEN = "UnexpectedAlertOpen"
    NO_ALERT_OPEN_ERROR = "NoAlertOpenError"
    SCRIPT_TIMEOUT = "ScriptTimeout"
    INVALID_ELEMENT_COORDINATES = "InvalidElementCoordinates"
    IME_NOT_AVAILABLE = "IMENotAvailable"
    IME_ENGINE_ACTIVATION_FAILED = "IMEEngineActivationFailed"
    INVALID_SELECTOR = "InvalidSelector"
    SESSION_NOT_CREATED = "SessionNotCreatedException"
    MOVE_TARGET_OUT_OF_BOUNDS = "MoveTargetOutOfBounds"


@dataclass(frozen=True)
class StatusEntry:
    """One row of the status table."""

    code: int
    kind: StatusKind
    description: str

    @property
    def is_success(self) -> bool:
        return self.code == 0


def _table(*rows: tuple[int, StatusKind, str]) -> dict[int, StatusEntry]:
    return {code: StatusEntry(code, kind, description) for code, kind, description in rows}


STATUS_TABLE: dict[int, StatusEntry] = _table(
    (0, StatusKind.SUCCESS, "The command executed successfully."),
    (6, StatusKind.NO_SUCH_DRIVER, "A session is either terminated or not started."),
    (
        7,
        StatusKind.NO_SUCH_ELEMENT,
        "An element could not be located on the page using the given search parameters.",
    ),
    (
        8,
        StatusKind.NO_SUCH_FRAME,
        "A request to switch to a frame could not be satisfied because the frame could not be found.",
    ),
    (
        9,
        StatusKind.UNKNOWN_COMMAND,
        "The requested resource could not be found, or a request was received using an HTTP "
        "method that is not supported by the mapped resource.",
    ),
    (
        10,
        StatusKind.STALE_ELEMENT_REFERENCE,
        "An element command failed because the referenced element is no longer attached to the DOM.",
    ),
    (
        11,
        StatusKind.ELEMENT_NOT_VISIBLE,
        "An element command could not be completed because the element is not visible on the page.",
    ),
    (
        12,
        StatusKind.INVALID_ELEMENT_STATE,
        "An element command could not be completed because the element is in an invalid state "
        "(e.g. attempting to click a disabled element).",
    ),
    (
        13,
        StatusKind.UNKNOWN_ERROR,
        "An unknown server-side error occurred while processing the command.",
    ),
    (
        15,
        StatusKind.ELEMENT_IS_NOT_SELECTABLE,
        "An attempt was made to select an element that cannot be selected.",
    ),
    (17, StatusKind.JAVASCRIPT_ERROR, "An error occurred while executing user supplied JavaScript."),
    (19, StatusKind.XPATH_LOOKUP_ERROR, "An error occurred while searching for an element by XPath."),
    (21, StatusKind.TIMEOUT, "An operation did not complete before its timeout expired."),
    (
        23,
        StatusKind.NO_SUCH_WINDOW,
        "A request to switch to a different window could not be satisfied because the window "
        "could not be found.",
    ),
    (
        24,
        StatusKind.INVALID_COOKIE_DOMAIN,
        "An illegal attempt was made to set a cookie under a different domain than the current page.",
    ),
    (25, StatusKind.UNABLE_TO_SET_COOKIE, "A request to set a cookie's value could not be satisfied."),
    (26, StatusKind.UNEXPECTED_ALERT_OPEN, "A modal dialog was open, blocking this operation."),
    (
        27,
        StatusKind.NO_ALERT_OPEN_ERROR,
        "An attempt was made to operate on a modal dialog when one was not open.",
    ),
    (28, StatusKind.SCRIPT_TIMEOUT, "A script did not complete before its timeout expired."),
    (
        29,
        StatusKind.INVALID_ELEMENT_COORDINATES,
        "The coordinates provided to an interactions operation are invalid.",
    ),
    (30, StatusKind.IME_NOT_AVAILABLE, "IME was not available."),
    (31, StatusKind.IME_ENGINE_ACTIVATION_FAILED, "An IME engine could not be started."),
    (32, StatusKind.INVALID_SELECTOR, "Argument was an invalid selector (e.g. XPath/CSS)."),
    (33, StatusKind.SESSION_NOT_CREATED, "A new session could not be created."),
    (
        34,
        StatusKind.MOVE_TARGET_OUT_OF_BOUNDS,
        "Target provided for a move action is out of bounds.",
    ),
)


def find(code: int) -> Optional[StatusEntry]:
    """Return the entry for *code* or ``None`` when the code is unknown."""

    return STATUS_TABLE.get(code)


def lookup(code: int) -> StatusEntry:
    """Return the entry for *code*, raising :class:`UnknownStatusCode` if absent."""

    entry = find(code)
    if entry is None:
        raise UnknownStatusCode(code)
    return entry
