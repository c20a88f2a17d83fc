"""Client for the JSON wire protocol used to drive remote browsers."""

from .config import ClientSettings, RetryConfig, WaitConfig, load_config
from .driver import WebDriver
from .element import WebElement
from .errors import (
    ElementNotVisible,
    LocatorParseError,
    NoSuchElement,
    OverParallelLimit,
    SessionCreationFailed,
    StaleElementReference,
    TransportFailure,
    UnknownStatusCode,
    WebDriverError,
    WireFailure,
)
from .executor import CommandExecutor, CommandOutcome
from .locator import parse_locator
from .models import Capabilities, Locator, LocatorStrategy, Session
from .session import SessionInitiator
from .status import StatusKind, lookup
from .transport import HttpxTransport, Transport
from .wait import WaitPoller

__all__ = [
    "Capabilities",
    "ClientSettings",
    "CommandExecutor",
    "CommandOutcome",
    "ElementNotVisible",
    "HttpxTransport",
    "Locator",
    "LocatorParseError",
    "LocatorStrategy",
    "NoSuchElement",
    "OverParallelLimit",
    "RetryConfig",
    "Session",
    "SessionCreationFailed",
    "SessionInitiator",
    "StaleElementReference",
    "StatusKind",
    "Transport",
    "TransportFailure",
    "UnknownStatusCode",
    "WaitConfig",
    "WaitPoller",
    "WebDriver",
    "WebDriverError",
    "WebElement",
    "WireFailure",
    "load_config",
    "lookup",
    "parse_locator",
]
