"""Handles to elements living in a remote browser."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from .errors import WebDriverAssertionError, WebDriverError
from .executor import CommandOutcome
from .locator import as_locator
from .models import Locator

if TYPE_CHECKING:
    from .driver import WebDriver

W3C_ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"


def element_id_from(value: Any) -> str:
    """Extract an element id from a find response value."""

    if isinstance(value, Mapping):
        for key in ("ELEMENT", W3C_ELEMENT_KEY):
            element_id = value.get(key)
            if element_id:
                return str(element_id)
    raise WebDriverError(f"Response did not contain an element reference: {value!r}")


class WebElement:
    """An opaque (session, element id) pair.

    Staleness is not tracked here; the server reports a stale handle as
    ``StaleElementReference`` on the next command.
    """

    def __init__(self, driver: "WebDriver", element_id: str, locator: str) -> None:
        self._driver = driver
        self._element_id = element_id
        self._locator = locator

    @property
    def element_id(self) -> str:
        return self._element_id

    @property
    def locator(self) -> str:
        return self._locator

    def __repr__(self) -> str:
        return f"WebElement(id={self._element_id!r}, locator={self._locator!r})"

    def _path(self, suffix: str = "") -> str:
        return f"/session/:sessionId/element/{self._element_id}{suffix}"

    def _value(self, method: str, suffix: str = "", payload: Any = None) -> Any:
        return self._driver.executor.execute_value(method, self._path(suffix), payload)

    def describe_outcome(self) -> CommandOutcome:
        return self._driver.executor.send("GET", self._path())

    def describe(self) -> Any:
        return self.describe_outcome().value

    def click(self) -> None:
        self._value("POST", "/click")

    def submit(self) -> None:
        self._value("POST", "/submit")

    def clear(self) -> None:
        self._value("POST", "/clear")

    def send_keys(self, text: str) -> None:
        self._value("POST", "/value", {"value": list(text)})

    def get_text(self) -> str:
        return self._value("GET", "/text")

    def get_tag_name(self) -> str:
        return self._value("GET", "/name")

    def get_attribute(self, name: str) -> Optional[str]:
        return self._value("GET", f"/attribute/{name}")

    def get_css_value(self, property_name: str) -> str:
        return self._value("GET", f"/css/{property_name}")

    def is_selected(self) -> bool:
        return bool(self._value("GET", "/selected"))

    def is_enabled(self) -> bool:
        return bool(self._value("GET", "/enabled"))

    def is_displayed(self) -> bool:
        return bool(self._value("GET", "/displayed"))

    def get_location(self) -> dict[str, Any]:
        return self._value("GET", "/location")

    def get_size(self) -> dict[str, Any]:
        return self._value("GET", "/size")

    def equals(self, other: "WebElement") -> bool:
        return bool(self._value("GET", f"/equals/{other.element_id}"))

    def get_element(self, locator: "str | Locator") -> "WebElement":
        parsed = as_locator(locator)
        value = self._value("POST", "/element", parsed.to_payload())
        return WebElement(self._driver, element_id_from(value), str(parsed))

    def get_all_elements(self, locator: "str | Locator") -> list["WebElement"]:
        parsed = as_locator(locator)
        values = self._value("POST", "/elements", parsed.to_payload()) or []
        return [WebElement(self._driver, element_id_from(value), str(parsed)) for value in values]

    def assert_text(self, expected: str, timeout_ms: Optional[int] = None) -> None:
        actual = self._driver.poller.poll_until(self.get_text, expected=expected, timeout_ms=timeout_ms)
        if actual != expected:
            raise WebDriverAssertionError(
                f"Failed asserting that <{self._locator}> text is <{expected}>; got <{actual}>.",
                expected=expected,
                actual=actual,
            )

    def assert_visible(self, timeout_ms: Optional[int] = None) -> None:
        visible = self._driver.poller.poll_until(self.is_displayed, expected=True, timeout_ms=timeout_ms)
        if not visible:
            raise WebDriverAssertionError(
                f"Failed asserting that <{self._locator}> is visible.",
                expected=True,
                actual=visible,
            )
