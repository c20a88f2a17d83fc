"""Session-level commands of the JSON wire protocol."""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from .config import WaitConfig
from .element import WebElement, element_id_from
from .errors import WebDriverAssertionError, WebDriverError, WindowNotFound, WireFailure
from .executor import CommandExecutor
from .locator import as_locator
from .models import CapabilitiesLike, Locator, RawResponse, Session
from .providers import Provider, job_url, provider_for_url
from .session import SessionInitiator
from .status import StatusKind
from .transport import Transport
from .wait import WaitPoller

LOGGER = logging.getLogger(__name__)

# These drivers either lack the element describe command or fail it spuriously.
DESCRIBE_CHECK_EXEMPT_BROWSERS = frozenset({"android", "iphone"})

# Unicode code points the protocol uses for modifier keys.
MODIFIER_KEYS = {
    "shift": "\ue008",
    "ctrl": "\ue009",
    "alt": "\ue00a",
    "command": "\ue03d",
}

MOUSE_BUTTONS = {"left": 0, "middle": 1, "right": 2}


class WebStorage:
    """Local or session storage of the current page."""

    def __init__(self, driver: "WebDriver", area: str) -> None:
        self._driver = driver
        self._path = f"/session/:sessionId/{area}"

    def keys(self) -> list[str]:
        return list(self._driver.executor.execute_value("GET", self._path) or [])

    def get(self, key: str) -> Optional[str]:
        return self._driver.executor.execute_value("GET", f"{self._path}/key/{key}")

    def set(self, key: str, value: str) -> None:
        self._driver.executor.execute("POST", self._path, {"key": key, "value": value})

    def delete(self, key: str) -> None:
        self._driver.executor.execute("DELETE", f"{self._path}/key/{key}")

    def clear(self) -> None:
        self._driver.executor.execute("DELETE", self._path)

    def size(self) -> int:
        return int(self._driver.executor.execute_value("GET", f"{self._path}/size") or 0)


class WebDriver:
    """Commands bound to one open session."""

    def __init__(
        self,
        session: Session,
        executor: CommandExecutor,
        *,
        poller: Optional[WaitPoller] = None,
    ) -> None:
        if executor.session_id != session.session_id:
            executor = executor.for_session(session.session_id)
        self._session = session
        self._executor = executor
        self._poller = poller or WaitPoller(session.wait)
        self.local_storage = WebStorage(self, "local_storage")
        self.session_storage = WebStorage(self, "session_storage")

    @classmethod
    def from_session(
        cls,
        session: Session,
        transport: Transport,
        *,
        poller: Optional[WaitPoller] = None,
    ) -> "WebDriver":
        executor = CommandExecutor(session.server_url, transport, session_id=session.session_id)
        driver = cls(session, executor, poller=poller)
        try:
            driver.apply_wait_config()
        except WebDriverError:
            # The session exists remotely; end it before giving up.
            try:
                driver.quit()
            except WebDriverError as exc:
                LOGGER.warning("Could not end session %s after setup failed: %s", session.session_id, exc)
            raise
        return driver

    @classmethod
    def open(
        cls,
        transport: Transport,
        server_url: str,
        capabilities: CapabilitiesLike,
        *,
        wait: Optional[WaitConfig] = None,
    ) -> "WebDriver":
        """Create a session at *server_url* and return a driver for it."""

        session = SessionInitiator(transport, wait=wait).create_session(server_url, capabilities)
        return cls.from_session(session, transport)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def session_id(self) -> str:
        return self._session.session_id

    @property
    def browser_name(self) -> Optional[str]:
        return self._session.browser_name

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    @property
    def poller(self) -> WaitPoller:
        return self._poller

    @property
    def provider(self) -> Provider:
        return provider_for_url(self._session.server_url)

    def job_url(self) -> Optional[str]:
        return job_url(self._session)

    def __enter__(self) -> "WebDriver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.quit()

    def execute(self, method: str, path: str, payload: Any = None) -> RawResponse:
        return self._executor.execute(method, path, payload)

    def _value(self, method: str, path: str, payload: Any = None) -> Any:
        return self._executor.execute_value(method, path, payload)

    def apply_wait_config(self) -> None:
        if self._session.wait.implicit_wait_ms > 0:
            self.set_implicit_wait(self._session.wait.implicit_wait_ms)

    # Session ---------------------------------------------------------------

    def quit(self) -> None:
        LOGGER.info("Ending session %s", self.session_id)
        self.execute("DELETE", "/session/:sessionId")

    close = quit

    def get_capabilities(self) -> dict[str, Any]:
        return self._value("GET", "/session/:sessionId")

    # Timeouts --------------------------------------------------------------

    def set_implicit_wait(self, milliseconds: int) -> None:
        self.execute("POST", "/session/:sessionId/timeouts/implicit_wait", {"ms": milliseconds})

    def set_async_timeout(self, milliseconds: int) -> None:
        self.execute("POST", "/session/:sessionId/timeouts/async_script", {"ms": milliseconds})

    def set_page_load_timeout(self, milliseconds: int) -> None:
        self.execute("POST", "/session/:sessionId/timeouts", {"type": "page load", "ms": milliseconds})

    # Navigation ------------------------------------------------------------

    def load(self, url: str) -> None:
        self.execute("POST", "/session/:sessionId/url", {"url": url})

    def get_url(self) -> str:
        return self._value("GET", "/session/:sessionId/url")

    def go_back(self) -> None:
        self.execute("POST", "/session/:sessionId/back")

    def go_forward(self) -> None:
        self.execute("POST", "/session/:sessionId/forward")

    def refresh(self) -> None:
        self.execute("POST", "/session/:sessionId/refresh")

    # Document --------------------------------------------------------------

    def get_title(self) -> str:
        return self._value("GET", "/session/:sessionId/title")

    def get_source(self) -> str:
        response = self.execute("GET", "/session/:sessionId/source")
        if response.json() is None:
            return response.body or ""
        return response.value

    def get_screenshot(self) -> bytes:
        """Return the screenshot as decoded PNG bytes."""

        response = self.execute("GET", "/session/:sessionId/screenshot")
        encoded = response.value if response.json() is not None else response.body
        return base64.b64decode(encoded or "")

    def get_text(self) -> str:
        """Return the visible text of the page body."""

        # Sauce Labs occasionally fails to find the body on the first try.
        tries = 3 if self.provider is Provider.SAUCE else 1
        last_error: Optional[WireFailure] = None
        for attempt in range(1, tries + 1):
            try:
                return self.get_element("tag name=body").get_text()
            except WireFailure as exc:
                LOGGER.debug("Reading body text failed (attempt %d/%d): %s", attempt, tries, exc)
                last_error = exc
        raise WebDriverError(f"Could not get body text after {tries} tries") from last_error

    def is_page_loaded(self) -> bool:
        return self.execute_js_sync("return document.readyState;") == "complete"

    # Elements --------------------------------------------------------------

    def get_element(self, locator: "str | Locator") -> WebElement:
        parsed = as_locator(locator)
        value = self._value("POST", "/session/:sessionId/element", parsed.to_payload())
        return WebElement(self, element_id_from(value), str(parsed))

    def get_all_elements(self, locator: "str | Locator") -> list[WebElement]:
        parsed = as_locator(locator)
        values = self._value("POST", "/session/:sessionId/elements", parsed.to_payload()) or []
        return [WebElement(self, element_id_from(value), str(parsed)) for value in values]

    def get_active_element(self) -> WebElement:
        value = self._value("POST", "/session/:sessionId/element/active")
        return WebElement(self, element_id_from(value), "active=true")

    def count_elements(self, locator: "str | Locator") -> int:
        return len(self.get_all_elements(locator))

    def is_element_present(self, locator: "str | Locator") -> bool:
        """Return whether the locator currently matches an element.

        Some backends hand back a cached element from the find command, so
        unless the browser is exempt the element is described once more to
        force a real lookup.
        """

        parsed = as_locator(locator)
        outcome = self._executor.send("POST", "/session/:sessionId/element", parsed.to_payload())
        if outcome.kind is StatusKind.NO_SUCH_ELEMENT:
            return False
        element = WebElement(self, element_id_from(outcome.value), str(parsed))
        if (self.browser_name or "").lower() in DESCRIBE_CHECK_EXEMPT_BROWSERS:
            return True
        outcome = element.describe_outcome()
        if outcome.kind in (StatusKind.NO_SUCH_ELEMENT, StatusKind.STALE_ELEMENT_REFERENCE):
            return False
        outcome.unwrap()
        return True

    # Windows and frames ----------------------------------------------------

    def get_window_handle(self) -> str:
        return self._value("GET", "/session/:sessionId/window_handle")

    def get_all_window_handles(self) -> list[str]:
        return list(self._value("GET", "/session/:sessionId/window_handles") or [])

    def focus_window(self, handle: str) -> None:
        self.execute("POST", "/session/:sessionId/window", {"name": handle})

    def select_window(self, title: str, timeout_ms: Optional[int] = None) -> None:
        """Switch to the first window whose title equals *title*."""

        seen: list[str] = []

        def scan_windows() -> Optional[str]:
            seen.clear()
            for handle in self.get_all_window_handles():
                self.focus_window(handle)
                current = self.get_title()
                seen.append(current)
                if current == title:
                    return current
            return seen[-1] if seen else None

        found = self._poller.poll_until(scan_windows, expected=title, timeout_ms=timeout_ms)
        if found != title:
            raise WindowNotFound(
                f"Could not find window with title <{title}>. "
                f"Found {len(seen)} windows: {'; '.join(seen)}"
            )

    def close_window(self) -> None:
        self.execute("DELETE", "/session/:sessionId/window")

    def get_window_size(self, handle: str = "current") -> dict[str, int]:
        return self._value("GET", f"/session/:sessionId/window/{handle}/size")

    def set_window_size(self, width: int, height: int, handle: str = "current") -> None:
        self.execute("POST", f"/session/:sessionId/window/{handle}/size", {"width": width, "height": height})

    def get_window_position(self, handle: str = "current") -> dict[str, int]:
        return self._value("GET", f"/session/:sessionId/window/{handle}/position")

    def set_window_position(self, x: int, y: int, handle: str = "current") -> None:
        self.execute("POST", f"/session/:sessionId/window/{handle}/position", {"x": x, "y": y})

    def maximize_window(self, handle: str = "current") -> None:
        self.execute("POST", f"/session/:sessionId/window/{handle}/maximize")

    def select_frame(self, identifier: Any = None) -> None:
        """Switch to a frame by index, name or id; ``None`` selects the top page."""

        self.execute("POST", "/session/:sessionId/frame", {"id": identifier})

    # Cookies ---------------------------------------------------------------

    def get_all_cookies(self) -> list[dict[str, Any]]:
        return list(self._value("GET", "/session/:sessionId/cookie") or [])

    def get_cookie(self, name: str, property_name: Optional[str] = None) -> Any:
        for cookie in self.get_all_cookies():
            if cookie.get("name") == name:
                if property_name is None:
                    return cookie
                return cookie.get(property_name)
        return None

    def set_cookie(
        self,
        name: str,
        value: str,
        *,
        path: Optional[str] = None,
        domain: Optional[str] = None,
        secure: bool = False,
        expiry: Optional[int] = None,
    ) -> None:
        # Some servers reject cookies without an explicit secure flag.
        cookie: dict[str, Any] = {"name": name, "value": value, "secure": secure}
        if path is not None:
            cookie["path"] = path
        if domain is not None:
            cookie["domain"] = domain
        if expiry is not None:
            cookie["expiry"] = expiry
        self.execute("POST", "/session/:sessionId/cookie", {"cookie": cookie})

    def delete_cookie(self, name: str) -> None:
        self.execute("DELETE", f"/session/:sessionId/cookie/{name}")

    def delete_all_cookies(self) -> None:
        self.execute("DELETE", "/session/:sessionId/cookie")

    # Scripts ---------------------------------------------------------------

    def execute_js_sync(self, script: str, args: Optional[list[Any]] = None) -> Any:
        return self._value("POST", "/session/:sessionId/execute", {"script": script, "args": args or []})

    def execute_js_async(self, script: str, args: Optional[list[Any]] = None) -> Any:
        return self._value(
            "POST",
            "/session/:sessionId/execute_async",
            {"script": script, "args": args or []},
        )

    # Input -----------------------------------------------------------------

    def get_input_speed(self) -> str:
        return self._value("GET", "/session/:sessionId/speed")

    def set_input_speed(self, speed: str) -> None:
        """Set user input speed: ``SLOW``, ``MEDIUM`` or ``FAST``."""

        self.execute("POST", "/session/:sessionId/speed", {"speed": speed.upper()})

    def send_keys(self, text: str) -> None:
        """Type into the active element."""

        self.execute("POST", "/session/:sessionId/keys", {"value": list(text)})

    def press_modifier(self, modifier: str, is_down: bool = True) -> None:
        try:
            key = MODIFIER_KEYS[modifier]
        except KeyError as exc:
            raise ValueError(f"Unknown modifier key: {modifier}") from exc
        self.execute("POST", "/session/:sessionId/modifier", {"value": key, "isdown": is_down})

    def move_cursor(self, right: int, down: int, element: Optional[WebElement] = None) -> None:
        payload: dict[str, Any] = {"xoffset": right, "yoffset": down}
        if element is not None:
            payload["element"] = element.element_id
        self.execute("POST", "/session/:sessionId/moveto", payload)

    def click(self, button: str = "left") -> None:
        self.execute("POST", "/session/:sessionId/click", {"button": MOUSE_BUTTONS[button]})

    def double_click(self) -> None:
        self.execute("POST", "/session/:sessionId/doubleclick")

    def click_and_hold(self) -> None:
        self.execute("POST", "/session/:sessionId/buttondown")

    def release_click(self) -> None:
        self.execute("POST", "/session/:sessionId/buttonup")

    def tap(self, element: WebElement) -> None:
        self.execute("POST", "/session/:sessionId/touch/click", {"element": element.element_id})

    # Alerts ----------------------------------------------------------------

    def get_alert_text(self) -> str:
        return self._value("GET", "/session/:sessionId/alert_text")

    def set_alert_text(self, text: str) -> None:
        self.execute("POST", "/session/:sessionId/alert_text", {"text": text})

    def accept_alert(self) -> None:
        self.execute("POST", "/session/:sessionId/accept_alert")

    def dismiss_alert(self) -> None:
        self.execute("POST", "/session/:sessionId/dismiss_alert")

    def _alert_text_if_open(self) -> Optional[str]:
        outcome = self._executor.send("GET", "/session/:sessionId/alert_text")
        if outcome.kind is StatusKind.NO_ALERT_OPEN_ERROR:
            return None
        return outcome.value

    # Device ----------------------------------------------------------------

    def get_geolocation(self) -> dict[str, float]:
        return self._value("GET", "/session/:sessionId/location")

    def set_geolocation(self, latitude: float, longitude: float, altitude: float = 0.0) -> None:
        location = {"latitude": latitude, "longitude": longitude, "altitude": altitude}
        self.execute("POST", "/session/:sessionId/location", {"location": location})

    def get_orientation(self) -> str:
        return self._value("GET", "/session/:sessionId/orientation")

    def set_orientation(self, orientation: str) -> None:
        self.execute("POST", "/session/:sessionId/orientation", {"orientation": orientation.upper()})

    def is_landscape(self) -> bool:
        return self.get_orientation() == "LANDSCAPE"

    def is_portrait(self) -> bool:
        return self.get_orientation() == "PORTRAIT"

    def get_all_ime_engines(self) -> list[str]:
        return list(self._value("GET", "/session/:sessionId/ime/available_engines") or [])

    def get_ime_engine(self) -> str:
        return self._value("GET", "/session/:sessionId/ime/active_engine")

    def is_ime_active(self) -> bool:
        return bool(self._value("GET", "/session/:sessionId/ime/activated"))

    def activate_ime(self, engine: str) -> None:
        self.execute("POST", "/session/:sessionId/ime/activate", {"engine": engine})

    def deactivate_ime(self) -> None:
        self.execute("POST", "/session/:sessionId/ime/deactivate")

    def get_log_types(self) -> list[str]:
        return list(self._value("GET", "/session/:sessionId/log/types") or [])

    def get_log(self, log_type: str) -> list[dict[str, Any]]:
        return list(self._value("POST", "/session/:sessionId/log", {"type": log_type}) or [])

    def get_application_cache_status(self) -> int:
        return int(self._value("GET", "/session/:sessionId/application_cache/status"))

    # Assertions ------------------------------------------------------------

    def _assert_eventually(self, what: str, operation, *args: Any, expected: Any, timeout_ms: Optional[int]) -> None:
        actual = self._poller.poll_until(operation, *args, expected=expected, timeout_ms=timeout_ms)
        if actual != expected:
            raise WebDriverAssertionError(
                f"Failed asserting that {what} is <{expected}>; got <{actual}>.",
                expected=expected,
                actual=actual,
            )

    def assert_url(self, expected_url: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually("URL", self.get_url, expected=expected_url, timeout_ms=timeout_ms)

    def assert_title(self, expected_title: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually("title", self.get_title, expected=expected_title, timeout_ms=timeout_ms)

    def assert_page_loaded(self, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually("page loaded", self.is_page_loaded, expected=True, timeout_ms=timeout_ms)

    def assert_element_present(self, locator: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            f"<{locator}> present",
            self.is_element_present,
            locator,
            expected=True,
            timeout_ms=timeout_ms,
        )

    def assert_element_not_present(self, locator: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            f"<{locator}> present",
            self.is_element_present,
            locator,
            expected=False,
            timeout_ms=timeout_ms,
        )

    def assert_element_count(self, locator: str, expected_count: int, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            f"count of <{locator}>",
            self.count_elements,
            locator,
            expected=expected_count,
            timeout_ms=timeout_ms,
        )

    def assert_cookie_value(self, name: str, expected_value: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            f"cookie <{name}>",
            self.get_cookie,
            name,
            "value",
            expected=expected_value,
            timeout_ms=timeout_ms,
        )

    def assert_alert_text(self, expected_text: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            "alert text",
            self._alert_text_if_open,
            expected=expected_text,
            timeout_ms=timeout_ms,
        )

    def _page_contains(self, text: str) -> bool:
        return text in self.get_text()

    def assert_string_present(self, expected: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            f"page text containing <{expected}>",
            self._page_contains,
            expected,
            expected=True,
            timeout_ms=timeout_ms,
        )

    def assert_string_not_present(self, unexpected: str, timeout_ms: Optional[int] = None) -> None:
        self._assert_eventually(
            f"page text containing <{unexpected}>",
            self._page_contains,
            unexpected,
            expected=False,
            timeout_ms=timeout_ms,
        )
