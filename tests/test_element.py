from __future__ import annotations

import pytest

from conftest import SESSION_ID, FakeClock, FakeServer, make_driver, reply
from remote_webdriver.config import WaitConfig
from remote_webdriver.driver import WebDriver
from remote_webdriver.element import WebElement, element_id_from
from remote_webdriver.errors import ElementNotVisible, WebDriverAssertionError, WebDriverError
from remote_webdriver.transport import HttpxTransport

ELEMENT = f"/session/{SESSION_ID}/element/e1"


@pytest.fixture
def element(driver: WebDriver) -> WebElement:
    return WebElement(driver, "e1", "id=field")


def test_element_id_from_rejects_other_shapes() -> None:
    assert element_id_from({"ELEMENT": 12}) == "12"
    with pytest.raises(WebDriverError):
        element_id_from({"id": "x"})
    with pytest.raises(WebDriverError):
        element_id_from("e1")


def test_interactions(server: FakeServer, element: WebElement) -> None:
    for suffix in ("/click", "/clear", "/submit", "/value"):
        server.on("POST", ELEMENT + suffix, reply())

    element.clear()
    element.send_keys("abc")
    element.click()
    element.submit()

    assert server.calls("POST", ELEMENT + "/value") == [{"value": ["a", "b", "c"]}]
    assert [request.url.path.rsplit("/", 1)[-1] for request in server.requests] == [
        "clear",
        "value",
        "click",
        "submit",
    ]


def test_reads(server: FakeServer, element: WebElement) -> None:
    server.on("GET", ELEMENT + "/text", reply("Hello"))
    server.on("GET", ELEMENT + "/name", reply("input"))
    server.on("GET", ELEMENT + "/attribute/type", reply("email"))
    server.on("GET", ELEMENT + "/css/color", reply("rgba(0, 0, 0, 1)"))
    server.on("GET", ELEMENT + "/selected", reply(False))
    server.on("GET", ELEMENT + "/enabled", reply(True))
    server.on("GET", ELEMENT + "/location", reply({"x": 3, "y": 4}))
    server.on("GET", ELEMENT + "/size", reply({"width": 10, "height": 20}))

    assert element.get_text() == "Hello"
    assert element.get_tag_name() == "input"
    assert element.get_attribute("type") == "email"
    assert element.get_css_value("color") == "rgba(0, 0, 0, 1)"
    assert element.is_selected() is False
    assert element.is_enabled() is True
    assert element.get_location() == {"x": 3, "y": 4}
    assert element.get_size() == {"width": 10, "height": 20}


def test_equals(server: FakeServer, element: WebElement, driver: WebDriver) -> None:
    server.on("GET", ELEMENT + "/equals/e2", reply(True))

    assert element.equals(WebElement(driver, "e2", "id=other"))


def test_child_lookup(server: FakeServer, element: WebElement) -> None:
    server.on("POST", ELEMENT + "/element", reply({"ELEMENT": "c1"}))
    server.on("POST", ELEMENT + "/elements", reply([{"ELEMENT": "c1"}, {"ELEMENT": "c2"}]))

    child = element.get_element("tag name=option")
    children = element.get_all_elements("tag name=option")

    assert child.element_id == "c1"
    assert child.locator == "tag name=option"
    assert [item.element_id for item in children] == ["c1", "c2"]
    assert server.calls("POST", ELEMENT + "/element") == [{"using": "tag name", "value": "option"}]


def test_not_visible_is_raised(server: FakeServer, element: WebElement) -> None:
    server.on("POST", ELEMENT + "/click", reply({"message": "hidden"}, status=11))

    with pytest.raises(ElementNotVisible):
        element.click()


def test_assert_text_polls(server: FakeServer, element: WebElement) -> None:
    server.on("GET", ELEMENT + "/text", reply(""), reply("Saved"))

    element.assert_text("Saved")

    assert len(server.calls("GET", ELEMENT + "/text")) == 2


def test_assert_visible_fails(server: FakeServer, transport: HttpxTransport, clock: FakeClock) -> None:
    server.on("GET", ELEMENT + "/displayed", reply(False))
    driver = make_driver(transport, clock, wait=WaitConfig(timeout_ms=0))

    with pytest.raises(WebDriverAssertionError) as excinfo:
        WebElement(driver, "e1", "id=toast").assert_visible()

    assert "<id=toast>" in str(excinfo.value)
    assert excinfo.value.actual is False
