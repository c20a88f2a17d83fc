import pytest

from remote_webdriver.errors import LocatorParseError
from remote_webdriver.locator import as_locator, parse_locator
from remote_webdriver.models import Locator, LocatorStrategy


def test_parse_splits_on_first_equals_only() -> None:
    locator = parse_locator("css selector=#a > b")

    assert locator.strategy is LocatorStrategy.CSS_SELECTOR
    assert locator.value == "#a > b"

    xpath = parse_locator("xpath=//input[@name='q' and @value='a=b']")
    assert xpath.strategy is LocatorStrategy.XPATH
    assert xpath.value == "//input[@name='q' and @value='a=b']"


@pytest.mark.parametrize(
    "token",
    [
        "id",
        "name",
        "tag name",
        "css selector",
        "xpath",
        "class name",
        "link text",
        "partial link text",
        "active",
    ],
)
def test_every_strategy_token_is_accepted(token: str) -> None:
    locator = parse_locator(f"{token}=value")

    assert locator.strategy.value == token
    assert locator.to_payload() == {"using": token, "value": "value"}


@pytest.mark.parametrize("text", ["bogus=x", "CSS selector=#a", "css=#a", "#main", ""])
def test_invalid_locators_raise(text: str) -> None:
    with pytest.raises(LocatorParseError):
        parse_locator(text)


def test_locator_parse_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_locator("bogus=x")


def test_value_is_not_normalised() -> None:
    locator = parse_locator("link text=  Sign in ")

    assert locator.value == "  Sign in "
    assert str(locator) == "link text=  Sign in "


def test_as_locator_accepts_parsed_locators() -> None:
    locator = Locator(strategy=LocatorStrategy.ID, value="main")

    assert as_locator(locator) is locator
    assert as_locator("id=main") == locator
