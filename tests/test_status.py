import pytest

from remote_webdriver.errors import UnknownStatusCode
from remote_webdriver.status import STATUS_TABLE, StatusKind, find, lookup

EXPECTED_KINDS = {
    0: "Success",
    6: "NoSuchDriver",
    7: "NoSuchElement",
    8: "NoSuchFrame",
    9: "UnknownCommand",
    10: "StaleElementReference",
    11: "ElementNotVisible",
    12: "InvalidElementState",
    13: "UnknownError",
    15: "ElementIsNotSelectable",
    17: "JavaScriptError",
    19: "XPathLookupError",
    21: "Timeout",
    23: "NoSuchWindow",
    24: "InvalidCookieDomain",
    25: "UnableToSetCookie",
    26: "UnexpectedAlertOpen",
    27: "NoAlertOpenError",
    28: "ScriptTimeout",
    29: "InvalidElementCoordinates",
    30: "IMENotAvailable",
    31: "IMEEngineActivationFailed",
    32: "InvalidSelector",
    33: "SessionNotCreatedException",
    34: "MoveTargetOutOfBounds",
}


def test_table_holds_exactly_the_known_codes() -> None:
    assert set(STATUS_TABLE) == set(EXPECTED_KINDS)
    assert len([code for code in STATUS_TABLE if code != 0]) == 24


@pytest.mark.parametrize("code,kind", sorted(EXPECTED_KINDS.items()))
def test_lookup_returns_matching_entry(code: int, kind: str) -> None:
    entry = lookup(code)

    assert entry.code == code
    assert entry.kind.value == kind
    assert entry.description
    assert entry.is_success is (code == 0)


def test_lookup_descriptions() -> None:
    assert lookup(0).description == "The command executed successfully."
    assert lookup(7).description == (
        "An element could not be located on the page using the given search parameters."
    )
    assert lookup(10).kind is StatusKind.STALE_ELEMENT_REFERENCE


@pytest.mark.parametrize("code", [1, 14, 16, 22, 35, -1])
def test_unknown_codes(code: int) -> None:
    assert find(code) is None
    with pytest.raises(UnknownStatusCode) as excinfo:
        lookup(code)
    assert excinfo.value.code == code
