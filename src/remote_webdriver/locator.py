"""Parsing of compact ``strategy=value`` locator strings."""

from __future__ import annotations

from .errors import LocatorParseError
from .models import Locator, LocatorStrategy

_STRATEGIES = {strategy.value: strategy for strategy in LocatorStrategy}


def parse_locator(text: str) -> Locator:
    """Turn ``"css selector=#a > b"`` into a :class:`Locator`.

    The string is split on the first ``=`` only, so the value may contain
    further ``=`` characters. Strategy names are matched case-sensitively.
    """

    token, separator, value = text.partition("=")
    if not separator:
        raise LocatorParseError(f"Locator {text!r} is missing a '=' between strategy and value")
    strategy = _STRATEGIES.get(token)
    if strategy is None:
        known = ", ".join(sorted(_STRATEGIES))
        raise LocatorParseError(f"Unknown locator strategy {token!r} in {text!r}; expected one of: {known}")
    return Locator(strategy=strategy, value=value)


def as_locator(locator: "str | Locator") -> Locator:
    if isinstance(locator, Locator):
        return locator
    return parse_locator(locator)
