"""Bounded polling of remote browser state."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, Optional, TypeVar

from .config import WaitConfig

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class WaitPoller:
    """Re-run a read operation until it returns an expected value or time runs out.

    There is no sleep between iterations: every read is already a network
    round trip. The last observed value is returned whether or not it matched,
    leaving the pass/fail decision to the caller.
    """

    def __init__(
        self,
        config: Optional[WaitConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or WaitConfig()
        self._clock = clock

    @property
    def config(self) -> WaitConfig:
        return self._config

    def deadline(self, timeout_ms: Optional[int] = None) -> float:
        if timeout_ms is None:
            timeout_ms = self._config.timeout_ms
        return self._clock() + timeout_ms / 1000.0

    def expired(self, deadline: float) -> bool:
        return self._clock() >= deadline

    def poll_until(
        self,
        operation: Callable[..., T],
        *args: Any,
        expected: Any,
        timeout_ms: Optional[int] = None,
    ) -> T:
        deadline = self.deadline(timeout_ms)
        attempts = 1
        value = operation(*args)
        while value != expected and not self.expired(deadline):
            attempts += 1
            value = operation(*args)
        LOGGER.debug(
            "Polled %s %d time(s); matched=%s",
            getattr(operation, "__name__", operation),
            attempts,
            value == expected,
        )
        return value
