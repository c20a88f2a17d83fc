"""Endpoints and capability baselines for local servers and hosted browser labs."""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlsplit

from .config import ProviderCredentials, RetryConfig
from .errors import OverParallelLimit, ParallelLimitRetryExhausted, WebDriverError
from .models import Capabilities, CapabilitiesLike, Session
from .session import SessionInitiator

LOGGER = logging.getLogger(__name__)

# Mobile drivers serve the protocol from /hub instead of /wd/hub.
MOBILE_HUB_BROWSERS = frozenset({"iphone", "android"})


class Provider(str, enum.Enum):
    """Where a session runs."""

    LOCAL = "local"
    HOST = "host"
    SAUCE = "sauce"
    BROWSERSTACK = "browserstack"
    TESTINGBOT = "testingbot"


_PROVIDER_HOSTS = {
    "saucelabs.com": Provider.SAUCE,
    "browserstack.com": Provider.BROWSERSTACK,
    "testingbot.com": Provider.TESTINGBOT,
}


@dataclass(frozen=True)
class ProviderEndpoint:
    """Server URL and capability baseline for one provider."""

    provider: Provider
    server_url: str
    baseline: Capabilities
    retries_parallel_limit: bool = False


def _hub_path(browser: str) -> str:
    if browser.lower() in MOBILE_HUB_BROWSERS:
        return "/hub"
    return "/wd/hub"


def _userinfo(credentials: ProviderCredentials, provider: Provider) -> str:
    if not credentials.configured:
        raise WebDriverError(f"Credentials for {provider.value} are not configured")
    username = quote(credentials.username or "", safe="")
    access_key = quote(credentials.access_key or "", safe="")
    return f"{username}:{access_key}"


def local_endpoint(port: int, browser: str) -> ProviderEndpoint:
    return host_endpoint("localhost", port, browser, provider=Provider.LOCAL)


def host_endpoint(
    host: str,
    port: int,
    browser: str,
    *,
    provider: Provider = Provider.HOST,
) -> ProviderEndpoint:
    baseline = Capabilities(browser_name=browser, javascript_enabled=True)
    return ProviderEndpoint(
        provider=provider,
        server_url=f"http://{host}:{port}{_hub_path(browser)}",
        baseline=baseline,
    )


def sauce_endpoint(
    credentials: ProviderCredentials,
    os: str,
    browser: str,
    version: Optional[str] = None,
) -> ProviderEndpoint:
    baseline = Capabilities(
        browser_name=browser,
        platform=os.upper(),
        version=version or None,
        javascript_enabled=True,
    )
    userinfo = _userinfo(credentials, Provider.SAUCE)
    return ProviderEndpoint(
        provider=Provider.SAUCE,
        server_url=f"http://{userinfo}@ondemand.saucelabs.com:80/wd/hub",
        baseline=baseline,
    )


def browserstack_endpoint(
    credentials: ProviderCredentials,
    os: str,
    os_version: str,
    browser: str,
    version: Optional[str] = None,
) -> ProviderEndpoint:
    baseline = Capabilities(
        browser_name=browser,
        version=version or None,
        javascript_enabled=True,
        extra={"os": os, "os_version": os_version, "browserstack.debug": True},
    )
    userinfo = _userinfo(credentials, Provider.BROWSERSTACK)
    return ProviderEndpoint(
        provider=Provider.BROWSERSTACK,
        server_url=f"http://{userinfo}@hub.browserstack.com/wd/hub",
        baseline=baseline,
        retries_parallel_limit=True,
    )


def testingbot_endpoint(
    credentials: ProviderCredentials,
    os: str,
    browser: str,
    version: Optional[str] = None,
) -> ProviderEndpoint:
    baseline = Capabilities(
        browser_name=browser,
        platform=os.upper(),
        version=version or None,
        javascript_enabled=True,
    )
    userinfo = _userinfo(credentials, Provider.TESTINGBOT)
    return ProviderEndpoint(
        provider=Provider.TESTINGBOT,
        server_url=f"http://{userinfo}@hub.testingbot.com:4444/wd/hub",
        baseline=baseline,
    )


def provider_for_url(server_url: str) -> Provider:
    """Guess the provider from a server URL."""

    host = (urlsplit(server_url).hostname or "").lower()
    for suffix, provider in _PROVIDER_HOSTS.items():
        if host == suffix or host.endswith("." + suffix):
            return provider
    if host in {"localhost", "127.0.0.1"}:
        return Provider.LOCAL
    return Provider.HOST


def job_url(session: Session) -> Optional[str]:
    """Return the provider's web page for the session's job, when there is one."""

    provider = provider_for_url(session.server_url)
    if provider is Provider.SAUCE:
        return f"https://saucelabs.com/jobs/{session.session_id}"
    if provider is Provider.BROWSERSTACK:
        return f"https://automate.browserstack.com/sessions/{session.session_id}"
    if provider is Provider.TESTINGBOT:
        return f"https://testingbot.com/members/tests/{session.session_id}"
    return None


@dataclass
class RetryState:
    """Progress of a capacity retry loop."""

    started_at: float
    attempt: int = 1


class ProviderLauncher:
    """Open sessions at a provider, waiting for capacity where the provider needs it."""

    def __init__(
        self,
        initiator: SessionInitiator,
        *,
        retry: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._initiator = initiator
        self._retry = retry or RetryConfig()
        self._sleep = sleep
        self._clock = clock

    def open(
        self,
        endpoint: ProviderEndpoint,
        overrides: Optional[CapabilitiesLike] = None,
    ) -> Session:
        capabilities = endpoint.baseline.merged(overrides)
        if not endpoint.retries_parallel_limit:
            return self._initiator.create_session(endpoint.server_url, capabilities)
        return self._create_with_retry(endpoint, capabilities)

    def _create_with_retry(self, endpoint: ProviderEndpoint, capabilities: Capabilities) -> Session:
        state = RetryState(started_at=self._clock())
        while True:
            try:
                return self._initiator.create_session(endpoint.server_url, capabilities)
            except OverParallelLimit as exc:
                elapsed = self._clock() - state.started_at
                # The next attempt would start after the backoff.
                next_start = elapsed + self._retry.backoff_seconds
                if state.attempt >= self._retry.max_attempts or next_start >= self._retry.max_elapsed_seconds:
                    raise ParallelLimitRetryExhausted(
                        f"No free {endpoint.provider.value} session after {state.attempt} attempt(s) "
                        f"in {elapsed:.0f}s",
                        attempts=state.attempt,
                        elapsed=elapsed,
                    ) from exc
                LOGGER.warning(
                    "%s is at its parallel session limit (attempt %d/%d); retrying in %.0fs",
                    endpoint.provider.value,
                    state.attempt,
                    self._retry.max_attempts,
                    self._retry.backoff_seconds,
                )
                self._sleep(self._retry.backoff_seconds)
                state.attempt += 1
