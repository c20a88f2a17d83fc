"""Factories for constructing components from configuration."""

from __future__ import annotations

from .config import ClientSettings, TransportConfig
from .driver import WebDriver
from .notifications import (
    BrowserStackNotifier,
    ConsoleNotifier,
    JobStatusNotifier,
    SauceLabsNotifier,
    TestingBotNotifier,
)
from .providers import (
    Provider,
    ProviderEndpoint,
    ProviderLauncher,
    browserstack_endpoint,
    host_endpoint,
    local_endpoint,
    sauce_endpoint,
    testingbot_endpoint,
)
from .session import SessionInitiator
from .transport import HttpxTransport, Transport


def build_transport(config: TransportConfig) -> Transport:
    return HttpxTransport(config)


def build_endpoint(config: ClientSettings) -> ProviderEndpoint:
    provider = Provider(config.provider.lower())
    if provider is Provider.LOCAL:
        return local_endpoint(config.local_port, config.browser)
    if provider is Provider.HOST:
        if not config.host:
            raise ValueError("The host provider requires a host name")
        return host_endpoint(config.host, config.local_port, config.browser)
    if not config.os:
        raise ValueError(f"The {provider.value} provider requires an operating system")
    if provider is Provider.SAUCE:
        return sauce_endpoint(config.sauce, config.os, config.browser, config.browser_version)
    if provider is Provider.BROWSERSTACK:
        if not config.os_version:
            raise ValueError("The browserstack provider requires an operating system version")
        return browserstack_endpoint(
            config.browserstack,
            config.os,
            config.os_version,
            config.browser,
            config.browser_version,
        )
    return testingbot_endpoint(config.testingbot, config.os, config.browser, config.browser_version)


def build_launcher(config: ClientSettings, transport: Transport) -> ProviderLauncher:
    initiator = SessionInitiator(transport, wait=config.wait)
    return ProviderLauncher(initiator, retry=config.retry)


def build_driver(config: ClientSettings, transport: Transport) -> WebDriver:
    endpoint = build_endpoint(config)
    session = build_launcher(config, transport).open(endpoint, config.capabilities)
    return WebDriver.from_session(session, transport)


def build_notifier(config: ClientSettings) -> JobStatusNotifier:
    provider = Provider(config.provider.lower())
    if provider is Provider.SAUCE:
        return SauceLabsNotifier(config.sauce, config=config.transport)
    if provider is Provider.BROWSERSTACK:
        return BrowserStackNotifier(config.browserstack, config=config.transport)
    if provider is Provider.TESTINGBOT:
        return TestingBotNotifier(config.testingbot, config=config.transport)
    return ConsoleNotifier()
