"""Job status reporting to hosted browser providers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

import httpx
from rich.console import Console

from .config import ProviderCredentials, TransportConfig
from .errors import TransportFailure, WebDriverError
from .models import Session

LOGGER = logging.getLogger(__name__)


class JobStatusNotifier(ABC):
    """Interface for annotating a finished (or running) job with its result."""

    @abstractmethod
    def report(
        self,
        session: Session,
        *,
        passed: Optional[bool] = None,
        name: Optional[str] = None,
        **fields: Any,
    ) -> None:
        """Send the job annotation for *session*."""


class NullNotifier(JobStatusNotifier):
    """Notifier used for local servers, which have no job records."""

    def report(
        self,
        session: Session,
        *,
        passed: Optional[bool] = None,
        name: Optional[str] = None,
        **fields: Any,
    ) -> None:
        return


class ConsoleNotifier(JobStatusNotifier):
    """Print job results to the console using Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def report(
        self,
        session: Session,
        *,
        passed: Optional[bool] = None,
        name: Optional[str] = None,
        **fields: Any,
    ) -> None:
        label, style = {
            True: ("PASSED", "green"),
            False: ("FAILED", "red"),
            None: ("DONE", "cyan"),
        }[passed]
        self._console.print(f"[{label}] session {session.session_id} {name or ''}".rstrip(), style=style)
        if fields:
            self._console.print(fields, style="dim")


class CompositeNotifier(JobStatusNotifier):
    """Fan-out notifier that propagates reports to multiple notifiers."""

    def __init__(self, notifiers: Iterable[JobStatusNotifier]) -> None:
        self._notifiers = list(notifiers)

    def report(
        self,
        session: Session,
        *,
        passed: Optional[bool] = None,
        name: Optional[str] = None,
        **fields: Any,
    ) -> None:
        for notifier in self._notifiers:
            notifier.report(session, passed=passed, name=name, **fields)


class _RestNotifier(JobStatusNotifier):
    """Base for providers exposing a REST endpoint keyed by the session id."""

    def __init__(
        self,
        credentials: ProviderCredentials,
        *,
        config: Optional[TransportConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not credentials.configured:
            raise WebDriverError(f"{type(self).__name__} requires a username and access key")
        self._credentials = credentials
        self._config = config or TransportConfig()
        self._client = client

    @abstractmethod
    def _request(
        self,
        session: Session,
        passed: Optional[bool],
        name: Optional[str],
        fields: dict[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        """Return the URL and the ``httpx`` request keyword arguments."""

    def report(
        self,
        session: Session,
        *,
        passed: Optional[bool] = None,
        name: Optional[str] = None,
        **fields: Any,
    ) -> None:
        url, kwargs = self._request(session, passed, name, fields)
        auth = (self._credentials.username or "", self._credentials.access_key or "")
        LOGGER.debug("Reporting job status for %s to %s", session.session_id, url)
        try:
            if self._client is not None:
                response = self._client.put(url, auth=auth, **kwargs)
            else:
                with httpx.Client(timeout=self._config.timeout, verify=self._config.verify) as client:
                    response = client.put(url, auth=auth, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Reporting job status to {url} failed: {exc}") from exc


class SauceLabsNotifier(_RestNotifier):
    def _request(self, session, passed, name, fields):
        url = f"https://saucelabs.com/rest/v1/{self._credentials.username}/jobs/{session.session_id}"
        payload = dict(fields)
        if passed is not None:
            payload["passed"] = passed
        if name is not None:
            payload["name"] = name
        return url, {"json": payload}


class BrowserStackNotifier(_RestNotifier):
    def _request(self, session, passed, name, fields):
        url = f"https://api.browserstack.com/automate/sessions/{session.session_id}.json"
        payload = dict(fields)
        if passed is not None:
            payload["status"] = "passed" if passed else "failed"
        if name is not None:
            payload["name"] = name
        return url, {"json": payload}


class TestingBotNotifier(_RestNotifier):
    # Not a test class despite the name.
    __test__ = False

    def _request(self, session, passed, name, fields):
        url = f"https://api.testingbot.com/v1/tests/{session.session_id}"
        data = {f"test[{key}]": str(value) for key, value in fields.items()}
        if passed is not None:
            data["test[success]"] = "1" if passed else "0"
        if name is not None:
            data["test[name]"] = name
        return url, {"data": data}
