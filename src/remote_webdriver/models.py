"""Shared models used across the wire protocol client."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import WaitConfig


class LocatorStrategy(str, enum.Enum):
    """Element search strategies understood by the server."""

    ID = "id"
    NAME = "name"
    TAG_NAME = "tag name"
    CSS_SELECTOR = "css selector"
    XPATH = "xpath"
    CLASS_NAME = "class name"
    LINK_TEXT = "link text"
    PARTIAL_LINK_TEXT = "partial link text"
    ACTIVE = "active"


class Locator(BaseModel):
    """A strategy/value pair telling the server how to find an element."""

    model_config = ConfigDict(frozen=True)

    strategy: LocatorStrategy
    value: str

    def to_payload(self) -> dict[str, str]:
        return {"using": self.strategy.value, "value": self.value}

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"


class Capabilities(BaseModel):
    """Capabilities requested when a session is created."""

    # Desired capabilities commonly carry numeric versions ({"version": 11}).
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    browser_name: Optional[str] = Field(default=None, alias="browserName")
    platform: Optional[str] = None
    version: Optional[str] = None
    javascript_enabled: Optional[bool] = Field(default=None, alias="javascriptEnabled")
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider specific flags sent alongside the named capabilities.",
    )

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "Capabilities":
        """Build capabilities from a camelCase wire dictionary."""

        named = {"browserName", "platform", "version", "javascriptEnabled"}
        known = {key: value for key, value in data.items() if key in named}
        extra = {key: value for key, value in data.items() if key not in named}
        return cls.model_validate({**known, "extra": extra})

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"extra"})
        data.update(self.extra)
        return data

    def merged(self, overrides: Union["Capabilities", Mapping[str, Any], None]) -> "Capabilities":
        """Return a copy with *overrides* applied; override keys win on conflict."""

        if not overrides:
            return self.model_copy(deep=True)
        if isinstance(overrides, Capabilities):
            override_data = overrides.to_wire()
        else:
            override_data = dict(overrides)
        data = self.to_wire()
        data.update(override_data)
        return Capabilities.from_wire(data)


CapabilitiesLike = Union[Capabilities, Mapping[str, Any]]


@dataclass(frozen=True)
class Command:
    """A single protocol command."""

    method: str
    path: str
    payload: Optional[Any] = None


@dataclass(frozen=True)
class RawResponse:
    """Headers and body returned by the transport for one request."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def json(self) -> Optional[dict[str, Any]]:
        """Return the decoded body when it is a JSON object, else ``None``."""

        if not self.body:
            return None
        try:
            data = json.loads(self.body.strip())
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        return data

    @property
    def value(self) -> Any:
        data = self.json()
        if data is None:
            return None
        return data.get("value")


@dataclass(frozen=True)
class Session:
    """An open remote browser session."""

    server_url: str
    session_id: str
    browser_name: Optional[str] = None
    capabilities: dict[str, Any] = field(default_factory=dict)
    wait: WaitConfig = field(default_factory=WaitConfig)
