"""Configuration models for the remote WebDriver client."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WaitConfig(BaseModel):
    """Wait budgets carried by each session."""

    implicit_wait_ms: int = Field(
        default=0,
        ge=0,
        description="Server-side implicit wait applied right after the session opens (0 = leave unset).",
    )
    timeout_ms: int = Field(
        default=5000,
        ge=0,
        description="Default budget for value-matching polls such as assert_title.",
    )


class RetryConfig(BaseModel):
    """Budget for retrying session creation while a provider is at capacity."""

    backoff_seconds: float = Field(default=10.0, ge=0)
    max_attempts: int = Field(default=30, ge=1)
    max_elapsed_seconds: float = Field(default=600.0, gt=0)


class TransportConfig(BaseModel):
    """Settings for the HTTP transport."""

    timeout: float = Field(default=120.0, gt=0)
    verify: bool = True
    user_agent: str = Field(default="remote-webdriver")


class ProviderCredentials(BaseModel):
    """Account credentials for a hosted browser provider."""

    username: Optional[str] = None
    access_key: Optional[str] = None

    @property
    def configured(self) -> bool:
        return bool(self.username and self.access_key)


PROVIDER_NAMES = frozenset({"local", "host", "sauce", "browserstack", "testingbot"})


class ClientSettings(BaseSettings):
    """Top-level configuration for the client and the command line."""

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_WEBDRIVER_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        coerce_numbers_to_str=True,
    )

    provider: str = Field(default="local")
    browser: str = Field(default="firefox")
    browser_version: Optional[str] = None
    os: Optional[str] = Field(default=None, description="Platform requested from hosted providers.")
    os_version: Optional[str] = None
    local_port: int = Field(default=4444)
    host: Optional[str] = None
    wait: WaitConfig = Field(default_factory=WaitConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    sauce: ProviderCredentials = Field(default_factory=ProviderCredentials)
    browserstack: ProviderCredentials = Field(default_factory=ProviderCredentials)
    testingbot: ProviderCredentials = Field(default_factory=ProviderCredentials)
    capabilities: dict[str, Any] = Field(
        default_factory=dict,
        description="Capability overrides merged over the provider baseline.",
    )


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> ClientSettings:
    """Build client settings.

    Precedence, highest first: keyword overrides, the YAML file at *path*,
    ``REMOTE_WEBDRIVER_*`` environment variables and the env file, defaults.
    Nested sections (``wait``, ``sauce``, ``capabilities``...) merge key by key.
    """

    data = _read_yaml(path) if path else {}
    _deep_update(data, overrides)
    if env_file is not None:
        config = ClientSettings(_env_file=env_file, **data)
    else:
        config = ClientSettings(**data)

    if config.provider.lower() not in PROVIDER_NAMES:
        known = ", ".join(sorted(PROVIDER_NAMES))
        raise ValueError(f"Unknown provider {config.provider!r}; expected one of: {known}")
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    import yaml

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must hold a mapping of settings, not {type(data).__name__}")
    return data


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Merge *updates* into *target* in place; nested mappings merge key by key."""

    for key, value in updates.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            _deep_update(current, value)
        elif isinstance(value, Mapping):
            target[key] = dict(value)
        else:
            target[key] = value
