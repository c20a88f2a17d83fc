from pathlib import Path

import pytest

from remote_webdriver.config import ClientSettings, load_config


def test_defaults() -> None:
    config = ClientSettings(_env_file=None)

    assert config.provider == "local"
    assert config.browser == "firefox"
    assert config.local_port == 4444
    assert config.wait.timeout_ms == 5000
    assert config.wait.implicit_wait_ms == 0
    assert config.retry.backoff_seconds == 10.0
    assert not config.sauce.configured


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "REMOTE_WEBDRIVER_PROVIDER=sauce",
                "REMOTE_WEBDRIVER_OS=windows",
                "REMOTE_WEBDRIVER_SAUCE__USERNAME=alice",
                "REMOTE_WEBDRIVER_SAUCE__ACCESS_KEY=k3y",
                "REMOTE_WEBDRIVER_WAIT__TIMEOUT_MS=250",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.provider == "sauce"
    assert config.os == "windows"
    assert config.sauce.configured
    assert config.sauce.username == "alice"
    assert config.wait.timeout_ms == 250


def test_environment_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REMOTE_WEBDRIVER_BROWSER", "chrome")
    monkeypatch.setenv("REMOTE_WEBDRIVER_RETRY__MAX_ATTEMPTS", "3")

    config = load_config(env_file=None)

    assert config.browser == "chrome"
    assert config.retry.max_attempts == 3


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "REMOTE_WEBDRIVER_BROWSER=chrome",
                "REMOTE_WEBDRIVER_WAIT__TIMEOUT_MS=100",
                "REMOTE_WEBDRIVER_LOCAL_PORT=5555",
            ]
        )
    )

    config_path = tmp_path / "webdriver.yaml"
    config_path.write_text(
        "\n".join(
            [
                "browser: safari",
                "wait:",
                "  timeout_ms: 900",
                "capabilities:",
                "  acceptSslCerts: true",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, wait={"implicit_wait_ms": 50})

    assert config.browser == "safari"
    assert config.wait.timeout_ms == 900
    assert config.wait.implicit_wait_ms == 50
    assert config.local_port == 5555
    assert config.capabilities == {"acceptSslCerts": True}


def test_numeric_browser_version_is_kept_as_text(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("provider: sauce\nbrowser_version: 11\n")

    config = load_config(config_path, env_file=tmp_path / "missing.env")

    assert config.browser_version == "11"


def test_capabilities_merge_key_by_key(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("capabilities:\n  name: nightly\n  acceptSslCerts: true\n")

    config = load_config(
        config_path,
        env_file=tmp_path / "missing.env",
        capabilities={"name": "smoke"},
    )

    assert config.capabilities == {"name": "smoke", "acceptSslCerts": True}


def test_unknown_provider_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="gridfarm"):
        load_config(env_file=tmp_path / "missing.env", provider="gridfarm")


def test_config_file_must_hold_a_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- sauce\n- firefox\n")

    with pytest.raises(ValueError, match="mapping"):
        load_config(config_path)
