"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from avh_framework.core.config import load_app_settings


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Ensure each test sees a fresh settings instance."""

    load_app_settings.cache_clear()


def test_defaults_loaded_without_env_file() -> None:
    """Default values should be returned when no overrides are present."""

    settings = load_app_settings(include_environment=False)
    assert settings.logging.level == "INFO"
    assert settings.storage.db_path == Path("./avh_options.db")
    assert settings.security.nonce_lifetime == 86400
    assert settings.mail.use_tls is True


def test_env_file_overrides(tmp_path: Path) -> None:
    """Values defined in an env file should override defaults."""

    env_file = tmp_path / "test.env"
    env_file.write_text(
        "AVH_SITE__NAME=Example Blog\nAVH_MAIL__USE_TLS=false\nAVH_MAIL__HOST=\n",
        encoding="utf-8",
    )

    settings = load_app_settings(env_file=env_file, include_environment=False)
    assert settings.site.name == "Example Blog"
    assert settings.mail.use_tls is False
    assert settings.mail.host is None


def test_environment_wins_over_env_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Process environment variables take precedence over the env file."""

    env_file = tmp_path / "test.env"
    env_file.write_text("AVH_LOGGING__LEVEL=WARNING\n", encoding="utf-8")
    monkeypatch.setenv("AVH_LOGGING__LEVEL", "DEBUG")
    monkeypatch.setenv("UNRELATED_LEVEL", "ERROR")

    settings = load_app_settings(env_file=env_file)
    assert settings.logging.level == "DEBUG"

