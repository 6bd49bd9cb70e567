"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class StorageSettings(BaseModel):
    """Settings for option persistence."""

    db_path: Path = Field(
        default=Path("./avh_options.db"), description="SQLite database path"
    )
    table: str = Field(default="options", description="Table holding option rows")


class SecuritySettings(BaseModel):
    """Settings for nonce generation."""

    nonce_secret: str = Field(
        default="change-me", description="Secret key mixed into every nonce"
    )
    nonce_lifetime: int = Field(
        default=60 * 60 * 24,
        ge=2,
        description="Seconds a nonce stays valid, split into two ticks",
    )


class MailSettings(BaseModel):
    """Settings controlling outgoing SMTP delivery."""

    host: str | None = Field(default=None, description="SMTP hostname")
    port: int = Field(default=587, description="SMTP port")
    username: str | None = Field(default=None, description="SMTP login")
    password: str | None = Field(default=None, description="SMTP password")
    from_address: str | None = Field(
        default=None, description="Sender address, defaults to the username"
    )
    from_name: str | None = Field(default=None, description="Sender display name")
    use_tls: bool = Field(
        default=True, description="Use STARTTLS instead of implicit SSL"
    )
    timeout_seconds: int = Field(default=30, ge=1, description="Socket timeout")


class SiteSettings(BaseModel):
    """Identity of the site the framework is serving."""

    name: str = Field(default="AVH", description="Site name used in mail subjects")
    url: str | None = Field(default=None, description="Public site URL")


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    mail: MailSettings = Field(default_factory=MailSettings)
    site: SiteSettings = Field(default_factory=SiteSettings)


ENV_PREFIX = "AVH_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, include_environment: bool
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value: Any = value
        if isinstance(value, str) and value == "":
            normalized_value = None
        elif isinstance(value, str):
            lowercase_value = value.lower()
            if lowercase_value == "true":
                normalized_value = True
            elif lowercase_value == "false":
                normalized_value = False
        _merge_into_tree(collected, path, normalized_value)

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "LoggingSettings",
    "MailSettings",
    "SecuritySettings",
    "SiteSettings",
    "StorageSettings",
    "load_app_settings",
]
