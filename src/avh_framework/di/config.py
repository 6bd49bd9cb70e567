"""Declarative container configuration models and loaders."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError


class ServiceConfig(BaseModel):
    """One entry of a declarative container configuration."""

    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, arbitrary_types_allowed=True
    )

    target: Any = Field(
        default=None,
        alias="object",
        description="Class, dotted class name or factory; defaults to the alias",
    )
    shared: bool = Field(default=False, description="Cache the first instance")
    arguments: list[Any] = Field(
        default_factory=list, description="Constructor argument specs"
    )
    methods: dict[str, Any] = Field(
        default_factory=dict, description="Method name to argument specs"
    )


ServiceEntry = ServiceConfig | Callable[..., Any]


def parse_service_config(config: Mapping[str, Any]) -> dict[str, ServiceEntry]:
    """Validate a ``alias -> options`` mapping.

    Options are either a mapping understood by :class:`ServiceConfig` or a
    bare factory callable.
    """
    parsed: dict[str, ServiceEntry] = {}
    for alias, options in config.items():
        if isinstance(options, ServiceConfig):
            parsed[alias] = options
        elif isinstance(options, Mapping):
            try:
                parsed[alias] = ServiceConfig.model_validate(options)
            except ValidationError as exc:
                raise ConfigurationError(
                    f"Invalid configuration for '{alias}': {exc}"
                ) from exc
        elif callable(options):
            parsed[alias] = options
        else:
            raise ConfigurationError(
                f"Configuration for '{alias}' must be a mapping or a callable, "
                f"got {type(options).__name__}"
            )
    return parsed


def load_service_config(path: Path | str) -> dict[str, Any]:
    """Read a declarative container configuration from a JSON file."""
    config_path = Path(path)
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to read container configuration {config_path}: {exc}"
        ) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Container configuration {config_path} is not valid JSON: {exc}"
        ) from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(
            f"Container configuration {config_path} must hold a JSON object"
        )
    return payload


__all__ = [
    "ServiceConfig",
    "ServiceEntry",
    "load_service_config",
    "parse_service_config",
]
