"""Exceptions raised by the dependency injection container."""

from __future__ import annotations


class ContainerError(Exception):
    """Base exception for container failures."""


class ConfigurationError(ContainerError):
    """Raised when a registration cannot produce anything as configured."""


class ResolutionError(ContainerError):
    """Raised when the container cannot build a requested item."""


__all__ = ["ConfigurationError", "ContainerError", "ResolutionError"]
