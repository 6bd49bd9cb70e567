"""Dependency injection container and support helpers for AVH applications."""

from .di import Container, Definition

__all__ = ["Container", "Definition"]
