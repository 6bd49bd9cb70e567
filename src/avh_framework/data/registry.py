"""Attribute bags and a small facade over them."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class AttributeBag(Protocol):
    """Key/value attribute store."""

    def all(self) -> dict[str, Any]:
        """Return every attribute."""
        raise NotImplementedError

    def get(self, name: str, default: Any = None) -> Any:
        """Return an attribute or ``default`` when missing."""
        raise NotImplementedError

    def has(self, name: str) -> bool:
        """Return ``True`` if the attribute is defined."""
        raise NotImplementedError

    def remove(self, name: str) -> Any:
        """Remove an attribute, returning its value or ``None``."""
        raise NotImplementedError

    def replace(self, attributes: Mapping[str, Any]) -> None:
        """Replace all attributes."""
        raise NotImplementedError

    def set(self, name: str, value: Any) -> None:
        """Set an attribute."""
        raise NotImplementedError

    def clear(self) -> None:
        """Remove every attribute."""
        raise NotImplementedError


class ArrayRegistry(AttributeBag):
    """Dictionary backed attribute bag with case-insensitive keys."""

    def __init__(self, attributes: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = {}
        if attributes:
            self.replace(attributes)

    def all(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name.lower(), default)

    def has(self, name: str) -> bool:
        return name.lower() in self._data

    def remove(self, name: str) -> Any:
        return self._data.pop(name.lower(), None)

    def replace(self, attributes: Mapping[str, Any]) -> None:
        self._data = {key.lower(): value for key, value in attributes.items()}

    def set(self, name: str, value: Any) -> None:
        self._data[name.lower()] = value

    def clear(self) -> None:
        self._data = {}


class DataHandler:
    """Thin facade over an :class:`AttributeBag`."""

    def __init__(self, registry: AttributeBag) -> None:
        self._registry = registry

    def clear(self) -> None:
        self._registry.clear()

    def get(self, key: str, default: Any = None) -> Any:
        return self._registry.get(key, default)

    def set(self, key: str, value: Any) -> DataHandler:
        self._registry.set(key, value)
        return self

    def has(self, key: str) -> bool:
        return self._registry.has(key)


__all__ = ["ArrayRegistry", "AttributeBag", "DataHandler"]
