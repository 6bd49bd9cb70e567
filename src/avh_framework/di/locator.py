"""Helpers translating between classes and dotted type names."""

from __future__ import annotations

import builtins
import importlib
import inspect
from typing import Any

from .errors import ResolutionError


def alias_of(value: Any) -> str:
    """Return the registry key for ``value``.

    Strings are used verbatim, classes map to ``module.QualName``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    raise TypeError(f"Aliases must be strings or classes, got {type(value).__name__}")


def _walk(target: Any, attributes: list[str]) -> Any:
    for attribute in attributes:
        target = getattr(target, attribute)
    return target


def locate(name: str) -> Any:
    """Import the object referenced by ``name``.

    Accepts ``package.module:Attr.Path`` and ``package.module.Attr``.
    """
    if ":" in name:
        module_name, _, attribute_path = name.partition(":")
        try:
            module = importlib.import_module(module_name)
            return _walk(module, attribute_path.split("."))
        except (ImportError, AttributeError, ValueError) as exc:
            raise ResolutionError(f"Class '{name}' could not be found") from exc

    parts = name.split(".")
    if len(parts) == 1:
        found = getattr(builtins, name, None)
        if found is None:
            raise ResolutionError(f"Class '{name}' could not be found")
        return found

    for index in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:index])
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            continue
        except ValueError as exc:
            raise ResolutionError(f"Class '{name}' could not be found") from exc
        try:
            return _walk(module, parts[index:])
        except AttributeError:
            continue
    raise ResolutionError(f"Class '{name}' could not be found")


def locate_class(target: Any) -> type:
    """Return the class named or given by ``target``."""
    found = locate(target) if isinstance(target, str) else target
    if not isinstance(found, type):
        raise ResolutionError(f"'{alias_of(target)}' does not name a class")
    return found


def names_class(value: str) -> bool:
    """Return ``True`` when ``value`` is a dotted path to an importable class."""
    if "." not in value and ":" not in value:
        return False
    try:
        return isinstance(locate(value), type)
    except ResolutionError:
        return False


def is_constructible(candidate: Any) -> bool:
    """Return ``True`` for concrete, non-builtin, non-protocol classes."""
    if not isinstance(candidate, type):
        return False
    if candidate.__module__ == "builtins":
        return False
    if getattr(candidate, "_is_protocol", False):
        return False
    return not inspect.isabstract(candidate)


__all__ = ["alias_of", "is_constructible", "locate", "locate_class", "names_class"]
