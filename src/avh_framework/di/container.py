"""Dependency injection container.

Items are registered under an alias as a class (or dotted class name), a
factory callable, a configured :class:`Definition` or a ready-made instance,
and are built when first requested. Shared items are cached for the lifetime
of the container.
"""

from __future__ import annotations

import inspect
import logging
import threading
import types
import typing
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .config import ServiceConfig, parse_service_config
from .definition import Definition
from .errors import ConfigurationError, ContainerError, ResolutionError
from .interfaces import Factory, Instance
from .locator import alias_of, is_constructible, locate_class

LOGGER = logging.getLogger(__name__)

_MISSING = object()


class _Registration:
    """Recipe stored for one alias."""

    __slots__ = ("recipe", "shared")

    def __init__(self, recipe: Definition | Factory | Instance, shared: bool) -> None:
        self.recipe = recipe
        self.shared = shared


def _unwrap_optional(hint: Any) -> Any:
    """Return ``X`` for ``X | None`` hints, otherwise ``hint`` unchanged."""
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return hint


def _constructor_hints(cls: type) -> dict[str, Any]:
    """Return evaluated constructor annotations, falling back to raw ones."""
    try:
        return typing.get_type_hints(cls.__init__)
    except (NameError, TypeError):
        return dict(getattr(cls.__init__, "__annotations__", {}))


class Container:
    """Registry and resolver for named dependencies."""

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, _Registration] = {}
        self._shared: dict[str, Any] = {}
        self._lock = threading.RLock()
        self._resolving: list[str] = []

        if config:
            self.set_config(config)

    # Registration ------------------------------------------------------------
    def set_config(self, config: Mapping[str, Any]) -> Container:
        """Register every entry of a declarative configuration mapping."""
        for alias, entry in parse_service_config(config).items():
            if not isinstance(entry, ServiceConfig):
                self.register(alias, Factory(entry))
                continue

            recipe = alias if entry.target is None else entry.target
            definition = self.register(alias, recipe, entry.shared)
            if definition is None:
                if entry.arguments or entry.methods:
                    raise ConfigurationError(
                        f"'{alias}' takes arguments or methods but is not a class"
                    )
                continue
            definition.with_arguments(entry.arguments)
            definition.with_method_calls(entry.methods)
        return self

    def register(
        self,
        alias: str | type,
        recipe: Any = None,
        shared: bool = False,
        auto: bool = False,
    ) -> Definition | None:
        """Register a class, factory, definition or instance under ``alias``.

        Classes and class names are wrapped in a new :class:`Definition`,
        which is returned for further configuration. Dependencies are only
        handled when the item is requested.
        """
        if recipe is None:
            recipe = alias

        stored: Definition | Factory | Instance
        if isinstance(recipe, (Definition, Factory, Instance)):
            stored = recipe
        elif isinstance(recipe, (str, type)):
            stored = Definition(recipe, self, auto)
        elif callable(recipe):
            stored = Factory(recipe)
        else:
            stored = Instance(recipe)

        key = alias_of(alias)
        with self._lock:
            if key in self._values:
                LOGGER.debug("Replacing registration for '%s'", key)
            self._values[key] = _Registration(stored, shared is True)
        LOGGER.debug(
            "Registered '%s' as %s (shared=%s)", key, type(stored).__name__, shared
        )

        if isinstance(stored, Definition):
            return stored
        return None

    def register_factory(
        self, alias: str | type, factory: Callable[..., Any], shared: bool = False
    ) -> None:
        """Register ``factory`` as a factory recipe, even when it is a class."""
        self.register(alias, Factory(factory), shared)

    def registered(self, alias: str | type) -> bool:
        """Check if an alias is registered with the container."""
        return alias_of(alias) in self._values

    def clear(self) -> None:
        """Drop every registration and cached shared instance."""
        with self._lock:
            self._values.clear()
            self._shared.clear()

    # Resolution --------------------------------------------------------------
    def resolve(self, alias: str | type, args: Sequence[Any] = ()) -> Any:
        """Resolve and return the requested item.

        Unregistered aliases are registered on the fly as auto-wired classes.
        ``args`` are passed to factory recipes only.
        """
        key = alias_of(alias)
        with self._lock:
            if key not in self._values:
                self.register(alias, alias, False, True)

            if key in self._shared:
                return self._shared[key]

            if key in self._resolving:
                chain = " -> ".join([*self._resolving, key])
                raise ResolutionError(f"Circular dependency detected: {chain}")

            registration = self._values[key]
            self._resolving.append(key)
            try:
                instance = self._produce(registration.recipe, args)
            finally:
                self._resolving.pop()

            if registration.shared:
                self._shared[key] = instance
            return instance

    def try_resolve(self, alias: str | type) -> Any | None:
        """Resolve a dependency if possible; return ``None`` on container errors."""
        try:
            return self.resolve(alias)
        except ContainerError as exc:
            LOGGER.debug("Could not resolve '%s': %s", alias_of(alias), exc)
            return None

    @staticmethod
    def _produce(recipe: Definition | Factory | Instance, args: Sequence[Any]) -> Any:
        if isinstance(recipe, Factory):
            return recipe(*args)
        if isinstance(recipe, Definition):
            return recipe()
        return recipe.value

    def build(self, target: str | type) -> Any:
        """Build ``target`` injecting constructor dependencies.

        Dependencies come from an ``__inject__`` attribute on the class when
        present, otherwise from the constructor type hints.
        """
        cls = locate_class(target)
        declared = getattr(cls, "__inject__", None)
        if declared is not None:
            return self._build_declared(cls, declared)

        if cls.__init__ is object.__init__:
            return cls()

        signature = inspect.signature(cls.__init__)
        hints = _constructor_hints(cls)
        kwargs: dict[str, Any] = {}
        for name, parameter in list(signature.parameters.items())[1:]:
            if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
                continue
            dependency = self._dependency(hints.get(name, _MISSING))
            if dependency is not _MISSING:
                kwargs[name] = dependency
                continue
            if parameter.default is parameter.empty:
                raise ResolutionError(
                    f"Cannot auto-wire parameter '{name}' of {alias_of(cls)}"
                )
        return cls(**kwargs)

    def _build_declared(self, cls: type, declared: Any) -> Any:
        if isinstance(declared, Mapping):
            kwargs = {name: self.resolve(alias) for name, alias in declared.items()}
            return cls(**kwargs)
        return cls(*[self.resolve(alias) for alias in declared])

    def _dependency(self, hint: Any) -> Any:
        """Resolve a constructor type hint, or return ``_MISSING``."""
        if hint is _MISSING:
            return _MISSING
        hint = _unwrap_optional(hint)
        if isinstance(hint, (str, type)) and self.registered(hint):
            return self.resolve(hint)
        if is_constructible(hint):
            return self.resolve(hint)
        return _MISSING

    # Mapping protocol ----------------------------------------------------------
    def __getitem__(self, alias: str | type) -> Any:
        return self.resolve(alias)

    def __setitem__(self, alias: str | type, recipe: Any) -> None:
        self.register(alias, recipe)

    def __delitem__(self, alias: str | type) -> None:
        key = alias_of(alias)
        with self._lock:
            del self._values[key]
            self._shared.pop(key, None)

    def __contains__(self, alias: object) -> bool:
        if not isinstance(alias, (str, type)):
            return False
        return self.registered(alias)

    def __len__(self) -> int:
        return len(self._values)


__all__ = ["Container"]
