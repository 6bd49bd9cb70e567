"""Construction recipe for an item registered with the container.

A definition holds the class to build, the constructor arguments to inject
and the methods to call on the fresh instance before it is handed out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError, ResolutionError
from .interfaces import ContainerInterface, Instance
from .locator import alias_of, locate_class, names_class

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MethodCall:
    """A method to invoke after construction, with its argument specs."""

    method: str
    arguments: Sequence[Any] | Mapping[Any, Any]


def _as_args(params: Any) -> tuple[Any, ...]:
    """Spread a keyed method argument into call-time arguments."""
    if params is None:
        return ()
    if isinstance(params, (list, tuple)):
        return tuple(params)
    return (params,)


class Definition:
    """Describe how to build one registered item."""

    def __init__(
        self,
        target: str | type | None,
        container: ContainerInterface,
        auto: bool = False,
    ) -> None:
        self.target = target
        self.container = container
        self.auto = auto
        self.arguments: list[Any] = []
        self.method_calls: list[MethodCall] = []

    def __repr__(self) -> str:
        target = alias_of(self.target) if self.has_class() else None
        return (
            f"Definition(target={target!r}, arguments={len(self.arguments)}, "
            f"method_calls={len(self.method_calls)}, auto={self.auto})"
        )

    def __call__(self) -> Any:
        """Build the object and run its configured method calls."""
        if not self.has_class():
            raise ConfigurationError("The definition has no class associated with it")

        instance = self.handle_constructor_injection()
        return self.handle_method_calls(instance)

    invoke = __call__

    def handle_constructor_injection(self) -> Any:
        """Instantiate the target with its constructor arguments injected."""
        if self.has_arguments():
            cls = locate_class(self.target)
            arguments = [self._resolve_argument(value) for value in self.arguments]
            LOGGER.debug(
                "Constructing %s with %d argument(s)", alias_of(cls), len(arguments)
            )
            return cls(*arguments)

        if self.auto:
            return self.container.build(self.target)
        return locate_class(self.target)()

    def handle_method_calls(self, instance: Any) -> Any:
        """Invoke every configured method on ``instance`` in declaration order."""
        for call in self.method_calls:
            method = getattr(instance, call.method, None)
            if method is None or not callable(method):
                raise ResolutionError(
                    f"{type(instance).__name__} has no method '{call.method}'"
                )
            method(*self._method_arguments(call.arguments))
        return instance

    def _resolve_argument(self, argument: Any) -> Any:
        if isinstance(argument, Instance):
            return argument.value
        if isinstance(argument, str) and (
            self.container.registered(argument) or names_class(argument)
        ):
            return self.container.resolve(argument)
        if isinstance(argument, type):
            return self.container.resolve(argument)
        return argument

    def _method_arguments(
        self, arguments: Sequence[Any] | Mapping[Any, Any]
    ) -> list[Any]:
        container = self.container
        if not isinstance(arguments, Mapping):
            return [self._resolve_method_argument(value) for value in arguments]

        # Keyed entries: a registered key is resolved with its value as the
        # call-time arguments; a registered value under an integer key is
        # resolved on its own.
        resolved: list[Any] = []
        for key, params in arguments.items():
            if isinstance(key, str) and container.registered(key):
                resolved.append(container.resolve(key, _as_args(params)))
                continue
            if isinstance(key, int):
                resolved.append(self._resolve_method_argument(params))
                continue
            resolved.append(params.value if isinstance(params, Instance) else params)
        return resolved

    def _resolve_method_argument(self, value: Any) -> Any:
        if isinstance(value, Instance):
            return value.value
        if isinstance(value, str) and self.container.registered(value):
            return self.container.resolve(value)
        return value

    def has_class(self) -> bool:
        """Return ``True`` when a target class is associated."""
        return self.target is not None and self.target != ""

    def with_argument(self, argument: Any) -> Definition:
        """Append a constructor argument."""
        self.arguments.append(argument)
        return self

    def with_arguments(self, arguments: Iterable[Any]) -> Definition:
        """Append several constructor arguments."""
        for argument in arguments:
            self.with_argument(argument)
        return self

    def has_arguments(self) -> bool:
        """Return ``True`` when constructor arguments are configured."""
        return bool(self.arguments)

    def with_method_call(
        self,
        method: str,
        arguments: Sequence[Any] | Mapping[Any, Any] | None = None,
    ) -> Definition:
        """Append a method call made after construction."""
        if arguments is None:
            arguments = []
        elif isinstance(arguments, str) or not isinstance(
            arguments, (Sequence, Mapping)
        ):
            arguments = [arguments]
        self.method_calls.append(MethodCall(method=method, arguments=arguments))
        return self

    def with_method_calls(
        self, methods: Mapping[str, Sequence[Any] | Mapping[Any, Any] | None]
    ) -> Definition:
        """Append several method calls from a ``name -> arguments`` mapping."""
        for method, arguments in methods.items():
            self.with_method_call(method, arguments)
        return self

    def has_method_calls(self) -> bool:
        """Return ``True`` when method calls are configured."""
        return bool(self.method_calls)


__all__ = ["Definition", "MethodCall"]
