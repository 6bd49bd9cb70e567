"""Protocols and recipe types shared by the container and its definitions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class Factory:
    """Recipe calling ``fn`` with the arguments given to ``resolve``.

    The factory's own parameters are never injected.
    """

    fn: Callable[..., Any]

    def __call__(self, *args: Any) -> Any:
        return self.fn(*args)


@dataclass(frozen=True, slots=True)
class Instance:
    """Recipe returning a ready-made value untouched."""

    value: Any


class ContainerInterface(Protocol):
    """Contract a definition relies on to resolve its dependencies."""

    def register(
        self,
        alias: Any,
        recipe: Any = None,
        shared: bool = False,
        auto: bool = False,
    ) -> Any:
        """Register an item with the container."""
        raise NotImplementedError

    def registered(self, alias: Any) -> bool:
        """Return ``True`` when ``alias`` has an explicit registration."""
        raise NotImplementedError

    def resolve(self, alias: Any, args: Sequence[Any] = ()) -> Any:
        """Resolve an item from the container."""
        raise NotImplementedError

    def build(self, target: Any) -> Any:
        """Construct ``target`` with auto-wired constructor arguments."""
        raise NotImplementedError


__all__ = ["ContainerInterface", "Factory", "Instance"]
