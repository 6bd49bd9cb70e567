"""Named option sets with defaults."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .store import OptionsError, OptionStore

LOGGER = logging.getLogger(__name__)


class Options:
    """Read and write one named option set, merged over its defaults.

    Example:
        >>> options = Options(MemoryOptionStore(), "avh_plugin", {"enabled": True})
        >>> options.activate()
        True
        >>> options.get_options("enabled")
        True
    """

    def __init__(
        self,
        store: OptionStore,
        name: str,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._store = store
        self.name = name
        self.defaults: dict[str, Any] = dict(defaults or {})

    def activate(self) -> bool:
        """Store the defaults unless the option set already exists."""
        added = self._store.add(self.name, self.defaults)
        if added:
            LOGGER.info("Option set '%s' initialised with defaults", self.name)
        return added

    def get_options(self, field: str | Sequence[str] | None = None) -> Any:
        """Return one field, a list of fields or the whole option set.

        Stored values are merged over the defaults, so every default key is
        always present. Fields missing from a list request are skipped.
        """
        data = {**self.defaults, **(self._store.get(self.name) or {})}
        if not field:
            return data
        if isinstance(field, str):
            if field not in data:
                raise OptionsError(f"Unknown option '{field}' in '{self.name}'")
            return data[field]
        return [data[key] for key in field if key in data]

    def set_options(self, field: str | Mapping[str, Any], value: Any = None) -> None:
        """Update a single field or several fields from a mapping."""
        new_data = dict(field) if isinstance(field, Mapping) else {field: value}
        self._update(new_data)

    def reset_options(self) -> None:
        """Write the defaults back over the stored values."""
        self._update(self.defaults)

    def cleanup_options(self) -> None:
        """Drop stored keys that have no default."""
        data = self.get_options()
        cleaned = {key: data[key] for key in self.defaults if key in data}
        removed = sorted(set(data) - set(cleaned))
        if removed:
            LOGGER.debug("Removing stale keys from '%s': %s", self.name, removed)
        self._store.update(self.name, cleaned)

    def delete_options(self) -> bool:
        """Remove the option set from the store."""
        return self._store.delete(self.name)

    def _update(self, new_data: Mapping[str, Any]) -> None:
        all_data = {**self.get_options(), **new_data}
        self._store.update(self.name, all_data)


__all__ = ["Options"]
