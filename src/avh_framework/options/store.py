"""Option stores persisting named dictionaries of settings."""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from pathlib import Path
from types import TracebackType
from typing import Any, Protocol

from ..core.config import StorageSettings

LOGGER = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class OptionsError(RuntimeError):
    """Raised when option data cannot be read or written."""


class OptionStore(Protocol):
    """Abstraction over the storage holding named option sets."""

    def get(self, name: str) -> dict[str, Any] | None:
        """Return the stored option set or ``None`` if absent."""
        raise NotImplementedError

    def add(self, name: str, value: dict[str, Any]) -> bool:
        """Store ``value`` only when ``name`` is absent. Returns ``True`` if added."""
        raise NotImplementedError

    def update(self, name: str, value: dict[str, Any]) -> None:
        """Insert or replace the option set."""
        raise NotImplementedError

    def delete(self, name: str) -> bool:
        """Remove the option set. Returns ``True`` if something was deleted."""
        raise NotImplementedError


class MemoryOptionStore(OptionStore):
    """Keep option sets in a dictionary."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def get(self, name: str) -> dict[str, Any] | None:
        stored = self._data.get(name)
        return dict(stored) if stored is not None else None

    def add(self, name: str, value: dict[str, Any]) -> bool:
        if name in self._data:
            return False
        self._data[name] = dict(value)
        return True

    def update(self, name: str, value: dict[str, Any]) -> None:
        self._data[name] = dict(value)

    def delete(self, name: str) -> bool:
        return self._data.pop(name, None) is not None


class SqliteOptionStore(OptionStore):
    """Persist option sets as JSON documents in SQLite."""

    def __init__(self, settings: StorageSettings) -> None:
        """Open the database and make sure the option table exists."""
        if not _TABLE_NAME.match(settings.table):
            raise OptionsError(f"Invalid option table name: {settings.table!r}")
        self._settings = settings
        self._table = settings.table
        db_path = Path(settings.db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = sqlite3.connect(db_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._apply_migrations()

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> SqliteOptionStore:
        """Enter context manager scope."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Ensure the connection is closed when exiting context manager."""
        self.close()

    def close(self) -> None:
        """Close the underlying connection."""
        self._connection.close()

    # OptionStore API ---------------------------------------------------------
    def get(self, name: str) -> dict[str, Any] | None:
        row = self._connection.execute(
            f"SELECT value FROM {self._table} WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None
        try:
            value = json.loads(row["value"])
        except json.JSONDecodeError as exc:
            raise OptionsError(f"Stored option '{name}' is not valid JSON") from exc
        if not isinstance(value, dict):
            raise OptionsError(f"Stored option '{name}' is not a mapping")
        return value

    def add(self, name: str, value: dict[str, Any]) -> bool:
        LOGGER.debug("Adding option '%s'", name)
        with self._connection:
            cursor = self._connection.execute(
                f"INSERT OR IGNORE INTO {self._table} (name, value) VALUES (?, ?)",
                (name, self._encode(name, value)),
            )
        return cursor.rowcount > 0

    def update(self, name: str, value: dict[str, Any]) -> None:
        LOGGER.debug("Updating option '%s'", name)
        with self._connection:
            self._connection.execute(
                f"""
                INSERT INTO {self._table} (name, value) VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET value=excluded.value
                """,
                (name, self._encode(name, value)),
            )

    def delete(self, name: str) -> bool:
        LOGGER.debug("Deleting option '%s'", name)
        with self._connection:
            cursor = self._connection.execute(
                f"DELETE FROM {self._table} WHERE name = ?", (name,)
            )
        return cursor.rowcount > 0

    # Internal helpers --------------------------------------------------------
    @staticmethod
    def _encode(name: str, value: dict[str, Any]) -> str:
        try:
            return json.dumps(value, sort_keys=True)
        except (TypeError, ValueError) as exc:
            raise OptionsError(f"Option '{name}' cannot be serialized: {exc}") from exc

    def _apply_migrations(self) -> None:
        with self._connection:
            self._connection.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    name TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )


__all__ = ["MemoryOptionStore", "OptionStore", "OptionsError", "SqliteOptionStore"]
