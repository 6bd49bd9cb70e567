"""Persistent option sets."""

from .options import Options
from .store import MemoryOptionStore, OptionsError, OptionStore, SqliteOptionStore

__all__ = [
    "MemoryOptionStore",
    "OptionStore",
    "Options",
    "OptionsError",
    "SqliteOptionStore",
]
