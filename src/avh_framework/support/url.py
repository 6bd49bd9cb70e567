"""URL helpers."""

from __future__ import annotations

from urllib.parse import urlsplit

_ALWAYS_VALID_PREFIXES = ("#", "//", "mailto:", "tel:")


def is_valid_url(path: str) -> bool:
    """Determine if the given path is a valid URL."""
    if path.startswith(_ALWAYS_VALID_PREFIXES):
        return True
    if any(character.isspace() for character in path):
        return False
    try:
        parts = urlsplit(path)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


__all__ = ["is_valid_url"]
