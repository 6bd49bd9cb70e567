"""Build small HTML fragments: anchors, mailto links, images, attributes."""

from __future__ import annotations

import html
import random
from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

from ..core.config import SiteSettings
from ..support.url import is_valid_url

# Attributes listed here are rendered first, in this order.
ATTRIBUTE_ORDER = (
    "action",
    "method",
    "type",
    "id",
    "name",
    "value",
    "href",
    "src",
    "width",
    "height",
    "cols",
    "rows",
    "size",
    "maxlength",
    "rel",
    "media",
    "accept-charset",
    "accept",
    "tabindex",
    "accesskey",
    "alt",
    "title",
    "class",
    "style",
    "selected",
    "checked",
    "readonly",
    "disabled",
)

Attributes = Mapping[str | int, Any]


class HtmlBuilder:
    """Generate HTML tags with consistently ordered, escaped attributes.

    Relative URIs are resolved against ``base_url``. With ``windowed_urls``
    enabled, anchors to absolute URLs open in a new window.

    Example:
        >>> builder = HtmlBuilder("https://example.com/")
        >>> builder.anchor("docs/", "Docs", {"class": "nav"})
        '<a href="https://example.com/docs/" class="nav">Docs</a>'
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        windowed_urls: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.base_url = base_url or "/"
        self.windowed_urls = windowed_urls
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: SiteSettings) -> HtmlBuilder:
        return cls(settings.url)

    def generate_url(self, uri: str) -> str:
        """Return ``uri`` as is when it is already a valid URL, else resolve it."""
        if uri == "":
            return self.base_url
        if is_valid_url(uri):
            return uri
        return urljoin(self.base_url, uri)

    def anchor(
        self, uri: str, title: str | None = None, attributes: Attributes | None = None
    ) -> str:
        """Create a link. ``title`` is not escaped so it may contain markup."""
        url = self.generate_url(uri)
        attrs = dict(attributes or {})
        if self.windowed_urls and "://" in url and not attrs.get("target"):
            attrs["target"] = "_blank"
        attrs["href"] = url
        if title is None:
            title = url
        return f"<a{self.attributes(attrs)}>{title}</a>"

    def mailto(
        self, email: str, title: str | None = None, attributes: Attributes | None = None
    ) -> str:
        """Create an obfuscated ``mailto:`` link with an escaped title."""
        if title is None:
            title = email
        href = self.obfuscate("mailto:") + email
        return (
            f'<a href="{href}"{self.attributes(attributes)}>'
            f"{html.escape(title)}</a>"
        )

    def image(
        self, file: str, alt: str | None = None, attributes: Attributes | None = None
    ) -> str:
        """Create an ``img`` tag.

        Raises:
            ValueError: If ``file`` is empty
        """
        if not file:
            raise ValueError("File can not be empty")
        attrs = dict(attributes or {})
        attrs["src"] = self.generate_url(file)
        attrs["alt"] = alt
        return f"<img{self.attributes(attrs)}>"

    def element(
        self, name: str, attributes: Attributes | None = None, close: bool = False
    ) -> str:
        tag = f"<{name}{self.attributes(attributes)}>"
        if close:
            tag += self.close_element(name)
        return tag

    def close_element(self, name: str) -> str:
        return f"</{name}>"

    def attributes(self, attributes: Attributes | None = None) -> str:
        """Compile ``attributes`` into a string with a leading space per item.

        Known attributes come first in :data:`ATTRIBUTE_ORDER`. An integer key
        uses the value as the name (``{5: "selected"}`` renders
        ``selected="selected"``); ``None`` values are skipped.
        """
        if not attributes:
            return ""
        ordered: dict[str | int, Any] = {
            key: attributes[key] for key in ATTRIBUTE_ORDER if key in attributes
        }
        for key, value in attributes.items():
            ordered.setdefault(key, value)

        compiled = ""
        for key, value in ordered.items():
            if value is None:
                continue
            name = value if isinstance(key, int) else key
            compiled += f' {name}="{html.escape(str(value))}"'
        return compiled

    def obfuscate(self, value: str) -> str:
        """Randomly encode each character as a decimal or hex entity, or keep it."""
        parts = []
        for letter in value:
            choice = self._rng.randint(1, 3)
            if choice == 1:
                parts.append(f"&#{ord(letter)};")
            elif choice == 2:
                parts.append(f"&#x{ord(letter):x};")
            else:
                parts.append(letter)
        return "".join(parts)


__all__ = ["ATTRIBUTE_ORDER", "HtmlBuilder"]
