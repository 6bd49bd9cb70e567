"""HTML fragment helpers."""

from .builder import ATTRIBUTE_ORDER, HtmlBuilder

__all__ = ["ATTRIBUTE_ORDER", "HtmlBuilder"]
