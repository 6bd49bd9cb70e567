"""In-process data holders."""

from .registry import ArrayRegistry, AttributeBag, DataHandler

__all__ = ["ArrayRegistry", "AttributeBag", "DataHandler"]
