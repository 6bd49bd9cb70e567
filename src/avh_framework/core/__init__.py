"""Core utilities for configuration and logging."""

from .config import (
    AppSettings,
    LoggingSettings,
    MailSettings,
    SecuritySettings,
    SiteSettings,
    StorageSettings,
    load_app_settings,
)
from .logging import configure_logging

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "MailSettings",
    "SecuritySettings",
    "SiteSettings",
    "StorageSettings",
    "configure_logging",
    "load_app_settings",
]
