"""Wire framework services into a container."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .core import AppSettings, configure_logging, load_app_settings
from .data import ArrayRegistry, DataHandler
from .di import Container, Instance, load_service_config
from .html import HtmlBuilder
from .mail import Mailer, SmtpTransport
from .network import NonceManager
from .options import SqliteOptionStore

LOGGER = logging.getLogger(__name__)

SETTINGS = "settings"
OPTION_STORE = "options.store"
NONCES = "security.nonces"
MAIL_TRANSPORT = "mail.transport"
MAILER = "mailer"
REGISTRY = "registry"
HTML = "html"


def register_framework_services(
    container: Container, settings: AppSettings
) -> Container:
    """Register the shared framework services on ``container``."""
    container.register(SETTINGS, Instance(settings))
    container.register(
        OPTION_STORE, lambda: SqliteOptionStore(settings.storage), shared=True
    )
    container.register(
        NONCES, lambda: NonceManager.from_settings(settings.security), shared=True
    )
    container.register(
        MAIL_TRANSPORT, lambda: SmtpTransport(settings.mail), shared=True
    )
    container.register(
        MAILER,
        lambda: Mailer.from_settings(container.resolve(MAIL_TRANSPORT), settings.site),
        shared=True,
    )
    container.register(REGISTRY, DataHandler, shared=True).with_argument(
        Instance(ArrayRegistry())
    )
    container.register(
        HTML, lambda: HtmlBuilder.from_settings(settings.site), shared=True
    )
    return container


def create_container(
    settings: AppSettings | None = None,
    config: Mapping[str, Any] | Path | str | None = None,
    *,
    setup_logging: bool = False,
) -> Container:
    """Build a container holding the framework services and ``config`` entries.

    ``config`` is either a declarative mapping or the path of a JSON file.
    Entries in ``config`` may override the framework services.
    """
    settings = settings or load_app_settings()
    if setup_logging:
        configure_logging(settings.logging)

    container = register_framework_services(Container(), settings)
    if config is not None:
        if isinstance(config, (str, Path)):
            config = load_service_config(config)
        container.set_config(config)
    LOGGER.debug("Container ready with %d registrations", len(container))
    return container


__all__ = [
    "HTML",
    "MAILER",
    "MAIL_TRANSPORT",
    "NONCES",
    "OPTION_STORE",
    "REGISTRY",
    "SETTINGS",
    "create_container",
    "register_framework_services",
]
