"""Dependency injection container and construction recipes."""

from .config import ServiceConfig, load_service_config, parse_service_config
from .container import Container
from .definition import Definition, MethodCall
from .errors import ConfigurationError, ContainerError, ResolutionError
from .interfaces import ContainerInterface, Factory, Instance

__all__ = [
    "ConfigurationError",
    "Container",
    "ContainerError",
    "ContainerInterface",
    "Definition",
    "Factory",
    "Instance",
    "MethodCall",
    "ResolutionError",
    "ServiceConfig",
    "load_service_config",
    "parse_service_config",
]
