"""Configuration and logging for the WSDL to Swagger converter."""

from wsdl2swagger.exceptions import ConfigurationError
from .logging import configure_logging, get_logger
from .settings import (
    ConversionConfig,
    LoaderConfig,
    LoggingConfig,
    Settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "ConversionConfig",
    "LoaderConfig",
    "LoggingConfig",
    "Settings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
