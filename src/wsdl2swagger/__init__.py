"""WSDL to Swagger converter.

Parses WSDL sources with zeep and writes one Swagger 2.0 YAML document per
discovered service.
"""

from .__version__ import __version__
from .exceptions import (
    ConfigurationError,
    ConversionError,
    GenerationError,
    LoadError,
    ServiceResolutionError,
    WriteError,
)

__all__ = [
    "__version__",
    "ConfigurationError",
    "ConversionError",
    "GenerationError",
    "LoadError",
    "ServiceResolutionError",
    "WriteError",
]
