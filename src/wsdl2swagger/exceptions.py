"""Exceptions raised while converting WSDL sources to Swagger documents."""

from typing import Any, Dict, Optional


class ConversionError(Exception):
    """Exception raised during conversion process."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class LoadError(ConversionError):
    """The WSDL source could not be read or parsed.

    Fatal for a whole run: no service is converted.
    """


class ServiceResolutionError(ConversionError):
    """A service name does not match any parsed WSDL entry."""

    def __init__(self, service_name: str, details: Optional[Dict[str, Any]] = None):
        self.service_name = service_name
        super().__init__(
            f"Service '{service_name}' not found in any parsed WSDL", details
        )


class GenerationError(ConversionError):
    """Building the Swagger document for one service failed."""


class WriteError(ConversionError):
    """Writing one YAML document to disk failed."""


class ConfigurationError(Exception):
    """Settings could not be read from the config file or environment."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message
