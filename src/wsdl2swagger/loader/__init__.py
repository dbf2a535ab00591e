"""WSDL loading into a catalog of services."""

from .models import ServiceDescriptor, WSDLCatalog, WSDLEntry
from .wsdl_loader import WSDLLoader, find_wsdl_for_service, get_wsdl_services

__all__ = [
    "ServiceDescriptor",
    "WSDLCatalog",
    "WSDLEntry",
    "WSDLLoader",
    "find_wsdl_for_service",
    "get_wsdl_services",
]
