"""Version information for wsdl2swagger."""

__version__ = "0.1.0"
