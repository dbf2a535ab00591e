"""Data structures describing parsed WSDL sources."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ServiceDescriptor:
    """A service found in a WSDL source.

    ``source_file`` is None for a service requested by name that no
    parsed source defines.
    """

    name: str
    source_file: Optional[str] = None


@dataclass
class WSDLEntry:
    """One parsed WSDL document."""

    source_file: str
    path: Path
    document: Any  # zeep.wsdl.Document

    @property
    def service_names(self) -> List[str]:
        """Names of the services defined by this document, in document order."""
        return list(self.document.services.keys())

    def defines(self, service_name: str) -> bool:
        return service_name in self.document.services


@dataclass
class WSDLCatalog:
    """All WSDL documents parsed from one source, with their services."""

    source: str
    entries: List[WSDLEntry] = field(default_factory=list)
    services: List[ServiceDescriptor] = field(default_factory=list)

    @property
    def service_count(self) -> int:
        return len(self.services)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "files": [entry.source_file for entry in self.entries],
            "services": [
                {"service": s.name, "filename": s.source_file}
                for s in self.services
            ],
        }
