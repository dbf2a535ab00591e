"""WSDL loading with zeep.

Accepts a single WSDL file, a directory of ``*.wsdl`` files or a zip archive
of WSDL/XSD files and produces a :class:`WSDLCatalog`.
"""

import asyncio
import tempfile
import time
import zipfile
from collections import Counter
from pathlib import Path
from typing import List, Optional, Union

import requests
from lxml import etree
from zeep import Settings as ZeepSettings
from zeep.exceptions import Error as ZeepError
from zeep.transports import Transport
from zeep.wsdl import Document

from wsdl2swagger.config.logging import get_logger, log_performance
from wsdl2swagger.config.settings import LoaderConfig
from wsdl2swagger.exceptions import LoadError, ServiceResolutionError
from wsdl2swagger.loader.models import ServiceDescriptor, WSDLCatalog, WSDLEntry

WSDL_NAMESPACE = "http://schemas.xmlsoap.org/wsdl/"
WSDL_EXTENSIONS = (".wsdl",)


class WSDLLoader:
    """Parses WSDL sources into a catalog of services."""

    def __init__(self, config: Optional[LoaderConfig] = None):
        self.config = config or LoaderConfig()
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    async def load(self, source: Union[str, Path]) -> WSDLCatalog:
        """Load every WSDL document found at ``source``.

        Parsing runs in a worker thread; awaiting the result does not block
        the event loop.

        Args:
            source: WSDL file, directory or zip archive

        Returns:
            Catalog with the parsed entries and their services

        Raises:
            LoadError: If the source is missing or any document fails to parse
        """
        path = Path(source)
        start_time = time.time()

        self.logger.info("Loading WSDL source", source=str(path))

        if not path.exists():
            raise LoadError(
                f"WSDL source not found: {path}", {"source": str(path)}
            )

        entries = await asyncio.to_thread(self._load_entries, path)
        catalog = WSDLCatalog(source=str(path), entries=entries)

        for entry in entries:
            for name in entry.service_names:
                catalog.services.append(
                    ServiceDescriptor(name=name, source_file=entry.source_file)
                )

        counts = Counter(s.name for s in catalog.services)
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        if duplicates:
            self.logger.warning(
                "Duplicate service names, output files will be overwritten",
                services=duplicates,
            )

        log_performance(
            self.logger,
            "wsdl_load",
            (time.time() - start_time) * 1000,
            files=len(entries),
            services=catalog.service_count,
        )
        return catalog

    def _load_entries(self, path: Path) -> List[WSDLEntry]:
        # one HTTP session for every document and remote import of the source
        session = requests.Session()
        try:
            return self._collect_entries(path, Transport(session=session))
        finally:
            session.close()

    def _collect_entries(self, path: Path, transport: Transport) -> List[WSDLEntry]:
        if path.is_dir():
            files = sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() in WSDL_EXTENSIONS
            )
            if not files:
                raise LoadError(
                    f"No WSDL files found in directory: {path}",
                    {"source": str(path)},
                )
            return [self._parse(f, f.name, transport) for f in files]

        if zipfile.is_zipfile(path):
            return self._load_archive(path, transport)

        if path.suffix.lower() == ".zip":
            raise LoadError(f"Invalid zip archive: {path}", {"source": str(path)})

        return [self._parse(path, path.name, transport)]

    def _load_archive(self, path: Path, transport: Transport) -> List[WSDLEntry]:
        try:
            with zipfile.ZipFile(path) as archive:
                members = sorted(
                    name for name in archive.namelist()
                    if not name.endswith("/")
                    and name.lower().endswith(WSDL_EXTENSIONS)
                )
                if not members:
                    raise LoadError(
                        f"No WSDL files found in archive: {path}",
                        {"source": str(path)},
                    )

                with tempfile.TemporaryDirectory(prefix="wsdl2swagger-") as tmp:
                    archive.extractall(tmp)
                    return [
                        self._parse(Path(tmp) / member, member, transport, origin=path)
                        for member in members
                    ]
        except zipfile.BadZipFile as e:
            raise LoadError(
                f"Invalid zip archive: {path}", {"source": str(path), "error": str(e)}
            )

    def _parse(
        self,
        wsdl_path: Path,
        source_file: str,
        transport: Transport,
        origin: Optional[Path] = None,
    ) -> WSDLEntry:
        """Parse one WSDL document with zeep."""
        details = {"source_file": source_file}

        self._check_root_element(wsdl_path, source_file)

        settings = ZeepSettings(
            strict=self.config.strict, xml_huge_tree=self.config.xml_huge_tree
        )
        try:
            document = Document(str(wsdl_path), transport, settings=settings)
        except (ZeepError, etree.XMLSyntaxError, OSError, ValueError) as e:
            details["error_type"] = type(e).__name__
            raise LoadError(f"Failed to parse WSDL {source_file}: {e}", details)

        self.logger.debug(
            "Parsed WSDL document",
            source_file=source_file,
            services=list(document.services.keys()),
        )
        return WSDLEntry(
            source_file=source_file, path=origin or wsdl_path, document=document
        )

    def _check_root_element(self, wsdl_path: Path, source_file: str) -> None:
        parser = etree.XMLParser(
            resolve_entities=False, huge_tree=self.config.xml_huge_tree
        )
        try:
            root = etree.parse(str(wsdl_path), parser).getroot()
        except etree.XMLSyntaxError as e:
            raise LoadError(
                f"Malformed XML in {source_file}: {e}",
                {"source_file": source_file, "error_type": "XMLSyntaxError"},
            )
        except OSError as e:
            raise LoadError(
                f"Cannot read {source_file}: {e}",
                {"source_file": source_file, "error_type": type(e).__name__},
            )

        if root.tag != etree.QName(WSDL_NAMESPACE, "definitions").text:
            raise LoadError(
                f"{source_file} is not a WSDL 1.1 document",
                {"source_file": source_file, "root_element": root.tag},
            )


def get_wsdl_services(catalog: WSDLCatalog) -> List[ServiceDescriptor]:
    """Services of a catalog in loader order."""
    return list(catalog.services)


def find_wsdl_for_service(
    catalog: WSDLCatalog, service_name: str, source_file: Optional[str] = None
) -> WSDLEntry:
    """Find the parsed entry defining ``service_name``.

    When several documents define the same name, the entry loaded from
    ``source_file`` wins; otherwise the first defining entry is returned.

    Args:
        catalog: Loaded catalog
        service_name: Name of the wsdl:service
        source_file: File the service was discovered in, if known

    Raises:
        ServiceResolutionError: If no entry defines the service
    """
    if source_file is not None:
        for entry in catalog.entries:
            if entry.source_file == source_file and entry.defines(service_name):
                return entry
    for entry in catalog.entries:
        if entry.defines(service_name):
            return entry
    raise ServiceResolutionError(
        service_name,
        {"searched_files": [entry.source_file for entry in catalog.entries]},
    )
