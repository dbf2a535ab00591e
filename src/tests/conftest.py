"""Pytest configuration and shared fixtures."""

import asyncio
import logging
import logging.handlers
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest
import structlog
from faker import Faker

from wsdl2swagger.exceptions import GenerationError
from wsdl2swagger.loader import ServiceDescriptor, WSDLCatalog, WSDLEntry

fake = Faker()

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def bank_wsdl() -> Path:
    """Document/literal SOAP 1.1 WSDL defining Deposit and Withdraw."""
    return FIXTURES_DIR / "bank.wsdl"


@pytest.fixture
def calculator_wsdl() -> Path:
    """WSDL with a single SOAP 1.2 service named Calculator."""
    return FIXTURES_DIR / "calculator12.wsdl"


@pytest.fixture
def empty_wsdl() -> Path:
    """Valid WSDL without any service."""
    return FIXTURES_DIR / "empty.wsdl"


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "out"


def make_catalog(files: Iterable[Tuple[str, List[str]]]) -> WSDLCatalog:
    """Build a catalog whose entries carry placeholder documents.

    Args:
        files: (source file, service names) pairs in loader order
    """
    catalog = WSDLCatalog(source="stub")
    for source_file, names in files:
        document = SimpleNamespace(services={name: object() for name in names})
        catalog.entries.append(
            WSDLEntry(source_file=source_file, path=Path(source_file), document=document)
        )
        catalog.services.extend(
            ServiceDescriptor(name=name, source_file=source_file) for name in names
        )
    return catalog


class StubLoader:
    """Loader returning a prepared catalog or raising a prepared error."""

    def __init__(self, catalog: Optional[WSDLCatalog] = None, error: Exception = None):
        self.catalog = catalog
        self.error = error
        self.calls: List[str] = []

    async def load(self, source) -> WSDLCatalog:
        self.calls.append(str(source))
        if self.error is not None:
            raise self.error
        return self.catalog


class StubGenerator:
    """Generator producing a small document per service.

    Services listed in ``fail`` raise GenerationError.
    """

    def __init__(self, fail: Iterable[str] = ()):
        self.fail = set(fail)
        self.calls: List[str] = []

    @staticmethod
    def document_for(service_name: str, wsdl_id: str) -> Dict[str, Any]:
        return {
            "swagger": "2.0",
            "info": {"title": service_name, "version": "1.0.0"},
            "paths": {f"/{service_name}Op": {"post": {"responses": {"200": {"description": "OK"}}}}},
            "x-wsdl": {"source": wsdl_id, "service": service_name},
        }

    def generate(self, entry, service_name: str, wsdl_id: str) -> Dict[str, Any]:
        self.calls.append(service_name)
        if service_name in self.fail:
            raise GenerationError(f"Cannot generate {service_name}")
        return self.document_for(service_name, wsdl_id)


class ConcurrencyGauge:
    """Records the peak number of coroutines inside ``hold``."""

    def __init__(self):
        self.active = 0
        self.peak = 0

    async def hold(self, seconds: float = 0.01):
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(seconds)
        finally:
            self.active -= 1


@pytest.fixture
def service_names() -> List[str]:
    """Distinct, file-name safe service names."""
    names = set()
    while len(names) < 12:
        names.add(fake.unique.word().capitalize() + "Service")
    return sorted(names)


@pytest.fixture
def catalog_factory():
    return make_catalog


@pytest.fixture
def stub_loader_class():
    return StubLoader


@pytest.fixture
def stub_generator_class():
    return StubGenerator


@pytest.fixture
def concurrency_gauge() -> ConcurrencyGauge:
    return ConcurrencyGauge()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handlers and structlog setup a test installed."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
