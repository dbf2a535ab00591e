"""Orchestrates WSDL to Swagger conversion runs.

The loader runs once; every discovered service is then converted in its own
task and failure boundary. Tasks run concurrently up to ``max_concurrent``
and are all awaited before the run returns its report.
"""

import asyncio
import time
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from wsdl2swagger.config.logging import get_logger, log_performance, log_service_outcome
from wsdl2swagger.config.settings import ConversionConfig
from wsdl2swagger.conversion.progress_tracker import ConversionProgressTracker
from wsdl2swagger.exceptions import ConversionError, GenerationError, WriteError
from wsdl2swagger.generator import SwaggerGenerator, validate_swagger_document
from wsdl2swagger.loader import (
    ServiceDescriptor,
    WSDLCatalog,
    WSDLLoader,
    find_wsdl_for_service,
    get_wsdl_services,
)
from wsdl2swagger.writer import DocumentWriter


class ConversionStatus(Enum):
    """Outcome of one service conversion."""

    WRITTEN = "written"
    FAILED = "failed"


@dataclass
class ServiceOutcome:
    """Result of converting and writing one service."""

    name: str
    source_file: Optional[str] = None
    status: ConversionStatus = ConversionStatus.FAILED
    output_path: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    duration_ms: float = 0.0
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == ConversionStatus.WRITTEN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service": self.name,
            "source_file": self.source_file,
            "status": self.status.value,
            "output_path": self.output_path,
            "error": self.error,
            "error_type": self.error_type,
            "duration_ms": round(self.duration_ms, 2),
            "warnings": list(self.warnings),
        }


@dataclass
class ConversionReport:
    """Aggregated result of a conversion run."""

    source: str
    outcomes: List[ServiceOutcome] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> List[ServiceOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[ServiceOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def is_success(self) -> bool:
        """True when every service was written (vacuously true for none)."""
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "services_found": len(self.outcomes),
            "written": len(self.succeeded),
            "failed": len(self.failed),
            "duration_ms": round(self.duration_ms, 2),
            "services": [o.to_dict() for o in self.outcomes],
        }


class ConversionOrchestrator:
    """Coordinates the loader, the Swagger generator and the document writer."""

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        loader: Optional[WSDLLoader] = None,
        generator: Optional[SwaggerGenerator] = None,
        writer: Optional[DocumentWriter] = None,
        progress_tracker: Optional[ConversionProgressTracker] = None,
    ):
        self.config = config or ConversionConfig()
        self.loader = loader or WSDLLoader()
        self.generator = generator or SwaggerGenerator(
            api_version=self.config.api_version
        )
        self.writer = writer or DocumentWriter(self.config.get_output_dir())
        self.progress_tracker = progress_tracker or ConversionProgressTracker(
            enabled=False
        )
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    async def run(
        self,
        wsdl_source: Union[str, Path],
        services: Optional[Iterable[str]] = None,
    ) -> ConversionReport:
        """Convert every service of a WSDL source to a YAML file.

        Args:
            wsdl_source: WSDL file, directory or zip archive
            services: Optional service names restricting the conversion

        Returns:
            Report with one outcome per processed service

        Raises:
            LoadError: If the source cannot be loaded; nothing is written
            WriteError: If the output directory cannot be created
        """
        start_time = time.time()
        self.logger.info("Starting conversion", source=str(wsdl_source))

        with self.progress_tracker.track_phase("Loading WSDL source"):
            catalog = await self.loader.load(wsdl_source)

        descriptors = self.select_services(catalog, services)
        self._prepare_output_directory()

        with self.progress_tracker.track_phase("Converting services"):
            outcomes = await self._convert_all(catalog, descriptors)

        report = ConversionReport(
            source=str(wsdl_source),
            outcomes=outcomes,
            duration_ms=(time.time() - start_time) * 1000,
        )

        log_performance(
            self.logger,
            "conversion_run",
            report.duration_ms,
            services=len(outcomes),
            written=len(report.succeeded),
            failed=len(report.failed),
        )
        return report

    async def preview(self, wsdl_source: Union[str, Path]) -> Dict[str, Any]:
        """Load a source and list the files a run would write."""
        catalog = await self.loader.load(wsdl_source)
        return {
            "source": str(wsdl_source),
            "services": [
                {
                    "service": d.name,
                    "filename": d.source_file,
                    "output_path": str(self.writer.output_path(d.name)),
                }
                for d in self.select_services(catalog)
            ],
        }

    def select_services(
        self, catalog: WSDLCatalog, services: Optional[Iterable[str]] = None
    ) -> List[ServiceDescriptor]:
        """Descriptors to process, restricted and ordered per configuration.

        A requested name that the catalog lacks yields a descriptor without
        source file so that its resolution failure is reported.
        """
        descriptors = get_wsdl_services(catalog)

        if services:
            by_name: Dict[str, List[ServiceDescriptor]] = defaultdict(list)
            for descriptor in descriptors:
                by_name[descriptor.name].append(descriptor)

            selected: List[ServiceDescriptor] = []
            for name in dict.fromkeys(services):
                selected.extend(by_name.get(name) or [ServiceDescriptor(name=name)])
            descriptors = selected

        if self.config.sort_services:
            descriptors = sorted(
                descriptors, key=lambda d: (d.name, d.source_file or "")
            )
        return descriptors

    def _prepare_output_directory(self):
        output_dir = self.writer.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(
                f"Cannot create output directory {output_dir}: {e}",
                {"path": str(output_dir)},
            )

    async def _convert_all(
        self, catalog: WSDLCatalog, descriptors: List[ServiceDescriptor]
    ) -> List[ServiceOutcome]:
        semaphore = asyncio.Semaphore(self.config.max_concurrent)
        # Services sharing a name share an output file
        path_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        async def convert_single(descriptor: ServiceDescriptor) -> ServiceOutcome:
            async with semaphore:
                async with path_locks[descriptor.name]:
                    return await self._convert_service(catalog, descriptor)

        results = await asyncio.gather(
            *[convert_single(d) for d in descriptors],
            return_exceptions=True,
        )

        outcomes = []
        for descriptor, result in zip(descriptors, results):
            if isinstance(result, Exception):
                self.logger.error(
                    "Unexpected failure converting service",
                    service=descriptor.name,
                    error=str(result),
                )
                outcomes.append(
                    ServiceOutcome(
                        name=descriptor.name,
                        source_file=descriptor.source_file,
                        error=str(result),
                        error_type=type(result).__name__,
                    )
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)
        return outcomes

    async def _convert_service(
        self, catalog: WSDLCatalog, descriptor: ServiceDescriptor
    ) -> ServiceOutcome:
        """Resolve, generate, validate and write one service."""
        start_time = time.time()
        outcome = ServiceOutcome(
            name=descriptor.name, source_file=descriptor.source_file
        )

        try:
            entry = find_wsdl_for_service(
                catalog, descriptor.name, descriptor.source_file
            )
            wsdl_id = descriptor.source_file or entry.source_file
            document = self._generate(entry, descriptor.name, wsdl_id, outcome)
            path = await self.writer.write(descriptor.name, document)
            outcome.status = ConversionStatus.WRITTEN
            outcome.output_path = str(path)
        except ConversionError as e:
            outcome.status = ConversionStatus.FAILED
            outcome.error = e.message
            outcome.error_type = type(e).__name__

        outcome.duration_ms = (time.time() - start_time) * 1000

        log_service_outcome(
            self.logger,
            descriptor.name,
            outcome.success,
            source_file=outcome.source_file,
            output_path=outcome.output_path,
            error=outcome.error,
            duration_ms=round(outcome.duration_ms, 2),
        )
        self.progress_tracker.service_done(
            descriptor.name,
            outcome.success,
            outcome.output_path if outcome.success else outcome.error,
        )
        return outcome

    def _generate(
        self, entry, service_name: str, wsdl_id: str, outcome: ServiceOutcome
    ) -> Dict[str, Any]:
        try:
            document = self.generator.generate(entry, service_name, wsdl_id)
            if self.config.validate_output:
                outcome.warnings = validate_swagger_document(document)
        except ConversionError:
            raise
        except Exception as e:
            raise GenerationError(
                f"Failed to generate Swagger for '{service_name}': {e}",
                {"service": service_name, "error_type": type(e).__name__},
            )

        if outcome.warnings:
            self.logger.warning(
                "Generated document has validation findings",
                service=service_name,
                findings=len(outcome.warnings),
            )
            if self.config.strict_validation:
                raise GenerationError(
                    f"Generated document for '{service_name}' is not valid Swagger 2.0",
                    {"service": service_name, "findings": outcome.warnings},
                )
        return document
