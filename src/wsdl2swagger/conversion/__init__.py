"""Conversion of WSDL sources into Swagger YAML documents."""

from .orchestrator import (
    ConversionOrchestrator,
    ConversionReport,
    ConversionStatus,
    ServiceOutcome,
)
from .progress_tracker import ConversionProgressTracker

__all__ = [
    "ConversionOrchestrator",
    "ConversionProgressTracker",
    "ConversionReport",
    "ConversionStatus",
    "ServiceOutcome",
]
