"""Swagger 2.0 compliance checks for generated documents."""

from typing import Any, Dict, List

from openapi_spec_validator import OpenAPIV2SpecValidator

from wsdl2swagger.config.logging import get_logger

logger = get_logger(__name__)


def validate_swagger_document(document: Dict[str, Any]) -> List[str]:
    """Validate a document against the Swagger 2.0 schema.

    Returns:
        One message per finding, prefixed with the JSON path of the offending
        node; empty when the document is valid
    """
    validator = OpenAPIV2SpecValidator(document)
    findings = []
    for error in validator.iter_errors():
        location = "/".join(str(part) for part in getattr(error, "absolute_path", []))
        message = getattr(error, "message", str(error))
        findings.append(f"{location}: {message}" if location else message)

    if findings:
        logger.debug(
            "Swagger validation findings",
            title=document.get("info", {}).get("title"),
            count=len(findings),
        )
    return findings
