"""Swagger 2.0 generation from parsed WSDL services."""

from .swagger_generator import SwaggerGenerator
from .type_mapper import SchemaBuilder
from .validation import validate_swagger_document

__all__ = ["SchemaBuilder", "SwaggerGenerator", "validate_swagger_document"]
