"""Swagger 2.0 document generation for one WSDL service."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from zeep.wsdl.bindings import Soap11Binding, Soap12Binding

from wsdl2swagger.config.logging import get_logger
from wsdl2swagger.exceptions import GenerationError, ServiceResolutionError
from wsdl2swagger.generator.type_mapper import SchemaBuilder
from wsdl2swagger.loader.models import WSDLEntry

logger = get_logger(__name__)

SOAP_11 = "1.1"
SOAP_12 = "1.2"

SOAP_ENVELOPE_NAMESPACES = {
    SOAP_11: "http://schemas.xmlsoap.org/soap/envelope/",
    SOAP_12: "http://www.w3.org/2003/05/soap-envelope",
}

SOAP_CONTENT_TYPES = {
    SOAP_11: "text/xml",
    SOAP_12: "application/soap+xml",
}

ENVELOPE_PREFIX = "soapenv"


@dataclass
class SoapPort:
    """A service port bound to SOAP."""

    name: str
    binding: Any
    version: str
    address: Optional[str] = None


class SwaggerGenerator:
    """Builds Swagger 2.0 documents from parsed WSDL services."""

    def __init__(self, api_version: str = "1.0.0"):
        self.api_version = api_version
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    def generate(
        self, entry: WSDLEntry, service_name: str, wsdl_id: str
    ) -> Dict[str, Any]:
        """Generate the Swagger document of one service.

        Args:
            entry: Parsed WSDL entry defining the service
            service_name: Name of the wsdl:service
            wsdl_id: Identifier of the originating WSDL file

        Returns:
            Swagger 2.0 document as plain dicts and lists

        Raises:
            ServiceResolutionError: If the entry does not define the service
            GenerationError: If the service exposes no SOAP port
        """
        try:
            service = entry.document.services[service_name]
        except KeyError:
            raise ServiceResolutionError(service_name, {"source_file": wsdl_id})

        ports = self._soap_ports(service)
        if not ports:
            raise GenerationError(
                f"Service '{service_name}' has no SOAP 1.1 or SOAP 1.2 port",
                {"service": service_name, "source_file": wsdl_id},
            )

        builder = SchemaBuilder()
        swagger: Dict[str, Any] = {
            "swagger": "2.0",
            "info": {
                "title": service_name,
                "description": f"Generated from {wsdl_id}",
                "version": self.api_version,
            },
        }
        swagger.update(self._location(ports[0].address))

        paths: Dict[str, Any] = {}
        for port in ports:
            for operation_name, operation in port.binding.all().items():
                path = f"/{operation_name}"
                if path in paths:
                    self.logger.debug(
                        "Operation already emitted by another port",
                        operation=operation_name,
                        port=port.name,
                    )
                    continue
                paths[path] = {
                    "post": self._operation(operation_name, operation, port, builder)
                }

        swagger["paths"] = paths
        if builder.definitions:
            swagger["definitions"] = builder.definitions

        wsdl_info = {"source": wsdl_id, "service": service_name}
        namespace = getattr(ports[0].binding.name, "namespace", None)
        if namespace:
            wsdl_info["targetNamespace"] = namespace
        swagger["x-wsdl"] = wsdl_info

        self.logger.debug(
            "Generated Swagger document",
            service=service_name,
            operations=len(paths),
            definitions=len(builder.definitions),
        )
        return swagger

    def _soap_ports(self, service: Any) -> List[SoapPort]:
        """SOAP ports of a service, SOAP 1.1 first."""
        soap11: List[SoapPort] = []
        soap12: List[SoapPort] = []

        for port_name, port in service.ports.items():
            binding = port.binding
            address = (port.binding_options or {}).get("address")
            if isinstance(binding, Soap12Binding):
                soap12.append(SoapPort(port_name, binding, SOAP_12, address))
            elif isinstance(binding, Soap11Binding):
                soap11.append(SoapPort(port_name, binding, SOAP_11, address))
            else:
                self.logger.warning(
                    "Skipping non-SOAP port",
                    service=service.name,
                    port=port_name,
                    binding=type(binding).__name__,
                )
        return soap11 + soap12

    def _location(self, address: Optional[str]) -> Dict[str, Any]:
        parsed = urlparse(address or "")
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return {
                "host": parsed.netloc,
                "basePath": parsed.path or "/",
                "schemes": [parsed.scheme],
            }
        return {"basePath": "/"}

    def _operation(
        self, name: str, operation: Any, port: SoapPort, builder: SchemaBuilder
    ) -> Dict[str, Any]:
        content_type = SOAP_CONTENT_TYPES[port.version]
        soap_action = getattr(operation, "soapaction", None) or ""

        input_ref = builder.add_definition(
            f"{name}Input",
            self._envelope(self._body(operation.input, builder), port.version),
        )
        parameters: List[Dict[str, Any]] = [
            {"name": "body", "in": "body", "required": True, "schema": input_ref}
        ]
        if port.version == SOAP_11 and soap_action:
            parameters.append(
                {
                    "name": "SOAPAction",
                    "in": "header",
                    "required": False,
                    "type": "string",
                    "default": soap_action,
                }
            )

        responses: Dict[str, Any] = {}
        if operation.output is not None:
            output_ref = builder.add_definition(
                f"{name}Output",
                self._envelope(self._body(operation.output, builder), port.version),
            )
            responses["200"] = {"description": "OK", "schema": output_ref}
        else:
            responses["200"] = {"description": "OK"}

        fault_elements = self._fault_elements(operation)
        if fault_elements:
            fault_ref = builder.add_definition(
                f"{name}Fault",
                self._envelope(
                    self._fault_body(fault_elements, port.version, builder),
                    port.version,
                ),
            )
            responses["default"] = {"description": "SOAP fault", "schema": fault_ref}

        return {
            "operationId": name,
            "summary": f"Operation {name}",
            "consumes": [content_type],
            "produces": [content_type],
            "parameters": parameters,
            "responses": responses,
            "x-soap": {
                "action": soap_action,
                "style": getattr(operation, "style", None) or "document",
                "port": port.name,
                "version": port.version,
            },
        }

    def _envelope(self, body: Dict[str, Any], version: str) -> Dict[str, Any]:
        namespace = SOAP_ENVELOPE_NAMESPACES[version]
        body["xml"] = {"name": "Body", "prefix": ENVELOPE_PREFIX, "namespace": namespace}
        return {
            "type": "object",
            "required": ["Body"],
            "properties": {"Body": body},
            "xml": {"name": "Envelope", "prefix": ENVELOPE_PREFIX, "namespace": namespace},
        }

    def _body(self, message: Any, builder: SchemaBuilder) -> Dict[str, Any]:
        """Schema of the SOAP Body content of a concrete message."""
        element = getattr(message, "body", None)
        if element is None:
            return {"type": "object"}

        # Several parts are wrapped by zeep into a synthetic soap Body element
        qname = getattr(element, "qname", None)
        if (
            qname is not None
            and qname.localname == "Body"
            and qname.namespace in SOAP_ENVELOPE_NAMESPACES.values()
        ):
            return builder.complex_schema(element.type)

        return {
            "type": "object",
            "properties": {element.name: builder.element_payload(element)},
        }

    def _fault_elements(self, operation: Any) -> List[Any]:
        abstract = getattr(operation, "abstract", None)
        fault_messages = getattr(abstract, "fault_messages", None) or {}

        elements = []
        for message in fault_messages.values():
            for part in message.parts.values():
                if part.element is not None:
                    elements.append(part.element)
        return elements

    def _fault_body(
        self, elements: List[Any], version: str, builder: SchemaBuilder
    ) -> Dict[str, Any]:
        detail = {
            "type": "object",
            "properties": {
                element.name: builder.element_payload(element) for element in elements
            },
        }

        if version == SOAP_12:
            fault = {
                "type": "object",
                "properties": {
                    "Code": {
                        "type": "object",
                        "properties": {"Value": {"type": "string"}},
                    },
                    "Reason": {
                        "type": "object",
                        "properties": {"Text": {"type": "string"}},
                    },
                    "Detail": detail,
                },
            }
        else:
            fault = {
                "type": "object",
                "properties": {
                    "faultcode": {"type": "string"},
                    "faultstring": {"type": "string"},
                    "faultactor": {"type": "string"},
                    "detail": detail,
                },
            }

        return {"type": "object", "properties": {"Fault": fault}}
