"""XML Schema to Swagger 2.0 schema translation.

Works on the resolved type objects zeep builds while loading a WSDL. Named
complex types become entries of ``definitions`` and are referenced with
``$ref``; anonymous complex types are inlined. Simple types map onto a
Swagger ``type``/``format`` pair through their XSD builtin base.
"""

from typing import Any, Dict, List, Optional

from zeep import xsd

from wsdl2swagger.config.logging import get_logger

logger = get_logger(__name__)

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

# XSD builtin local name -> Swagger schema
XSD_TYPE_MAP: Dict[str, Dict[str, str]] = {
    "string": {"type": "string"},
    "normalizedString": {"type": "string"},
    "token": {"type": "string"},
    "language": {"type": "string"},
    "Name": {"type": "string"},
    "NCName": {"type": "string"},
    "NMTOKEN": {"type": "string"},
    "NMTOKENS": {"type": "string"},
    "ID": {"type": "string"},
    "IDREF": {"type": "string"},
    "IDREFS": {"type": "string"},
    "ENTITY": {"type": "string"},
    "ENTITIES": {"type": "string"},
    "QName": {"type": "string"},
    "NOTATION": {"type": "string"},
    "anyURI": {"type": "string", "format": "uri"},
    "anySimpleType": {"type": "string"},
    "duration": {"type": "string"},
    "date": {"type": "string", "format": "date"},
    "dateTime": {"type": "string", "format": "date-time"},
    "time": {"type": "string"},
    "gYear": {"type": "string"},
    "gYearMonth": {"type": "string"},
    "gMonth": {"type": "string"},
    "gMonthDay": {"type": "string"},
    "gDay": {"type": "string"},
    "base64Binary": {"type": "string", "format": "byte"},
    "hexBinary": {"type": "string"},
    "boolean": {"type": "boolean"},
    "decimal": {"type": "number"},
    "float": {"type": "number", "format": "float"},
    "double": {"type": "number", "format": "double"},
    "integer": {"type": "integer"},
    "nonPositiveInteger": {"type": "integer"},
    "negativeInteger": {"type": "integer"},
    "nonNegativeInteger": {"type": "integer"},
    "positiveInteger": {"type": "integer"},
    "long": {"type": "integer", "format": "int64"},
    "int": {"type": "integer", "format": "int32"},
    "short": {"type": "integer", "format": "int32"},
    "byte": {"type": "integer", "format": "int32"},
    "unsignedLong": {"type": "integer", "format": "int64"},
    "unsignedInt": {"type": "integer", "format": "int64"},
    "unsignedShort": {"type": "integer", "format": "int32"},
    "unsignedByte": {"type": "integer", "format": "int32"},
}

DEFAULT_SIMPLE_SCHEMA = {"type": "string"}


def definition_ref(name: str) -> Dict[str, str]:
    """Build a local ``$ref`` to a definition."""
    return {"$ref": f"#/definitions/{name}"}


def builtin_name(xsd_type: Any) -> Optional[str]:
    """Local name of the XSD builtin a simple type derives from.

    zeep models a restricted simple type as a dynamic subclass of its
    builtin base, so the first class in the MRO declaring an XSD qname
    is the builtin.
    """
    for cls in type(xsd_type).__mro__:
        qname = vars(cls).get("_default_qname")
        if qname is not None and getattr(qname, "namespace", None) == XSD_NAMESPACE:
            return qname.localname

    qname = getattr(xsd_type, "qname", None)
    if qname is not None and getattr(qname, "namespace", None) == XSD_NAMESPACE:
        return qname.localname
    return None


def is_repeated(element: Any) -> bool:
    """Whether an element may occur more than once."""
    max_occurs = getattr(element, "max_occurs", 1)
    if max_occurs == "unbounded":
        return True
    return isinstance(max_occurs, int) and max_occurs > 1


def is_required(element: Any) -> bool:
    """Whether an element must be present and carry a value."""
    min_occurs = getattr(element, "min_occurs", 1)
    if min_occurs is None:
        min_occurs = 1
    return min_occurs >= 1 and not getattr(element, "nillable", False)


class SchemaBuilder:
    """Collects Swagger definitions while translating XSD types.

    One builder is used per generated document so that ``definitions``
    only contains the types that document references.
    """

    def __init__(self):
        self.definitions: Dict[str, Dict[str, Any]] = {}
        self._names: Dict[str, str] = {}
        self._anonymous_stack: List[int] = []

    def add_definition(self, name: str, schema: Dict[str, Any]) -> Dict[str, str]:
        """Store a schema under a unique definition name and return its ref."""
        unique = self._unique_name(name)
        self.definitions[unique] = schema
        return definition_ref(unique)

    def element_payload(self, element: Any) -> Dict[str, Any]:
        """Schema of an element used as a SOAP body payload."""
        schema = self.type_schema(element.type)
        if "$ref" not in schema:
            qname = getattr(element, "qname", None)
            xml = {"name": element.name}
            namespace = getattr(qname, "namespace", None)
            if namespace:
                xml["namespace"] = namespace
            schema["xml"] = xml
        return schema

    def element_schema(self, element: Any) -> Dict[str, Any]:
        """Schema of a child element, including its cardinality."""
        schema = self.type_schema(element.type)

        if is_repeated(element):
            schema = {"type": "array", "items": schema}
            max_occurs = element.max_occurs
            if isinstance(max_occurs, int):
                schema["maxItems"] = max_occurs
            min_occurs = getattr(element, "min_occurs", 0) or 0
            if min_occurs > 1:
                schema["minItems"] = min_occurs

        if getattr(element, "nillable", False):
            schema["x-nullable"] = True
        return schema

    def type_schema(self, xsd_type: Any) -> Dict[str, Any]:
        """Translate any XSD type into a Swagger schema."""
        if xsd_type is None:
            return dict(DEFAULT_SIMPLE_SCHEMA)

        if isinstance(xsd_type, xsd.ComplexType):
            # zeep names anonymous types after their element; only globals get a definition
            if xsd_type.is_global and xsd_type.qname is not None:
                return self._complex_reference(xsd_type)
            return self._anonymous_complex(xsd_type)

        if isinstance(xsd_type, xsd.AnySimpleType):
            return self.simple_schema(xsd_type)

        # xsd:anyType and anything zeep could not resolve
        return {"type": "object"}

    def simple_schema(self, xsd_type: Any) -> Dict[str, Any]:
        name = builtin_name(xsd_type)
        if name in XSD_TYPE_MAP:
            return dict(XSD_TYPE_MAP[name])
        return dict(DEFAULT_SIMPLE_SCHEMA)

    def complex_schema(self, xsd_type: Any) -> Dict[str, Any]:
        """Object schema listing the child elements and attributes of a type."""
        schema: Dict[str, Any] = {"type": "object"}
        properties: Dict[str, Any] = {}
        required: List[str] = []

        for attr_name, element in xsd_type.elements:
            if isinstance(element, xsd.Any) or not hasattr(element, "type"):
                continue
            name = getattr(element, "name", None) or attr_name
            properties[name] = self.element_schema(element)
            if is_required(element) and not is_repeated(element):
                required.append(name)

        for attr_name, attribute in xsd_type.attributes:
            if isinstance(attribute, xsd.AnyAttribute):
                continue
            name = getattr(attribute, "name", None) or attr_name
            prop = self.type_schema(getattr(attribute, "type", None))
            if "$ref" not in prop:
                prop["xml"] = {"attribute": True}
            properties[name] = prop
            if getattr(attribute, "required", False):
                required.append(name)

        if properties:
            schema["properties"] = properties
        if required:
            schema["required"] = required
        return schema

    def _complex_reference(self, xsd_type: Any) -> Dict[str, str]:
        key = xsd_type.qname.text
        if key in self._names:
            return definition_ref(self._names[key])

        # Register before descending so recursive types resolve to the ref
        name = self._unique_name(xsd_type.qname.localname)
        self._names[key] = name
        self.definitions[name] = {}
        schema = self.complex_schema(xsd_type)
        if xsd_type.qname.namespace:
            schema["xml"] = {"namespace": xsd_type.qname.namespace}
        self.definitions[name] = schema
        return definition_ref(name)

    def _anonymous_complex(self, xsd_type: Any) -> Dict[str, Any]:
        marker = id(xsd_type)
        if marker in self._anonymous_stack:
            logger.debug("Recursive anonymous type, emitting plain object")
            return {"type": "object"}

        self._anonymous_stack.append(marker)
        try:
            return self.complex_schema(xsd_type)
        finally:
            self._anonymous_stack.pop()

    def _unique_name(self, name: str) -> str:
        if name not in self.definitions:
            return name
        suffix = 2
        while f"{name}{suffix}" in self.definitions:
            suffix += 1
        return f"{name}{suffix}"
