"""Tests for Swagger 2.0 generation from parsed WSDL services."""

from types import SimpleNamespace

import pytest

from wsdl2swagger.exceptions import GenerationError, ServiceResolutionError
from wsdl2swagger.generator import SwaggerGenerator, validate_swagger_document
from wsdl2swagger.loader import WSDLEntry, WSDLLoader, find_wsdl_for_service

BANK_NS = "http://example.com/bank"
SOAP11_ENV = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP12_ENV = "http://www.w3.org/2003/05/soap-envelope"


async def load_entry(path, service_name):
    catalog = await WSDLLoader().load(path)
    return find_wsdl_for_service(catalog, service_name)


class TestSwaggerGenerator:
    """Test cases for SwaggerGenerator."""

    def setup_method(self):
        self.generator = SwaggerGenerator()

    @pytest.mark.asyncio
    async def test_document_header(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Deposit")

        swagger = self.generator.generate(entry, "Deposit", "bank.wsdl")

        assert list(swagger)[:2] == ["swagger", "info"]
        assert swagger["swagger"] == "2.0"
        assert swagger["info"] == {
            "title": "Deposit",
            "description": "Generated from bank.wsdl",
            "version": "1.0.0",
        }
        assert swagger["host"] == "example.com"
        assert swagger["basePath"] == "/bank/deposit"
        assert swagger["schemes"] == ["http"]
        assert swagger["x-wsdl"] == {
            "source": "bank.wsdl",
            "service": "Deposit",
            "targetNamespace": BANK_NS,
        }

    @pytest.mark.asyncio
    async def test_api_version(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Deposit")

        swagger = SwaggerGenerator(api_version="3.1.4").generate(
            entry, "Deposit", "bank.wsdl"
        )

        assert swagger["info"]["version"] == "3.1.4"

    @pytest.mark.asyncio
    async def test_operation_path(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Deposit")

        swagger = self.generator.generate(entry, "Deposit", "bank.wsdl")

        assert list(swagger["paths"]) == ["/MakeDeposit"]
        operation = swagger["paths"]["/MakeDeposit"]["post"]
        assert operation["operationId"] == "MakeDeposit"
        assert operation["consumes"] == ["text/xml"]
        assert operation["produces"] == ["text/xml"]
        assert operation["parameters"] == [
            {
                "name": "body",
                "in": "body",
                "required": True,
                "schema": {"$ref": "#/definitions/MakeDepositInput"},
            },
            {
                "name": "SOAPAction",
                "in": "header",
                "required": False,
                "type": "string",
                "default": "http://example.com/bank/MakeDeposit",
            },
        ]
        assert operation["responses"] == {
            "200": {
                "description": "OK",
                "schema": {"$ref": "#/definitions/MakeDepositOutput"},
            }
        }
        assert operation["x-soap"] == {
            "action": "http://example.com/bank/MakeDeposit",
            "style": "document",
            "port": "DepositPort",
            "version": "1.1",
        }

    @pytest.mark.asyncio
    async def test_input_envelope_definition(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Deposit")

        definitions = self.generator.generate(entry, "Deposit", "bank.wsdl")["definitions"]

        assert list(definitions) == ["Amount", "MakeDepositInput", "MakeDepositOutput"]
        envelope = definitions["MakeDepositInput"]
        assert envelope["required"] == ["Body"]
        assert envelope["xml"] == {
            "name": "Envelope",
            "prefix": "soapenv",
            "namespace": SOAP11_ENV,
        }

        request = envelope["properties"]["Body"]["properties"]["DepositRequest"]
        assert request["xml"] == {"name": "DepositRequest", "namespace": BANK_NS}
        assert request["required"] == ["account", "amount"]
        assert request["properties"]["account"] == {"type": "string"}
        assert request["properties"]["amount"] == {"$ref": "#/definitions/Amount"}
        assert request["properties"]["memo"] == {"type": "string"}

    @pytest.mark.asyncio
    async def test_named_types_are_shared(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Deposit")

        definitions = self.generator.generate(entry, "Deposit", "bank.wsdl")["definitions"]

        assert definitions["Amount"] == {
            "type": "object",
            "properties": {
                "value": {"type": "number"},
                "currency": {"type": "string"},
            },
            "required": ["value", "currency"],
            "xml": {"namespace": BANK_NS},
        }
        response = definitions["MakeDepositOutput"]["properties"]["Body"]
        fields = response["properties"]["DepositResponse"]["properties"]
        assert fields["balance"] == {"$ref": "#/definitions/Amount"}
        assert fields["postedAt"] == {"type": "string", "format": "date-time"}

    @pytest.mark.asyncio
    async def test_fault_and_repeated_elements(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Withdraw")

        swagger = self.generator.generate(entry, "Withdraw", "bank.wsdl")

        assert swagger["schemes"] == ["https"]
        operation = swagger["paths"]["/MakeWithdrawal"]["post"]
        assert operation["responses"]["default"] == {
            "description": "SOAP fault",
            "schema": {"$ref": "#/definitions/MakeWithdrawalFault"},
        }

        fault = swagger["definitions"]["MakeWithdrawalFault"]["properties"]["Body"]
        fault_fields = fault["properties"]["Fault"]["properties"]
        assert set(fault_fields) == {"faultcode", "faultstring", "faultactor", "detail"}
        assert "InsufficientFunds" in fault_fields["detail"]["properties"]

        output = swagger["definitions"]["MakeWithdrawalOutput"]["properties"]["Body"]
        response = output["properties"]["WithdrawResponse"]
        assert response["properties"]["references"] == {
            "type": "array",
            "items": {"type": "integer", "format": "int64"},
        }
        assert response["required"] == ["balance"]

    @pytest.mark.asyncio
    async def test_soap12_service(self, calculator_wsdl):
        entry = await load_entry(calculator_wsdl, "Calculator")

        swagger = self.generator.generate(entry, "Calculator", "calculator12.wsdl")

        operation = swagger["paths"]["/Add"]["post"]
        assert operation["consumes"] == ["application/soap+xml"]
        assert [p["name"] for p in operation["parameters"]] == ["body"]
        assert operation["x-soap"]["version"] == "1.2"
        envelope = swagger["definitions"]["AddInput"]
        assert envelope["xml"]["namespace"] == SOAP12_ENV

    @pytest.mark.asyncio
    async def test_generated_documents_validate(self, bank_wsdl, calculator_wsdl):
        for path, service in [
            (bank_wsdl, "Deposit"),
            (bank_wsdl, "Withdraw"),
            (calculator_wsdl, "Calculator"),
        ]:
            entry = await load_entry(path, service)
            swagger = self.generator.generate(entry, service, path.name)
            assert validate_swagger_document(swagger) == []

    @pytest.mark.asyncio
    async def test_service_not_in_entry(self, bank_wsdl):
        entry = await load_entry(bank_wsdl, "Deposit")

        with pytest.raises(ServiceResolutionError):
            self.generator.generate(entry, "Transfer", "bank.wsdl")

    def test_service_without_soap_ports(self):
        http_port = SimpleNamespace(binding=object(), binding_options=None)
        service = SimpleNamespace(name="Legacy", ports={"HttpPort": http_port})
        entry = WSDLEntry(
            source_file="legacy.wsdl",
            path=None,
            document=SimpleNamespace(services={"Legacy": service}),
        )

        with pytest.raises(GenerationError, match="no SOAP"):
            self.generator.generate(entry, "Legacy", "legacy.wsdl")
