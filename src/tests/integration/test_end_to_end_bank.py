"""End-to-end conversion of real WSDL sources."""

import shutil
import zipfile

import pytest
import yaml

from wsdl2swagger.config import ConversionConfig
from wsdl2swagger.conversion import ConversionOrchestrator
from wsdl2swagger.generator import validate_swagger_document


class TestEndToEndConversion:
    """Load, generate, validate and write with the real components."""

    def orchestrator(self, output_dir, **config):
        return ConversionOrchestrator(
            config=ConversionConfig(output_dir=str(output_dir), **config)
        )

    @pytest.mark.asyncio
    async def test_bank_wsdl(self, bank_wsdl, output_dir):
        report = await self.orchestrator(output_dir).run(bank_wsdl)

        assert report.is_success
        assert [o.name for o in report.outcomes] == ["Deposit", "Withdraw"]
        for outcome in report.outcomes:
            assert outcome.warnings == []
            document = yaml.safe_load((output_dir / f"{outcome.name}.yaml").read_text())
            assert document["info"]["title"] == outcome.name
            assert document["paths"]
            assert validate_swagger_document(document) == []

    @pytest.mark.asyncio
    async def test_zip_archive_of_several_wsdls(
        self, tmp_path, bank_wsdl, calculator_wsdl, output_dir
    ):
        archive = tmp_path / "services.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.write(bank_wsdl, "bank.wsdl")
            zf.write(calculator_wsdl, "calculator12.wsdl")

        report = await self.orchestrator(output_dir, max_concurrent=1).run(archive)

        assert report.is_success
        assert sorted(p.name for p in output_dir.iterdir()) == [
            "Calculator.yaml",
            "Deposit.yaml",
            "Withdraw.yaml",
        ]
        calculator = yaml.safe_load((output_dir / "Calculator.yaml").read_text())
        assert calculator["x-wsdl"]["source"] == "calculator12.wsdl"
        assert list(calculator["paths"]) == ["/Add"]

    @pytest.mark.asyncio
    async def test_directory_source_is_deterministic(
        self, tmp_path, bank_wsdl, calculator_wsdl, output_dir
    ):
        source = tmp_path / "wsdl"
        source.mkdir()
        shutil.copy(bank_wsdl, source / "bank.wsdl")
        shutil.copy(calculator_wsdl, source / "calculator12.wsdl")

        await self.orchestrator(output_dir).run(source)
        first = {p.name: p.read_bytes() for p in output_dir.iterdir()}
        await self.orchestrator(output_dir, max_concurrent=1).run(source)
        second = {p.name: p.read_bytes() for p in output_dir.iterdir()}

        assert first == second
        assert len(first) == 3

    @pytest.mark.asyncio
    async def test_duplicate_service_uses_its_own_document(
        self, tmp_path, bank_wsdl, output_dir
    ):
        source = tmp_path / "wsdl"
        source.mkdir()
        shutil.copy(bank_wsdl, source / "a.wsdl")
        (source / "b.wsdl").write_text(
            bank_wsdl.read_text().replace("MakeDeposit", "OpenAccount")
        )

        report = await self.orchestrator(output_dir, max_concurrent=1).run(
            source, ["Deposit"]
        )

        assert report.is_success
        assert [o.source_file for o in report.outcomes] == ["a.wsdl", "b.wsdl"]
        deposit = yaml.safe_load((output_dir / "Deposit.yaml").read_text())
        assert deposit["x-wsdl"]["source"] == "b.wsdl"
        assert list(deposit["paths"]) == ["/OpenAccount"]
