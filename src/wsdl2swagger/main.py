"""Main CLI entry point for the WSDL to Swagger converter.

This module provides the command-line interface that converts the services of
WSDL sources into Swagger 2.0 YAML documents.
"""

import asyncio
import json
import sys
import traceback
from typing import Any, Dict, Optional, Tuple

import click
import structlog

from . import __version__
from .config import ConfigurationError, Settings, configure_logging, load_settings
from .conversion import ConversionOrchestrator, ConversionProgressTracker, ConversionReport
from .exceptions import ConversionError
from .loader import WSDLLoader

logger = structlog.get_logger()


class CLIError(Exception):
    """Base CLI error with user-friendly messages."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


class CLIContext:
    """Global CLI context management."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        config_file: Optional[str] = None,
    ):
        self.verbose = verbose
        self.quiet = quiet
        self.config_file = config_file

    def build_settings(
        self, overrides: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> Settings:
        """Load settings from the config file, environment and CLI options."""
        try:
            settings = load_settings(self.config_file, overrides)
        except ConfigurationError as e:
            raise CLIError(
                f"Invalid configuration: {e}",
                "Check the YAML syntax and option values of the config file",
            )

        level = settings.logging.level
        if self.verbose:
            level = "DEBUG"
        elif self.quiet:
            level = "ERROR"

        configure_logging(
            level=level,
            log_file=settings.get_log_file_path(),
            json_logs=settings.logging.json_format,
        )
        return settings


def handle_cli_error(error: Exception, ctx: Optional[click.Context] = None):
    """Global CLI error handler."""
    if isinstance(error, CLIError):
        click.echo(f"Error: {error.message}", err=True)
        if error.suggestion:
            click.echo(f"Suggestion: {error.suggestion}", err=True)
    elif isinstance(error, ConversionError):
        click.echo(f"❌ Conversion failed: {error.message}", err=True)
        verbose = bool(ctx and ctx.obj and ctx.obj.get("verbose"))
        if verbose and error.details:
            for key, value in error.details.items():
                click.echo(f"   {key}: {value}", err=True)
    else:
        logger.error("Unexpected CLI error", error=str(error), error_type=type(error).__name__)
        verbose = bool(ctx and ctx.obj and ctx.obj.get("verbose"))
        click.echo(f"Unexpected error: {str(error)}", err=True)
        if verbose:
            click.echo(traceback.format_exc(), err=True)
        else:
            click.echo("Run with --verbose for detailed error information", err=True)

    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="wsdl2swagger")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output with detailed logging",
)
@click.option(
    "--quiet", "-q", is_flag=True, help="Enable quiet mode with minimal output"
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file path (YAML format)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config: Optional[str]):
    """WSDL → Swagger Converter

    Convert the services described by WSDL files into Swagger 2.0 documents,
    one YAML file per service.

    \b
    Examples:
      wsdl2swagger convert Calc.wsdl
      wsdl2swagger convert services.zip --output-dir ./swagger
      wsdl2swagger services Calc.wsdl
    """
    if verbose and quiet:
        raise click.BadParameter("Cannot use both --verbose and --quiet options")

    ctx.ensure_object(dict)
    ctx.obj["cli_context"] = CLIContext(verbose=verbose, quiet=quiet, config_file=config)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command()
@click.argument("wsdl_source", type=click.Path(exists=True))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    help="Directory for the generated YAML files (default: current directory)",
)
@click.option(
    "--service",
    "-s",
    "services",
    multiple=True,
    help="Convert only this service (repeatable)",
)
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=1),
    help="Maximum number of services converted at once",
)
@click.option("--no-sort", is_flag=True, help="Keep the WSDL order of services")
@click.option(
    "--no-validate", is_flag=True, help="Skip Swagger 2.0 validation of the output"
)
@click.option(
    "--strict-validation",
    is_flag=True,
    help="Fail a service whose document does not validate",
)
@click.option("--api-version", help="info.version of the generated documents")
@click.option(
    "--dry-run", is_flag=True, help="List the files that would be written"
)
@click.option(
    "--json-report", is_flag=True, help="Print the conversion report as JSON"
)
@click.pass_context
def convert(
    ctx: click.Context,
    wsdl_source: str,
    output_dir: Optional[str],
    services: Tuple[str, ...],
    max_concurrent: Optional[int],
    no_sort: bool,
    no_validate: bool,
    strict_validation: bool,
    api_version: Optional[str],
    dry_run: bool,
    json_report: bool,
):
    """Convert WSDL services to Swagger YAML files.

    WSDL_SOURCE is a WSDL file, a directory of .wsdl files or a zip archive
    of WSDL/XSD files. One <service>.yaml file is written per wsdl:service.

    \b
    Examples:
      # Convert every service
      wsdl2swagger convert Calc.wsdl

      # Only two services, into ./out
      wsdl2swagger convert bank.zip -s Deposit -s Withdraw -o ./out

      # Preview without writing
      wsdl2swagger convert Calc.wsdl --dry-run
    """
    cli_context: CLIContext = ctx.obj["cli_context"]

    try:
        settings = cli_context.build_settings(
            {
                "conversion": {
                    "output_dir": output_dir,
                    "max_concurrent": max_concurrent,
                    "sort_services": False if no_sort else None,
                    "validate_output": False if no_validate else None,
                    "strict_validation": True if strict_validation else None,
                    "api_version": api_version,
                }
            }
        )

        orchestrator = ConversionOrchestrator(
            config=settings.conversion,
            loader=WSDLLoader(settings.loader),
            progress_tracker=ConversionProgressTracker(
                enabled=not (cli_context.quiet or json_report),
                verbose=cli_context.verbose,
            ),
        )

        if dry_run:
            preview = asyncio.run(orchestrator.preview(wsdl_source))
            _display_preview(preview, json_report)
            return

        report = asyncio.run(orchestrator.run(wsdl_source, services or None))
    except KeyboardInterrupt:
        click.echo("\n🛑 Conversion cancelled", err=True)
        sys.exit(1)
    except Exception as error:
        handle_cli_error(error, ctx)
        return

    if json_report:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _display_report(report, cli_context.quiet)

    if not report.is_success:
        sys.exit(1)


@cli.command()
@click.argument("wsdl_source", type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON")
@click.pass_context
def services(ctx: click.Context, wsdl_source: str, as_json: bool):
    """List the services defined by a WSDL source."""
    cli_context: CLIContext = ctx.obj["cli_context"]

    try:
        settings = cli_context.build_settings()
        catalog = asyncio.run(WSDLLoader(settings.loader).load(wsdl_source))
    except Exception as error:
        handle_cli_error(error, ctx)
        return

    if as_json:
        click.echo(json.dumps(catalog.to_dict(), indent=2))
        return

    if not catalog.services:
        click.echo("No services found")
        return

    for descriptor in catalog.services:
        click.echo(f"{descriptor.name}\t{descriptor.source_file}")


def _display_preview(preview: Dict[str, Any], as_json: bool):
    if as_json:
        click.echo(json.dumps(preview, indent=2))
        return

    click.echo("🔍 Conversion Preview")
    click.echo("=" * 50)
    click.echo(f"📖 Source: {preview['source']}")
    click.echo(f"📋 Services: {len(preview['services'])}")
    for item in preview["services"]:
        click.echo(f"   • {item['service']} ({item['filename']}) → {item['output_path']}")
    click.echo()
    click.echo("To proceed with conversion, run without --dry-run")


def _display_report(report: ConversionReport, quiet: bool = False):
    if quiet:
        if report.failed:
            for outcome in report.failed:
                click.echo(f"❌ {outcome.name}: {outcome.error}", err=True)
        return

    for outcome in report.outcomes:
        if outcome.success:
            click.echo(f"✅ {outcome.name} → {outcome.output_path}")
            for warning in outcome.warnings:
                click.echo(f"   ⚠️  {warning}")
        else:
            click.echo(f"❌ {outcome.name}: {outcome.error}", err=True)

    click.echo()
    click.echo(
        f"Converted {len(report.succeeded)}/{len(report.outcomes)} services "
        f"in {report.duration_ms / 1000:.2f}s"
    )


if __name__ == "__main__":
    cli()
