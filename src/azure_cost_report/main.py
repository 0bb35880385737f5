"""
Main CLI interface for Azure cost reporting.

Provides the command-line entry point that resolves credentials and the target
subscription, assembles the cost report and renders it.
"""

import asyncio
import logging
import sys

import click

from .config.settings import get_config
from .output import render_report
from .providers.azure import AzureCostClient
from .providers.base import CostReportError, ParameterError
from .reports.assembler import ReportAssembler
from .reports.parameters import (
    OutputFormat,
    ReportParameters,
    Timeframe,
    parse_timeframe,
    validate_custom_range,
)
from .utils.auth import AzureAuthenticator, resolve_credential, resolve_subscription_id

# Set up logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity settings."""
    # Default is quiet so that only the report reaches the terminal
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.ERROR)

    noisy_loggers = [
        "azure.core.pipeline.policies.http_logging_policy",
        "azure.identity",
        "httpx",
        "httpcore",
    ]

    for logger_name in noisy_loggers:
        noisy = logging.getLogger(logger_name)
        noisy.setLevel(logging.INFO if verbose else logging.ERROR)


@click.group()
@click.option("--config", "-c", "config_file", type=click.Path(dir_okay=False), help="Path to configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging and debug output")
@click.pass_context
def cli(ctx, config_file, verbose):
    """Azure Cost Report - cost overview for an Azure subscription."""
    setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    try:
        config = get_config()
        if config_file:
            config.load_file(config_file)
        ctx.obj["config"] = config
    except CostReportError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


async def _run_report(config, params: ReportParameters, credential) -> None:
    """Assemble the report and hand it to the selected renderer."""
    async with AzureCostClient.from_config(credential, config.azure) as client:
        await client.acquire_token()
        report = await ReportAssembler(client).assemble(params)

    render_report(params, report)


@cli.command()
@click.option("--subscription", "-s", type=click.UUID, help="Subscription ID (default: config or Azure CLI account)")
@click.option(
    "--timeframe",
    "-t",
    type=click.Choice([t.value for t in Timeframe], case_sensitive=False),
    help="Timeframe of the report (default: from config)",
)
@click.option("--from", "from_date", type=click.DateTime(formats=["%Y-%m-%d"]), help="Start date for Custom timeframe")
@click.option("--to", "to_date", type=click.DateTime(formats=["%Y-%m-%d"]), help="End date for Custom timeframe")
@click.option(
    "--output",
    "-o",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    help="Output format (default: from config)",
)
@click.pass_context
def show(ctx, subscription, timeframe, from_date, to_date, output_format):
    """Show actual, forecasted and grouped costs for a subscription."""
    config = ctx.obj["config"]

    custom_from = from_date.date() if from_date else None
    custom_to = to_date.date() if to_date else None

    # Reject bad parameters before any credential or network lookup
    try:
        timeframe_enum = parse_timeframe(timeframe or config.default_timeframe)
        validate_custom_range(timeframe_enum, custom_from, custom_to)
    except ParameterError as e:
        raise click.UsageError(str(e), ctx=ctx)

    try:
        subscription_id = resolve_subscription_id(subscription, config.subscription_id)
        params = ReportParameters.create(
            subscription_id=subscription_id,
            timeframe=timeframe_enum,
            custom_from=custom_from,
            custom_to=custom_to,
            output=output_format or config.default_output,
        )
        credential = resolve_credential(config.azure)
        asyncio.run(_run_report(config, params, credential))
    except ParameterError as e:
        raise click.UsageError(str(e), ctx=ctx)
    except CostReportError as e:
        logger.debug("Report failed", exc_info=True)
        click.echo(f"Cost report failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--subscription", "-s", type=click.UUID, help="Subscription ID to check")
@click.pass_context
def test_auth(ctx, subscription):
    """Test Azure authentication and subscription resolution."""
    config = ctx.obj["config"]

    click.echo("Testing Azure authentication...\n")

    auth_result = AzureAuthenticator(config.azure).authenticate()
    if auth_result.success:
        click.echo(f"✅ Credentials: Authenticated ({auth_result.method})")
    else:
        click.echo(f"❌ Credentials: Failed - {auth_result.error_message}")

    try:
        subscription_id = resolve_subscription_id(subscription, config.subscription_id)
        click.echo(f"✅ Subscription: {subscription_id}")
    except CostReportError as e:
        click.echo(f"❌ Subscription: {e}")
        sys.exit(1)

    if not auth_result.success:
        sys.exit(1)


@cli.command()
@click.pass_context
def config_info(ctx):
    """Display current configuration information."""
    config = ctx.obj["config"]
    effective = config.masked()

    click.echo("Azure Cost Report Configuration")
    click.echo("=" * 40)

    click.echo("Azure:")
    for key, value in effective["azure"].items():
        click.echo(f"  {key}: {value if value not in ('', None) else 'Not set'}")

    click.echo("\nReport defaults:")
    for key, value in effective["report"].items():
        click.echo(f"  {key}: {value}")


@cli.command()
def version():
    """Display version information."""
    from . import __version__

    click.echo(f"Azure Cost Report v{__version__}")


if __name__ == "__main__":
    cli()
