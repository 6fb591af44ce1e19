"""tenacious CLI - Command Line Interface.

A Typer CLI for inspecting scans, plugins, assets and findings.
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from tenacious import __version__
from tenacious.client import TenableClient
from tenacious.config import get_settings
from tenacious.utils.http_client import HTTPClientError

T = TypeVar("T")

app = typer.Typer(
    name="tenacious",
    help="tenacious - Tenable.io / Nessus API client",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

SEVERITY_STYLES = {
    0: ("Info", "blue"),
    1: ("Low", "green"),
    2: ("Medium", "yellow"),
    3: ("High", "red"),
    4: ("Critical", "bold red"),
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]tenacious[/] version [green]{__version__}[/]")
        raise typer.Exit()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    logger.remove()
    level = "DEBUG" if verbose else get_settings().log_level
    log_format = (
        "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
    )
    logger.add(sys.stderr, level=level, format=log_format)


def _severity(value: int) -> str:
    label, style = SEVERITY_STYLES.get(value, (str(value), "white"))
    return f"[{style}]{label}[/]"


def _run(call: Callable[[TenableClient], Awaitable[T]]) -> T:
    """Open a client, run ``call`` against it and exit cleanly on API errors."""

    async def _main() -> T:
        async with TenableClient(get_settings()) as client:
            return await call(client)

    try:
        return asyncio.run(_main())
    except HTTPClientError as e:
        console.print(f"[red]✗[/] {e}")
        raise typer.Exit(1) from e


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """tenacious - Query the Tenable.io / Nessus API."""
    setup_logging(verbose)


@app.command()
def templates() -> None:
    """List available scan templates."""
    result = _run(lambda client: client.scans.get_templates())

    table = Table(title="Scan Templates", border_style="blue")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("UUID", style="dim")
    for template in result:
        table.add_row(template.name, template.title, template.uuid)
    console.print(table)


@app.command()
def scans(
    since: Annotated[
        int,
        typer.Option(
            "--since",
            "-s",
            help="Only scans modified after this Unix timestamp.",
        ),
    ] = 0,
) -> None:
    """List scans."""
    result = _run(lambda client: client.scans.get_scans(since))

    table = Table(title="Scans", border_style="blue")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Status", style="yellow")
    table.add_column("Owner", style="dim")
    for scan in result:
        table.add_row(str(scan.id), scan.name, scan.status, scan.owner)
    console.print(table)


@app.command()
def scan(scan_id: Annotated[int, typer.Argument(help="Scan ID.")]) -> None:
    """Show scan status and vulnerability summary."""
    detail = _run(lambda client: client.scans.get(scan_id))

    console.print(f"[bold]Scan {detail.id}[/] status: [yellow]{detail.info.status}[/]")
    console.print(f"Hosts: {len(detail.hosts)}")

    table = Table(title="Vulnerabilities", border_style="blue")
    table.add_column("Plugin", style="cyan", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Count", justify="right")
    table.add_column("Name", max_width=60)
    for vuln in detail.vulnerabilities_by_severity():
        table.add_row(
            str(vuln.plugin_id),
            _severity(vuln.severity),
            str(vuln.count),
            vuln.plugin_name,
        )
    console.print(table)


@app.command()
def launch(scan_id: Annotated[int, typer.Argument(help="Scan ID.")]) -> None:
    """Launch a scan."""
    _run(lambda client: client.scans.launch(scan_id))
    console.print(f"[green]✓[/] Launched scan {scan_id}")


@app.command()
def stop(scan_id: Annotated[int, typer.Argument(help="Scan ID.")]) -> None:
    """Stop a running scan."""
    _run(lambda client: client.scans.stop(scan_id))
    console.print(f"[green]✓[/] Stopped scan {scan_id}")


@app.command()
def delete(
    scan_id: Annotated[int, typer.Argument(help="Scan ID.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
) -> None:
    """Delete a scan."""
    if not yes:
        typer.confirm(f"Delete scan {scan_id}?", abort=True)
    _run(lambda client: client.scans.delete(scan_id))
    console.print(f"[green]✓[/] Deleted scan {scan_id}")


@app.command()
def plugin(plugin_id: Annotated[int, typer.Argument(help="Plugin ID.")]) -> None:
    """Show plugin details."""
    result = _run(lambda client: client.plugins.get(plugin_id))

    table = Table(title=f"Plugin {result.id}: {result.name}", border_style="blue")
    table.add_column("Attribute", style="cyan")
    table.add_column("Value", max_width=80)
    table.add_row("Family", result.family_name)
    for attribute in result.attributes:
        table.add_row(attribute.name, attribute.value)
    console.print(table)


@app.command()
def asset(name: Annotated[str, typer.Argument(help="Asset name.")]) -> None:
    """Look up an asset by name."""
    result = _run(lambda client: client.assets.get_by_name(name))

    table = Table(title=f"Asset {result.name}", border_style="blue")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("ID", result.id)
    table.add_row("FQDN", result.display_fqdn or ", ".join(result.fqdns))
    table.add_row("Network", result.network.name)
    table.add_row("Last Observed", str(result.last_observed or "N/A"))
    table.add_row("Licensed", "Yes" if result.is_licensed else "No")
    console.print(table)


@app.command()
def findings(
    name: Annotated[str, typer.Argument(help="Asset name.")],
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON.")] = False,
) -> None:
    """List every finding for an asset."""
    result = _run(lambda client: client.assets.get_findings(name))

    if as_json:
        console.print_json(data=[f.model_dump(mode="json") for f in result])
        return

    table = Table(title=f"Findings for '{name}' ({len(result)})", border_style="blue")
    table.add_column("Plugin", style="cyan", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Score", style="yellow")
    table.add_column("Port")
    table.add_column("Name", max_width=60)
    for finding in sorted(result, key=lambda f: f.severity, reverse=True):
        score = finding.base_score
        table.add_row(
            str(finding.definition.id),
            _severity(finding.severity),
            f"{score:.1f}" if score is not None else "N/A",
            f"{finding.port}/{finding.protocol}",
            finding.definition.name,
        )
    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    table = Table(title="tenacious Configuration", border_style="blue")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Log Level", settings.log_level)
    table.add_row("", "")
    table.add_row("[bold]Tenable[/]", "")
    table.add_row("  Base URL", settings.tenable.base_url)
    table.add_row("  API Keys", "Set" if settings.tenable.has_api_keys else "Not set")
    table.add_row("  Username", settings.tenable.username or "Not set")
    table.add_row("  Verify SSL", "Yes" if settings.tenable.verify_ssl else "No")
    table.add_row("  Timeout", f"{settings.tenable.timeout}s")
    table.add_row("", "")
    table.add_row("[bold]Retry[/]", "")
    table.add_row("  Max Attempts", str(settings.retry.max_attempts))
    table.add_row("  Backoff", f"{settings.retry.min_backoff}s - {settings.retry.max_backoff}s")
    table.add_row("  Factor", str(settings.retry.factor))
    table.add_row("  Jitter", "Yes" if settings.retry.jitter else "No")

    console.print(table)


if __name__ == "__main__":
    app()
