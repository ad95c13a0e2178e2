import asyncio
import json
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from local_browsers import __version__
from local_browsers import browsers
from local_browsers.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="local-browsers")
@click.option("--log-level", default=None, help="Log level (also: LOCAL_BROWSERS_LOG_LEVEL env var)")
@click.option("--log-json", is_flag=True, help="Emit JSON log lines (also: LOCAL_BROWSERS_LOG_JSON=1)")
def main(log_level: str, log_json: bool):
    """local-browsers - webdriver capabilities for installed browsers."""
    setup_logging(level=log_level, json_format=log_json or None)


@main.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]local-browsers[/bold cyan] v{__version__}")


@main.command()
def supported():
    """List browser families that can be driven on this platform."""
    names = browsers.supported()
    if not names:
        console.print("[dim]No supported browsers on this platform[/dim]")
        return
    for name in names:
        console.print(name)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print capabilities as JSON")
def detect(as_json: bool):
    """Show installed browsers and their capabilities."""
    try:
        installed = asyncio.run(browsers.detect())
    except browsers.BrowserError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(installed, indent=2))
        return

    if not installed:
        console.print("[dim]No supported browsers installed[/dim]")
        return

    table = Table(title="Installed Browsers")
    table.add_column("Name", style="cyan")
    table.add_column("Browser", style="white")
    table.add_column("Version", justify="right")
    table.add_column("Binary", style="dim")

    for name, capabilities in installed.items():
        table.add_row(
            name,
            capabilities.get("browserName", ""),
            str(capabilities.get("version", "")),
            escape(_binary_of(capabilities) or "-"),
        )

    console.print(table)


@main.command()
@click.argument("names", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Print capabilities as JSON")
def expand(names, as_json: bool):
    """Resolve browser NAMES (default: all installed) into capabilities."""
    try:
        capabilities = asyncio.run(browsers.expand(list(names)))
    except browsers.BrowserError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(capabilities, indent=2))
        return

    for entry in capabilities:
        console.print(
            f"[green]✓[/green] {entry.get('browserName')} {entry.get('version', '')}"
        )


def _fail(error: Exception):
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    sys.exit(1)


def _binary_of(capabilities: dict):
    if "chromeOptions" in capabilities:
        return capabilities["chromeOptions"].get("binary")
    return capabilities.get("firefox_binary")


if __name__ == "__main__":
    main()
