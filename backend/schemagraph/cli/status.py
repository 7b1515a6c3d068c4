"""CLI status command implementation."""

import json
import sys
from typing import Any

from rich.console import Console
from rich.table import Table
import rich_click as click

from ..config import Settings
from ..core.exceptions import SchemaGraphError
from ..manager import create_app_context
from ..providers import StaticSiteData

console = Console()


def _output_table_format(status: dict[str, Any]) -> None:
    providers = Table(title="Providers", show_header=True, header_style="bold")
    providers.add_column("ID", style="cyan")
    providers.add_column("Priority", justify="right")
    providers.add_column("Available")
    providers.add_column("Types", style="yellow")
    for provider in status["providers"]["list"]:
        providers.add_row(
            provider["id"],
            str(provider["priority"]),
            "yes" if provider["available"] else "no",
            ", ".join(provider["types"]),
        )
    console.print(providers)

    settings = Table(title="Settings", show_header=False, box=None, padding=(0, 1))
    for name, value in status["settings"].items():
        settings.add_row(f"[bold]{name}[/bold]", str(value))
    settings.add_row("[bold]schema_types[/bold]", ", ".join(status["schema_types"]["list"]))
    settings.add_row("[bold]hooks[/bold]", str(status["hooks"]["registered"]))
    settings.add_row("[bold]cache_entries[/bold]", str(status["cache"]["backend_count"]))
    console.print(settings)


@click.command("status")
@click.argument("site_file", type=click.Path(exists=False))
@click.option(
    "--format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="📋 **Output format**",
    show_default=True,
)
def status_command(site_file: str, format: str) -> None:
    """📊 **Show providers, schema types and settings for a site**

    **Exit Codes:**
    - `0`: Status printed ✅
    - `2`: Site file not found or unreadable 📁
    """
    try:
        site = StaticSiteData.from_file(site_file)
    except SchemaGraphError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(2)

    with create_app_context(Settings(), site) as app:
        status = app.manager.get_system_status()

    if format == "json":
        click.echo(json.dumps(status, indent=2, default=str))
    else:
        _output_table_format(status)
