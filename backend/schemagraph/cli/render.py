"""CLI render command implementation.

Builds the JSON-LD graph for one generation context from a YAML site
description using the built-in providers.
"""

import json
import sys
import traceback
from typing import Any, NoReturn

import rich_click as click

from ..config import Settings
from ..core.context import GenerationContext
from ..core.exceptions import SchemaGraphError
from ..manager import create_app_context
from ..providers import StaticSiteData


def _error_exit(format: str, error_type: str, message: str, code: int) -> NoReturn:
    if format == "json":
        click.echo(
            json.dumps({"status": "error", "error_type": error_type, "message": message}, indent=2)
        )
    else:
        click.echo(f"❌ {message}", err=True)
    sys.exit(code)


@click.command("render")
@click.argument("site_file", type=click.Path(exists=False))
@click.option(
    "--context",
    type=click.Choice([item.value for item in GenerationContext]),
    default=GenerationContext.HOME.value,
    help="🧭 **Generation context** to describe",
    show_default=True,
)
@click.option("--post-id", type=int, help="📄 **Queried post id** for singular contexts")
@click.option("--term-id", type=int, help="🏷️ **Queried term id** for taxonomy/archive contexts")
@click.option(
    "--format",
    type=click.Choice(["json", "script"]),
    default="json",
    help="📋 **Output format**: JSON-LD document or script tag",
    show_default=True,
)
@click.option(
    "--compact-single",
    is_flag=True,
    help="🔹 **Emit a single object** when the graph holds one piece",
)
def render_command(
    site_file: str,
    context: str,
    post_id: int | None,
    term_id: int | None,
    format: str,
    compact_single: bool,
) -> None:
    """🕸️ **Render the JSON-LD graph for a site**

    **Examples:**

    ```bash
    schemagraph render site.yaml                           # Home page graph
    schemagraph render site.yaml --context singular --post-id 42
    schemagraph render site.yaml --format script           # <script> tag
    ```

    **Exit Codes:**
    - `0`: Rendered ✅
    - `2`: Site file not found or unreadable 📁
    - `4`: Internal error 💥
    """
    try:
        site = StaticSiteData.from_file(site_file)
    except SchemaGraphError as e:
        _error_exit(format, "site_load_error", str(e), 2)

    options: dict[str, Any] = {}
    if post_id is not None:
        options["post_id"] = post_id
    if term_id is not None:
        options["term_id"] = term_id

    try:
        with create_app_context(Settings(), site, compact_single=compact_single) as app:
            graph = app.manager.build_graph(context, options)
            if format == "script":
                click.echo(app.output.render(graph), nl=False)
            else:
                click.echo(graph.to_document_json(compact_single))
    except Exception as e:
        click.echo(traceback.format_exc(), err=True)
        _error_exit(format, "internal_error", f"Internal error: {e}", 4)
