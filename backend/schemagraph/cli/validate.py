"""CLI validation command implementation.

This module implements the `schemagraph validate` command, validating a
JSON-LD object (or every item of an ``@graph`` document) against the
schema.org type rules with table or JSON output.
"""

from dataclasses import dataclass, replace
import json
from pathlib import Path
import sys
import traceback
from typing import Any

from rich.console import Console
from rich.table import Table
import rich_click as click

from ..schema_types import SchemaTypeRegistry
from ..validation import SchemaValidator, ValidationError, ValidationResult

# Create console for rich formatting - auto-detects if we're in interactive environment
console = Console()


@dataclass
class ItemResult:
    """Validation outcome for one schema object in the file."""

    id: str | None
    schema_type: str
    result: ValidationResult


def _should_use_rich_formatting(force_colors: bool = False) -> bool:
    """Determine if we should use rich formatting based on environment."""
    return force_colors or console.is_terminal


def _extract_items(document: Any) -> list[dict[str, Any]]:
    """Split a document into the schema objects to validate.

    ``@graph`` items inherit the document's ``@context`` when they carry none.
    """
    if isinstance(document, dict) and isinstance(document.get("@graph"), list):
        context = document.get("@context")
        items = []
        for item in document["@graph"]:
            if isinstance(item, dict) and "@context" not in item and context is not None:
                item = {"@context": context, **item}
            items.append(item)
        return items
    if isinstance(document, list):
        return document
    return [document]


def _apply_strict(result: ValidationResult) -> ValidationResult:
    """Convert warnings to errors."""
    if not result.warnings:
        return result
    errors = result.errors + [
        ValidationError(
            type=warning.type,
            message=warning.message,
            property=warning.property,
            help=warning.help,
        )
        for warning in result.warnings
    ]
    return replace(result, is_valid=False, errors=errors, warnings=[])


def _output_table_format(
    items: list[ItemResult], file_path: str, force_colors: bool = False
) -> None:
    """Output validation results in table format."""
    rich = _should_use_rich_formatting(force_colors)
    all_valid = all(item.result.is_valid for item in items)

    if rich:
        if all_valid:
            console.print("✅ [bold green]Validation successful[/bold green]")
        else:
            console.print("❌ [bold red]Validation failed[/bold red]")
        console.print()

        table = Table(show_header=True, header_style="bold")
        table.add_column("Item")
        table.add_column("Type", style="yellow")
        table.add_column("Status")
        table.add_column("Errors", justify="right")
        table.add_column("Warnings", justify="right")
        for item in items:
            table.add_row(
                f"[cyan]{item.id or '-'}[/cyan]",
                item.schema_type,
                "[green]valid[/green]" if item.result.is_valid else "[red]invalid[/red]",
                str(item.result.error_count),
                str(item.result.warning_count),
            )
        console.print(f"[bold]File:[/bold] [cyan]{file_path}[/cyan]")
        console.print(table)

        for item in items:
            for error in item.result.errors:
                location = f" [bold blue]{error.property}[/bold blue]" if error.property else ""
                console.print(
                    f"[bold red]Error:[/bold red] [red]{error.type}[/red]{location} "
                    f"[dim]{error.message}[/dim]"
                )
                if error.help:
                    console.print(f"💡 [italic green]{error.help}[/italic green]")
            for warning in item.result.warnings:
                console.print(f"[yellow]Warning:[/yellow] [dim]{warning.message}[/dim]")
        return

    # Plain text for non-interactive (CI)
    click.echo("✅ Validation successful" if all_valid else "❌ Validation failed")
    click.echo()
    click.echo(f"File: {file_path}")
    for item in items:
        status = "valid" if item.result.is_valid else "invalid"
        click.echo(
            f"{item.id or '-'} ({item.schema_type}): {status}, "
            f"{item.result.error_count} errors, {item.result.warning_count} warnings"
        )
        for error in item.result.errors:
            click.echo(f"   ❌ {error.type}: {error.message}")
            if error.help:
                click.echo(f"      💡 Help: {error.help}")
        for warning in item.result.warnings:
            click.echo(f"   ⚠️  {warning.type}: {warning.message}")


def _output_json_format(items: list[ItemResult], file_path: str) -> None:
    """Output validation results in JSON format."""
    output: dict[str, Any] = {
        "status": "valid" if all(item.result.is_valid for item in items) else "invalid",
        "file": file_path,
        "error_count": sum(item.result.error_count for item in items),
        "warning_count": sum(item.result.warning_count for item in items),
        "items": [],
    }

    for item in items:
        entry: dict[str, Any] = {
            "id": item.id,
            "type": item.schema_type,
            "valid": item.result.is_valid,
            "errors": [],
            "warnings": [],
        }
        for key, issues in (("errors", item.result.errors), ("warnings", item.result.warnings)):
            for issue in issues:
                issue_dict: dict[str, Any] = {"type": issue.type, "message": issue.message}
                if issue.property:
                    issue_dict["property"] = issue.property
                if issue.help:
                    issue_dict["help"] = issue.help
                entry[key].append(issue_dict)
        output["items"].append(entry)

    click.echo(json.dumps(output, indent=2, ensure_ascii=False))


def _error_output(format: str, error_type: str, message: str, file: str) -> None:
    if format == "json":
        error_output = {
            "status": "error",
            "error_type": error_type,
            "message": message,
            "file": file,
        }
        click.echo(json.dumps(error_output, indent=2))
    else:
        click.echo(f"❌ {message}")


@click.command("validate")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--type",
    "schema_type",
    type=str,
    help="🏷️ **Expected schema type**; defaults to each item's own @type",
    metavar="TYPE",
)
@click.option(
    "--strict",
    is_flag=True,
    help="⚡ **Enable strict mode** - warnings become errors",
)
@click.option(
    "--format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="📋 **Output format** for validation results",
    show_default=True,
)
@click.option(
    "--force-colors",
    is_flag=True,
    help="🎨 **Force colored output** - useful for testing rich formatting",
    hidden=True,  # Hide from main help but available for testing
)
def validate_command(
    file: str,
    schema_type: str | None,
    strict: bool,
    format: str,
    force_colors: bool,
) -> None:
    """🔍 **Validate a JSON-LD file against schema.org type rules**

    **Examples:**

    ```bash
    schemagraph validate org.json                     # Validate by each item's @type
    schemagraph validate post.json --type Article     # Expect an Article (or subtype)
    schemagraph validate graph.json --format json     # JSON output
    schemagraph validate org.json --strict            # Warnings as errors
    ```

    **Exit Codes:**
    - `0`: Validation successful ✅
    - `1`: Validation failed ❌
    - `2`: File not found, not readable or not JSON 📁⚠️
    - `4`: Internal error 💥
    """
    file_path = Path(file)

    if not file_path.exists():
        _error_output(format, "file_not_found", f"File not found: {file}", str(file_path))
        sys.exit(2)

    try:
        document = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        _error_output(format, "file_read_error", f"Cannot read file: {e}", str(file_path))
        sys.exit(2)
    except json.JSONDecodeError as e:
        _error_output(format, "invalid_json", f"Invalid JSON: {e}", str(file_path))
        sys.exit(2)

    try:
        validator = SchemaValidator(SchemaTypeRegistry())
        items = []
        for item in _extract_items(document):
            item_type = schema_type or (
                item.get("@type") if isinstance(item, dict) else None
            )
            result = validator.validate(item, str(item_type or ""))
            if strict:
                result = _apply_strict(result)
            items.append(
                ItemResult(
                    id=item.get("@id") if isinstance(item, dict) else None,
                    schema_type=str(item_type or "-"),
                    result=result,
                )
            )
    except Exception as e:
        _error_output(format, "internal_error", f"Internal error: {e}", str(file_path))
        click.echo(traceback.format_exc(), err=True)
        sys.exit(4)

    if format == "json":
        _output_json_format(items, str(file_path))
    else:
        _output_table_format(items, str(file_path), force_colors)

    sys.exit(0 if all(item.result.is_valid for item in items) else 1)


__all__ = ["validate_command"]
