"""Command-line interface for the schema graph engine."""

import rich_click as click

from .. import __version__
from ..config import Settings
from ..core.logging import configure_logging
from .render import render_command
from .status import status_command
from .validate import validate_command

# Configure rich-click styling
click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_COMMAND = "bold green"
click.rich_click.STYLE_SWITCH = "bold blue"


@click.group(name="schemagraph")
@click.version_option(version=__version__, prog_name="schemagraph")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="📝 **Log level** for diagnostics written to stderr",
    show_default=True,
)
@click.option(
    "--json-logs", is_flag=True, help="🧾 **Emit logs as JSON** (always on in production)"
)
def main(log_level: str, json_logs: bool) -> None:
    """🕸️ **Schema Graph** - Linked JSON-LD structured data for your site.

    Assemble, validate and inspect schema.org graphs built from pluggable
    data providers.
    """
    settings = Settings()
    configure_logging(
        environment=settings.environment,
        log_level=log_level,
        json_logs=json_logs or settings.json_logs,
    )


# Add commands to the group
main.add_command(render_command)
main.add_command(validate_command)
main.add_command(status_command)


if __name__ == "__main__":
    main()


__all__ = ["main"]
