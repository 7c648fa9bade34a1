"""
tagrep CLI Application.

Main entry point for the tagrep command-line interface. Commands read a
pull request, merge request, issue or local text and print the KEY=value
tags found in it.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint

from ..exceptions.config_exceptions import ConfigurationError
from ..utils.environment import load_environment_variables
from ..utils.logging_config import resolve_log_settings, setup_logging
from ..version import NAME, __version__
from .commands import issue, parse, request
from .errors import handle_cli_error

logger = logging.getLogger(__name__)

# Create main Typer app
app = typer.Typer(
    name=NAME,
    help="Extract KEY=value tags from pull requests, merge requests and issues",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("request", help="Parse tags from a pull request or merge request description")(request)
app.command("issue", help="Parse tags from an issue description")(issue)
app.command("parse", help="Parse tags from a local file or stdin")(parse)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (DEBUG level)",
    ),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help="Log format on stderr: standard or json (default: TAGREP_LOG_FORMAT or standard)",
    ),
    dotenv: Optional[Path] = typer.Option(
        None,
        "--dotenv",
        help="Load environment variables from this file (default: ./.env when present)",
        metavar="PATH",
    ),
) -> None:
    """
    tagrep - extract tags from code review descriptions.

    Tags are lines of the form KEY=value at the start of a line:

    • Pull request: tagrep request --platform github --repository owner/repo --number 12
    • Issue: tagrep issue --format json --pretty-print
    • Local text: tagrep parse description.md
    """
    try:
        load_environment_variables(dotenv)
        level, fmt = resolve_log_settings(verbose=verbose, log_format=log_format)
    except (ConfigurationError, OSError, UnicodeDecodeError) as e:
        handle_cli_error(e)
        raise typer.Exit(1)

    setup_logging(level, fmt)
    ctx.obj = {"verbose": verbose, "log_level": level, "log_format": fmt}


@app.command()
def version() -> None:
    """Show version information."""
    rprint(f"{NAME} [blue]v{__version__}[/blue]")


def cli_main() -> None:
    """
    Main CLI entry point with error handling.

    This function is called by the console script entry point. Errors that
    reach it are outside click's handling, so it exits with sys.exit.
    """
    try:
        app()
    except KeyboardInterrupt:
        handle_cli_error(KeyboardInterrupt("Operation cancelled by user"))
        sys.exit(130)
    except Exception as e:
        handle_cli_error(e)
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
