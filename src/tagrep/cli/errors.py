"""
Error reporting for the tagrep CLI.

Everything here writes to stderr; stdout is reserved for tag output.
"""

import logging

from rich.console import Console
from rich.markup import escape

from ..exceptions.config_exceptions import ConfigurationError
from ..exceptions.platform_exceptions import PlatformAuthenticationError, PlatformError
from ..exceptions.tag_exceptions import TagParseError

err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def handle_cli_error(error: Exception) -> None:
    """
    Print a user-friendly message for an error.

    Args:
        error: The exception that occurred
    """
    message = escape(str(error))

    if isinstance(error, ConfigurationError):
        err_console.print(f"[red]Configuration Error:[/red] {message}")
        logger.debug("Configuration error details", exc_info=True)
    elif isinstance(error, PlatformAuthenticationError):
        err_console.print(f"[red]Authentication Error:[/red] {message}")
        logger.debug("Authentication error details", exc_info=True)
    elif isinstance(error, PlatformError):
        err_console.print(f"[red]Platform Error:[/red] {message}")
        logger.debug("Platform error details", exc_info=True)
    elif isinstance(error, TagParseError):
        err_console.print(f"[red]Failed to parse tags:[/red] {message}")
        logger.debug("Tag parse error details", exc_info=True)
    elif isinstance(error, FileNotFoundError):
        err_console.print(f"[red]File Not Found:[/red] {message}")
        logger.debug("File not found details", exc_info=True)
    elif isinstance(error, PermissionError):
        err_console.print(f"[red]Permission Denied:[/red] {message}")
        logger.debug("Permission error details", exc_info=True)
    elif isinstance(error, (OSError, UnicodeDecodeError)):
        err_console.print(f"[red]Failed to read input:[/red] {message}")
        logger.debug("Input read error details", exc_info=True)
    else:
        err_console.print(f"[red]Error:[/red] {message}")
        logger.debug("Unexpected error details", exc_info=True)
