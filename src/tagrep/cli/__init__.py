"""
tagrep CLI Package.

Command-line interface for extracting tags from pull requests, merge
requests, issues and local text.
"""

from .cli import app, cli_main

__all__ = ["app", "cli_main"]
