"""Version information for the tagrep CLI."""

NAME = "tagrep"
__version__ = "0.1.0"

USER_AGENT = f"{NAME}/{__version__}"
