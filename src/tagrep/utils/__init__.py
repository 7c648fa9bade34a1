"""
Utilities package for tagrep.

Logging setup and environment handling used by the CLI.
"""

from .environment import load_environment_variables, get_env_bool, get_env_int, write_output
from .logging_config import LogFormat, LogLevel, resolve_log_settings, setup_logging

__all__ = [
    "load_environment_variables",
    "get_env_bool",
    "get_env_int",
    "write_output",
    "LogFormat",
    "LogLevel",
    "resolve_log_settings",
    "setup_logging",
]
