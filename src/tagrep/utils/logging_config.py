"""
Logging configuration for the tagrep CLI.

Log records go to stderr so that stdout only ever carries tag output. Two
formats are supported: rich console output for humans and one JSON object
per line for CI log collectors.
"""

import json
import logging
import os
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from ..core.tag_parser.coercion import parse_bool_value
from ..exceptions.config_exceptions import ConfigurationError

LOGGER_NAME = "tagrep"

ENV_LOG_LEVEL = "TAGREP_LOG_LEVEL"
ENV_LOG_FORMAT = "TAGREP_LOG_FORMAT"
ENV_LOG_DEBUG = "TAGREP_LOG_DEBUG"

DEFAULT_LOG_LEVEL = "warning"


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError:
            raise ConfigurationError(
                f"unsupported log level: {name}",
                option=ENV_LOG_LEVEL,
                suggestions=[f"Use one of: {', '.join(m.name.lower() for m in cls)}"],
            ) from None


class LogFormat(str, Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"

    @classmethod
    def from_name(cls, name: str) -> "LogFormat":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"unsupported log format: {name}",
                option=ENV_LOG_FORMAT,
                suggestions=[f"Use one of: {', '.join(m.value for m in cls)}"],
            ) from None


class JSONFormatter(logging.Formatter):
    """Formats each record as a single-line JSON object.

    Structured context attached as ``extra={"extra_data": {...}}`` is merged
    into the top level of the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            log_data.update(extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        try:
            return json.dumps(log_data, default=str, ensure_ascii=False, separators=(',', ':'))
        except (TypeError, ValueError):
            # extra_data with keys json cannot encode
            return json.dumps({
                "timestamp": log_data["timestamp"],
                "level": log_data["level"],
                "logger": log_data["logger"],
                "message": str(record.getMessage()),
                "serialization_error": "Failed to serialize additional data",
            }, separators=(',', ':'))


def resolve_log_settings(
    environ: Optional[Mapping[str, str]] = None,
    verbose: bool = False,
    log_format: Optional[str] = None,
) -> Tuple[LogLevel, LogFormat]:
    """
    Resolve log level and format from options and environment.

    Explicit arguments win over TAGREP_LOG_* variables, which win over the
    defaults (warning, standard).

    Raises:
        ConfigurationError: If a level or format name is not recognised
    """
    environ = os.environ if environ is None else environ

    level = LogLevel.from_name(environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL)

    debug_flag = environ.get(ENV_LOG_DEBUG, "")
    if debug_flag:
        try:
            if parse_bool_value(debug_flag):
                level = LogLevel.DEBUG
        except ValueError:
            raise ConfigurationError(
                f"unsupported value for {ENV_LOG_DEBUG}: {debug_flag}",
                option=ENV_LOG_DEBUG,
                suggestions=["Use true or false"],
            ) from None

    if verbose:
        level = LogLevel.DEBUG

    fmt = LogFormat.from_name(log_format or environ.get(ENV_LOG_FORMAT) or LogFormat.STANDARD.value)
    return level, fmt


def setup_logging(
    level: LogLevel = LogLevel.WARNING,
    log_format: LogFormat = LogFormat.STANDARD,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Set up logging for the tagrep logger hierarchy.

    Args:
        level: Minimum level to emit
        log_format: Rich console output or JSON lines
        console: Console for rich output (defaults to a stderr console)

    Returns:
        Configured "tagrep" logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Clear handlers from a previous invocation in the same process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if log_format == LogFormat.JSON:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    handler.setLevel(level.value)
    logger.addHandler(handler)
    logger.setLevel(level.value)
    logger.propagate = False

    return logger
