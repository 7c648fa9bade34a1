"""
Environment handling for the tagrep CLI.

Loads dotenv files, reads typed values from environment variables and
writes tag output to stdout or to an env file such as $GITHUB_ENV.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

import typer
from dotenv import load_dotenv

from ..core.tag_parser.coercion import parse_bool_value
from ..exceptions.config_exceptions import EnvironmentVariableError

logger = logging.getLogger(__name__)

DEFAULT_DOTENV_FILE = ".env"


def load_environment_variables(env_file: Optional[Union[str, Path]] = None) -> bool:
    """
    Load environment variables from a dotenv file.

    Values already present in the environment are not overridden. A missing
    default .env file is not an error; a missing explicit file is.

    Args:
        env_file: Path to the dotenv file, or None for ./.env

    Returns:
        True if a file was loaded

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
    """
    explicit = env_file is not None
    env_file_path = Path(env_file) if explicit else Path.cwd() / DEFAULT_DOTENV_FILE

    if not env_file_path.exists():
        if explicit:
            raise FileNotFoundError(f"dotenv file not found: {env_file_path}")
        logger.debug(f"Environment file not found at {env_file_path}, skipping")
        return False

    logger.debug(f"Loading environment variables from {env_file_path}")
    load_dotenv(env_file_path, override=False)
    return True


def get_env_bool(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """
    Read a boolean environment variable. Unset or empty means False.

    Raises:
        EnvironmentVariableError: If the value is not a recognised boolean
    """
    environ = os.environ if environ is None else environ
    value = environ.get(name, "")
    if not value.strip():
        return False
    try:
        return parse_bool_value(value)
    except ValueError:
        raise EnvironmentVariableError(
            f"environment variable {name} is not a boolean: {value!r}",
            variable_name=name,
        ) from None


def get_env_int(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """
    Read an integer environment variable. Unset or empty means None.

    Raises:
        EnvironmentVariableError: If the value is not an integer
    """
    environ = os.environ if environ is None else environ
    value = environ.get(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise EnvironmentVariableError(
            f"environment variable {name} is not an integer: {value!r}",
            variable_name=name,
        ) from None


def write_output(output: str, env_file: Optional[Union[str, Path]] = None) -> None:
    """
    Write serialized tags to stdout or append them to an env file.

    Empty output prints nothing. Output that does not end with a newline
    (JSON) gets one.
    """
    if not output:
        logger.debug("No tags selected for output")
        if env_file is None:
            return

    text = output if output.endswith("\n") or not output else output + "\n"

    if env_file is None:
        typer.echo(text, nl=False)
        return

    env_file_path = Path(env_file)
    with env_file_path.open("a", encoding="utf-8") as f:
        f.write(text)
    line_count = text.count("\n")
    logger.info(f"Wrote {line_count} tag lines to {env_file_path}")
