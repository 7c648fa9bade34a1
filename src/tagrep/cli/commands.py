"""
Tag commands for the tagrep CLI.

`request` and `issue` fetch a description from GitHub or GitLab, `parse`
reads local text. All three print the tags found in that text.

Tags should be of the form:

    TAG_1=Some tag value
    TAG_2=my-tag
    TAG_3=something
    TAG_3=something else
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import typer

from ..core.tag_parser import OutputFormat, TagConfig, extract_and_serialize, logging_sink
from ..exceptions.config_exceptions import TagConfigurationError, TagrepError
from ..platform import PlatformConfig, create_platform
from ..utils.environment import write_output
from .errors import handle_cli_error

logger = logging.getLogger(__name__)

# Tag options shared by every command
FORMAT_OPTION = typer.Option(
    OutputFormat.RAW.value,
    "--format",
    "-f",
    envvar="TAGREP_FORMAT",
    help=f"Output format. Allowed values are {OutputFormat.allowed_values()}. "
         "raw prints KEY=value lines for easy loading into env variables.",
)
PRETTY_PRINT_OPTION = typer.Option(
    False,
    "--pretty-print/--no-pretty-print",
    envvar="TAGREP_PRETTY_PRINT",
    help="Indent JSON output. Has no effect on raw output.",
)
OUTPUT_ALL_OPTION = typer.Option(
    True,
    "--output-all/--no-output-all",
    envvar="TAGREP_OUTPUT_ALL",
    help="Output every tag found, not only those listed in --array-tags, --string-tags or --bool-tags.",
)
ARRAY_TAGS_OPTION = typer.Option(
    None,
    "--array-tags",
    envvar="TAGREP_ARRAY_TAGS",
    help="Tags to output as an array of every value found, e.g. TAG_1. Repeatable or comma separated.",
)
STRING_TAGS_OPTION = typer.Option(
    None,
    "--string-tags",
    envvar="TAGREP_STRING_TAGS",
    help="Tags to output as a string (last value wins). Repeatable or comma separated.",
)
BOOL_TAGS_OPTION = typer.Option(
    None,
    "--bool-tags",
    envvar="TAGREP_BOOL_TAGS",
    help="Tags to output as a boolean (last value wins). Repeatable or comma separated.",
)
OUTPUT_ENV_FILE_OPTION = typer.Option(
    None,
    "--output-env-file",
    envvar="TAGREP_OUTPUT_ENV_FILE",
    help="Append raw output to this env file (e.g. $GITHUB_ENV) instead of printing it.",
    metavar="PATH",
)

# Platform options shared by request and issue
PLATFORM_OPTION = typer.Option(
    None,
    "--platform",
    envvar="TAGREP_PLATFORM",
    help="Code review platform. Inferred from GITHUB_ACTIONS or GITLAB_CI when omitted.",
)
TOKEN_OPTION = typer.Option(
    None,
    "--token",
    envvar="TAGREP_TOKEN",
    help="API token. Defaults to GITHUB_TOKEN, GITLAB_TOKEN or CI_JOB_TOKEN.",
    show_default=False,
)
API_URL_OPTION = typer.Option(
    None,
    "--api-url",
    envvar="TAGREP_API_URL",
    help="Platform API base URL. Defaults to GITHUB_API_URL, CI_API_V4_URL or the public endpoint.",
)
REPOSITORY_OPTION = typer.Option(
    None,
    "--repository",
    envvar="TAGREP_REPOSITORY",
    help="owner/repo on GitHub, project id or path on GitLab.",
)
NUMBER_OPTION = typer.Option(
    None,
    "--number",
    "-n",
    envvar="TAGREP_NUMBER",
    help="Pull request number, merge request IID or issue number.",
)
MAX_RETRIES_OPTION = typer.Option(
    None,
    "--max-retries",
    envvar="TAGREP_MAX_RETRIES",
    help="Retries for transient platform failures.",
)


def split_tag_list(values: Optional[Iterable[str]]) -> List[str]:
    """Split repeated and comma separated tag names into upper-cased keys."""
    keys: List[str] = []
    for value in values or []:
        for name in value.split(","):
            key = name.strip().upper()
            if key and key not in keys:
                keys.append(key)
    return keys


def build_tag_config(
    format: str,
    pretty_print: bool,
    output_all: bool,
    array_tags: Optional[List[str]],
    string_tags: Optional[List[str]],
    bool_tags: Optional[List[str]],
    output_env_file: Optional[Path] = None,
) -> TagConfig:
    """
    Build and validate the tag configuration from command line values.

    Raises:
        TagConfigurationError: If the format is invalid, or JSON output is sent to an env file
    """
    config = TagConfig(
        array_tags=split_tag_list(array_tags),
        string_tags=split_tag_list(string_tags),
        bool_tags=split_tag_list(bool_tags),
        output_all=output_all,
        format=format,
        pretty_print=pretty_print,
    )
    if output_env_file is not None and config.format != OutputFormat.RAW:
        raise TagConfigurationError(
            "--output-env-file requires raw output format",
            option="--output-env-file",
            allowed_values=[OutputFormat.RAW.value],
        )
    return config


def run_parse(
    build_config: Callable[[], TagConfig],
    read_text: Callable[[], str],
    output_env_file: Optional[Path],
) -> None:
    """
    Validate configuration, read the text, then print or export its tags.

    Configuration is validated before any text is fetched. Any TagrepError
    is reported on stderr and ends the command with exit status 1.
    """
    try:
        config = build_config()
        text = read_text()
        output = extract_and_serialize(text, config, logging_sink(logger))
        logger.debug(f"Parsed tags from text: {output!r}")
        write_output(output, output_env_file)
    except (TagrepError, OSError, UnicodeDecodeError) as e:
        handle_cli_error(e)
        raise typer.Exit(1)


def request(
    format: str = FORMAT_OPTION,
    pretty_print: bool = PRETTY_PRINT_OPTION,
    output_all: bool = OUTPUT_ALL_OPTION,
    array_tags: Optional[List[str]] = ARRAY_TAGS_OPTION,
    string_tags: Optional[List[str]] = STRING_TAGS_OPTION,
    bool_tags: Optional[List[str]] = BOOL_TAGS_OPTION,
    output_env_file: Optional[Path] = OUTPUT_ENV_FILE_OPTION,
    platform: Optional[str] = PLATFORM_OPTION,
    token: Optional[str] = TOKEN_OPTION,
    api_url: Optional[str] = API_URL_OPTION,
    repository: Optional[str] = REPOSITORY_OPTION,
    number: Optional[int] = NUMBER_OPTION,
    max_retries: Optional[int] = MAX_RETRIES_OPTION,
) -> None:
    """Parse tags from a GitHub pull request or GitLab merge request description."""

    def read_text() -> str:
        platform_config = PlatformConfig.from_environment(
            type=platform,
            token=token,
            api_url=api_url,
            repository=repository,
            request_number=number,
            max_retries=max_retries,
        )
        logger.debug(f"Starting tagrep request on platform {platform_config.type}")
        return create_platform(platform_config).get_request_body()

    run_parse(
        lambda: build_tag_config(format, pretty_print, output_all, array_tags, string_tags, bool_tags, output_env_file),
        read_text,
        output_env_file,
    )


def issue(
    format: str = FORMAT_OPTION,
    pretty_print: bool = PRETTY_PRINT_OPTION,
    output_all: bool = OUTPUT_ALL_OPTION,
    array_tags: Optional[List[str]] = ARRAY_TAGS_OPTION,
    string_tags: Optional[List[str]] = STRING_TAGS_OPTION,
    bool_tags: Optional[List[str]] = BOOL_TAGS_OPTION,
    output_env_file: Optional[Path] = OUTPUT_ENV_FILE_OPTION,
    platform: Optional[str] = PLATFORM_OPTION,
    token: Optional[str] = TOKEN_OPTION,
    api_url: Optional[str] = API_URL_OPTION,
    repository: Optional[str] = REPOSITORY_OPTION,
    number: Optional[int] = NUMBER_OPTION,
    max_retries: Optional[int] = MAX_RETRIES_OPTION,
) -> None:
    """Parse tags from a GitHub or GitLab issue description."""

    def read_text() -> str:
        platform_config = PlatformConfig.from_environment(
            type=platform,
            token=token,
            api_url=api_url,
            repository=repository,
            issue_number=number,
            max_retries=max_retries,
        )
        logger.debug(f"Starting tagrep issue on platform {platform_config.type}")
        return create_platform(platform_config).get_issue_body()

    run_parse(
        lambda: build_tag_config(format, pretty_print, output_all, array_tags, string_tags, bool_tags, output_env_file),
        read_text,
        output_env_file,
    )


def parse(
    path: Optional[Path] = typer.Argument(
        None,
        help="File to read tags from. Reads stdin when omitted or '-'.",
        show_default=False,
    ),
    format: str = FORMAT_OPTION,
    pretty_print: bool = PRETTY_PRINT_OPTION,
    output_all: bool = OUTPUT_ALL_OPTION,
    array_tags: Optional[List[str]] = ARRAY_TAGS_OPTION,
    string_tags: Optional[List[str]] = STRING_TAGS_OPTION,
    bool_tags: Optional[List[str]] = BOOL_TAGS_OPTION,
    output_env_file: Optional[Path] = OUTPUT_ENV_FILE_OPTION,
) -> None:
    """Parse tags from a local file or stdin."""

    def read_text() -> str:
        if path is None or str(path) == "-":
            return sys.stdin.read()
        return path.read_text(encoding="utf-8")

    run_parse(
        lambda: build_tag_config(format, pretty_print, output_all, array_tags, string_tags, bool_tags, output_env_file),
        read_text,
        output_env_file,
    )
