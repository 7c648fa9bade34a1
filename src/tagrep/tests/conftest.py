"""Shared test fixtures and configuration for tagrep tests."""

import logging

import pytest

from tagrep.core.tag_parser import DiagnosticCollector, OutputFormat, TagConfig

# Environment variables that change CLI and platform defaults
_ISOLATED_ENV_VARS = (
    "GITHUB_ACTIONS",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_REPOSITORY",
    "GITHUB_EVENT_NAME",
    "GITHUB_EVENT_PATH",
    "GITLAB_CI",
    "GITLAB_TOKEN",
    "CI_JOB_TOKEN",
    "CI_API_V4_URL",
    "CI_PROJECT_ID",
    "CI_MERGE_REQUEST_IID",
    "TAGREP_LOG_LEVEL",
    "TAGREP_LOG_FORMAT",
    "TAGREP_LOG_DEBUG",
    "TAGREP_FORMAT",
    "TAGREP_PRETTY_PRINT",
    "TAGREP_OUTPUT_ALL",
    "TAGREP_ARRAY_TAGS",
    "TAGREP_STRING_TAGS",
    "TAGREP_BOOL_TAGS",
    "TAGREP_OUTPUT_ENV_FILE",
    "TAGREP_PLATFORM",
    "TAGREP_TOKEN",
    "TAGREP_API_URL",
    "TAGREP_REPOSITORY",
    "TAGREP_NUMBER",
    "TAGREP_MAX_RETRIES",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Run every test without CI or tagrep variables from the outer environment
    and from a working directory without a .env file.
    """
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    tagrep_logger = logging.getLogger("tagrep")
    for handler in list(tagrep_logger.handlers):
        tagrep_logger.removeHandler(handler)
    tagrep_logger.propagate = True
    tagrep_logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_description():
    """A pull request description with tags mixed into prose."""
    return """A description of a PR.

Some details about a PR.

TAG_1=my-tag-value
TAG_2=123143
TAG_3=A message about the tag. Something.
"""


@pytest.fixture
def diagnostics():
    """Collects diagnostics emitted during a test."""
    return DiagnosticCollector()


@pytest.fixture
def raw_config():
    """Raw output of every tag."""
    return TagConfig(output_all=True, format=OutputFormat.RAW)


@pytest.fixture
def json_config():
    """Compact JSON output of every tag."""
    return TagConfig(output_all=True, format=OutputFormat.JSON)
