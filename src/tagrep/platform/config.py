"""
Platform configuration.

Builds a PlatformConfig from well-known CI environment variables (GitHub
Actions, GitLab CI) so that tagrep works without flags inside a pipeline.
Command line options override anything read from the environment.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..exceptions.config_exceptions import ConfigurationError, EnvironmentVariableError
from ..utils.environment import get_env_bool, get_env_int
from .base import PlatformType

logger = logging.getLogger(__name__)

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITLAB_API_URL = "https://gitlab.com/api/v4"

# Merge queue branches end in pr-<number>, optionally followed by the head sha.
_MERGE_GROUP_PR_PATTERN = re.compile(r'/pr-(\d+)(?:-[0-9a-fA-F]+)?$')

_PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")
_PULL_REQUEST_REVIEW_EVENTS = ("pull_request_review", "pull_request_review_comment")
_ISSUE_EVENTS = ("issues", "issue_comment")


@dataclass
class GitHubContextDefaults:
    """Values derived from the GitHub Actions event that triggered a run.

    Attributes:
        owner: Repository owner
        repo: Repository name
        pull_request_number: Pull request the event refers to, if any
        issue_number: Issue the event refers to, if any
    """
    owner: str = ""
    repo: str = ""
    pull_request_number: Optional[int] = None
    issue_number: Optional[int] = None

    @classmethod
    def load(cls, event_name: str, event: Dict[str, Any], repository: str = "") -> "GitHubContextDefaults":
        defaults = cls()
        if repository and "/" in repository:
            defaults.owner, defaults.repo = repository.split("/", 1)

        if event_name in _PULL_REQUEST_EVENTS:
            defaults.pull_request_number = _as_int(event.get("number"))
        elif event_name in _PULL_REQUEST_REVIEW_EVENTS:
            defaults.pull_request_number = _as_int((event.get("pull_request") or {}).get("number"))
        elif event_name == "merge_group":
            head_ref = (event.get("merge_group") or {}).get("head_ref") or ""
            match = _MERGE_GROUP_PR_PATTERN.search(head_ref)
            if match:
                defaults.pull_request_number = int(match.group(1))
        elif event_name in _ISSUE_EVENTS:
            issue = event.get("issue") or {}
            defaults.issue_number = _as_int(issue.get("number"))
            # issue_comment also fires for pull request comments
            if issue.get("pull_request"):
                defaults.pull_request_number = defaults.issue_number

        return defaults

    @classmethod
    def from_environment(cls, environ: Mapping[str, str]) -> "GitHubContextDefaults":
        """Load defaults from GITHUB_EVENT_NAME, GITHUB_EVENT_PATH and GITHUB_REPOSITORY."""
        event: Dict[str, Any] = {}
        event_path = environ.get("GITHUB_EVENT_PATH", "")
        if event_path:
            try:
                event = json.loads(Path(event_path).read_text(encoding="utf-8"))
            except FileNotFoundError:
                logger.debug(f"GitHub event file not found at {event_path}, skipping")
            except json.JSONDecodeError as e:
                raise EnvironmentVariableError(
                    f"failed to parse GitHub event file {event_path}: {e}",
                    variable_name="GITHUB_EVENT_PATH",
                ) from e

        return cls.load(
            environ.get("GITHUB_EVENT_NAME", ""),
            event if isinstance(event, dict) else {},
            environ.get("GITHUB_REPOSITORY", ""),
        )


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _ci_flag(name: str, environ: Mapping[str, str]) -> bool:
    """Read a CI marker variable; a value that is not a boolean counts as unset."""
    try:
        return get_env_bool(name, environ)
    except EnvironmentVariableError:
        logger.debug(f"Ignoring {name}={environ.get(name)!r} for platform inference")
        return False


@dataclass
class PlatformConfig:
    """
    Configuration needed to create a Platform.

    Attributes:
        type: Platform to talk to
        token: API token
        api_url: Base URL of the platform REST API
        repository: "owner/repo" on GitHub, project id or path on GitLab
        request_number: Pull request number or merge request IID
        issue_number: Issue number or issue IID
        use_job_token: Authenticate to GitLab with a CI job token
        max_retries: Maximum number of retries for transient failures
        retry_delay: Base delay in seconds for the Fibonacci backoff
        timeout: HTTP request timeout in seconds
    """
    type: Optional[PlatformType] = None
    token: Optional[str] = None
    api_url: str = ""
    repository: str = ""
    request_number: Optional[int] = None
    issue_number: Optional[int] = None
    use_job_token: bool = False
    max_retries: int = 3
    retry_delay: float = 1.0
    timeout: int = 30

    def __post_init__(self) -> None:
        if isinstance(self.type, str) and not isinstance(self.type, PlatformType):
            self.type = PlatformType.from_name(self.type) if self.type.strip() else None
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be non-negative", option="--max-retries")
        if self.retry_delay < 0:
            raise ConfigurationError("retry_delay must be non-negative")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if not self.api_url:
            if self.type == PlatformType.GITHUB:
                self.api_url = DEFAULT_GITHUB_API_URL
            elif self.type == PlatformType.GITLAB:
                self.api_url = DEFAULT_GITLAB_API_URL

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "PlatformConfig":
        """
        Create configuration from CI environment variables.

        The platform is inferred from GITHUB_ACTIONS or GITLAB_CI unless given
        explicitly. Keyword overrides that are not None replace values read
        from the environment.

        Raises:
            ConfigurationError: If an environment value or override is invalid
        """
        environ = os.environ if environ is None else environ
        overrides = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(overrides) - {f.name for f in fields(cls)}
        if unknown:
            raise TypeError(f"unknown platform options: {', '.join(sorted(unknown))}")

        platform_type = overrides.get("type")
        if isinstance(platform_type, str):
            platform_type = PlatformType.from_name(platform_type)
        if platform_type is None:
            if _ci_flag("GITHUB_ACTIONS", environ):
                platform_type = PlatformType.GITHUB
            if _ci_flag("GITLAB_CI", environ):
                platform_type = PlatformType.GITLAB

        values: Dict[str, Any] = {"type": platform_type}
        if platform_type == PlatformType.GITHUB:
            context = GitHubContextDefaults.from_environment(environ)
            values.update(
                token=environ.get("GITHUB_TOKEN") or None,
                api_url=environ.get("GITHUB_API_URL", ""),
                repository=f"{context.owner}/{context.repo}" if context.owner else "",
                request_number=context.pull_request_number,
                issue_number=context.issue_number,
            )
        elif platform_type == PlatformType.GITLAB:
            token = environ.get("GITLAB_TOKEN") or None
            values.update(
                token=token or environ.get("CI_JOB_TOKEN") or None,
                use_job_token=token is None and bool(environ.get("CI_JOB_TOKEN")),
                api_url=environ.get("CI_API_V4_URL", ""),
                repository=environ.get("CI_PROJECT_ID", ""),
                request_number=get_env_int("CI_MERGE_REQUEST_IID", environ),
            )

        # An explicit token is a personal/project token, never a job token
        if "token" in overrides:
            values["use_job_token"] = False
        values.update(overrides)
        values["type"] = platform_type
        return cls(**values)

    def require(self, value: Any, name: str, option: str) -> Any:
        """
        Return value, raising a ConfigurationError naming the option when it is missing.
        """
        if value is None or value == "":
            raise ConfigurationError(
                f"missing {name} for {self.type.value if self.type else 'platform'}",
                option=option,
                suggestions=[f"Pass {option} or run inside a supported CI environment"],
            )
        return value
