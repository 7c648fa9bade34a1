"""
Platform package for tagrep.

Text sources for tag extraction: pull/merge request and issue descriptions
fetched from GitHub or GitLab.
"""

from ..exceptions.config_exceptions import ConfigurationError
from .base import Platform, PlatformType
from .client import PlatformHTTPClient, fibonacci_delay
from .config import GitHubContextDefaults, PlatformConfig
from .github import GitHub
from .gitlab import GitLab


def create_platform(config: PlatformConfig) -> Platform:
    """
    Create the platform selected by config.

    Raises:
        ConfigurationError: If no platform was given or inferred, or required values are missing
    """
    if config.type == PlatformType.GITHUB:
        return GitHub(config)
    if config.type == PlatformType.GITLAB:
        return GitLab(config)
    raise ConfigurationError(
        "unknown platform type: no --platform given and none could be inferred from the environment",
        option="--platform",
        suggestions=[
            f"Pass --platform with one of: {', '.join(PlatformType.allowed_values())}",
            "Run inside GitHub Actions (GITHUB_ACTIONS=true) or GitLab CI (GITLAB_CI=true)",
        ],
    )


__all__ = [
    "Platform",
    "PlatformType",
    "PlatformHTTPClient",
    "fibonacci_delay",
    "GitHubContextDefaults",
    "PlatformConfig",
    "GitHub",
    "GitLab",
    "create_platform",
]
