"""
Platform interface for code review platforms.

A platform is the text source tagrep reads tags from: the description of a
pull request (GitHub), merge request (GitLab) or issue.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from ..exceptions.config_exceptions import ConfigurationError


class PlatformType(str, Enum):
    """Supported code review platforms."""
    GITHUB = "github"
    GITLAB = "gitlab"

    @classmethod
    def allowed_values(cls) -> List[str]:
        return sorted(member.value for member in cls)

    @classmethod
    def from_name(cls, name: str) -> "PlatformType":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"unsupported value for platform: {name}",
                option="--platform",
                suggestions=[f"Allowed values are: {', '.join(cls.allowed_values())}"],
            ) from None


class Platform(ABC):
    """Minimum interface for a code review platform."""

    @abstractmethod
    def get_request_body(self) -> str:
        """Get the pull request or merge request description."""

    @abstractmethod
    def get_issue_body(self) -> str:
        """Get the issue description."""
