"""GitHub implementation of the Platform interface."""

import logging
from typing import Optional

from .base import Platform
from .client import PlatformHTTPClient
from .config import PlatformConfig

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class GitHub(Platform):
    """Reads pull request and issue descriptions through the GitHub REST API."""

    def __init__(self, config: PlatformConfig, client: Optional[PlatformHTTPClient] = None) -> None:
        """
        Raises:
            ConfigurationError: If the token or repository is missing or malformed
        """
        self.config = config
        token = config.require(config.token, "token", "--token")
        repository = config.require(config.repository, "repository", "--repository")

        owner, _, repo = repository.partition("/")
        if not owner or not repo:
            config.require(None, "repository in owner/repo form", "--repository")
        self.owner = owner
        self.repo = repo

        self.client = client or PlatformHTTPClient(
            config.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
        )

    def get_request_body(self) -> str:
        """Get the pull request body."""
        number = self.config.require(self.config.request_number, "pull request number", "--number")
        logger.debug(f"Fetching pull request {self.owner}/{self.repo}#{number}")
        data = self.client.get_json(f"repos/{self.owner}/{self.repo}/pulls/{number}")
        return data.get("body") or ""

    def get_issue_body(self) -> str:
        """Get the issue body."""
        number = self.config.require(self.config.issue_number, "issue number", "--number")
        logger.debug(f"Fetching issue {self.owner}/{self.repo}#{number}")
        data = self.client.get_json(f"repos/{self.owner}/{self.repo}/issues/{number}")
        return data.get("body") or ""
