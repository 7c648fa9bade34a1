"""GitLab implementation of the Platform interface."""

import logging
from typing import Optional
from urllib.parse import quote

from .base import Platform
from .client import PlatformHTTPClient
from .config import PlatformConfig

logger = logging.getLogger(__name__)


class GitLab(Platform):
    """Reads merge request and issue descriptions through the GitLab REST API."""

    def __init__(self, config: PlatformConfig, client: Optional[PlatformHTTPClient] = None) -> None:
        self.config = config
        token = config.require(config.token, "token", "--token")
        project = config.require(config.repository, "project id or path", "--repository")

        # Project paths such as group/project must be URL encoded as one segment
        self.project = quote(str(project), safe="")

        auth_header = "JOB-TOKEN" if config.use_job_token else "PRIVATE-TOKEN"
        self.client = client or PlatformHTTPClient(
            config.api_url,
            headers={auth_header: token},
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
        )

    def get_request_body(self) -> str:
        """Get the merge request description."""
        iid = self.config.require(self.config.request_number, "merge request IID", "--number")
        logger.debug(f"Fetching merge request {self.project}!{iid}")
        data = self.client.get_json(f"projects/{self.project}/merge_requests/{iid}")
        return data.get("description") or ""

    def get_issue_body(self) -> str:
        """Get the issue description."""
        iid = self.config.require(self.config.issue_number, "issue IID", "--number")
        logger.debug(f"Fetching issue {self.project}#{iid}")
        data = self.client.get_json(f"projects/{self.project}/issues/{iid}")
        return data.get("description") or ""
