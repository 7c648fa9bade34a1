"""
Platform exceptions for tagrep.

Exception Hierarchy:
    PlatformError
    ├── PlatformAuthenticationError
    ├── PlatformNotFoundError
    └── PlatformRateLimitError
"""

from typing import Optional

from .config_exceptions import TagrepError


class PlatformError(TagrepError):
    """
    Exception raised when a code review platform request fails.

    Attributes:
        status_code: HTTP status code if available
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlatformAuthenticationError(PlatformError):
    """
    Exception raised for rejected or insufficient credentials.

    Covers both 401 (bad token) and 403 (token lacks permission).
    """


class PlatformNotFoundError(PlatformError):
    """Exception raised when the pull request, merge request or issue does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


class PlatformRateLimitError(PlatformError):
    """
    Exception raised when the platform rate limit is exceeded.

    Attributes:
        retry_after: Suggested retry delay in seconds (if provided by the API)
    """

    def __init__(self, message: str, retry_after: Optional[int] = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after
