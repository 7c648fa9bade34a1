"""
Exceptions package for tagrep.

This package contains custom exception classes for configuration, tag
parsing and platform errors.
"""

from .config_exceptions import (
    TagrepError,
    ConfigurationError,
    TagConfigurationError,
    EnvironmentVariableError,
)

from .tag_exceptions import (
    TagParseError,
    TagCoercionError,
    TagSerializationError,
)

from .platform_exceptions import (
    PlatformError,
    PlatformAuthenticationError,
    PlatformNotFoundError,
    PlatformRateLimitError,
)

__all__ = [
    # Configuration exceptions
    "TagrepError",
    "ConfigurationError",
    "TagConfigurationError",
    "EnvironmentVariableError",
    # Tag parsing exceptions
    "TagParseError",
    "TagCoercionError",
    "TagSerializationError",
    # Platform exceptions
    "PlatformError",
    "PlatformAuthenticationError",
    "PlatformNotFoundError",
    "PlatformRateLimitError",
]
