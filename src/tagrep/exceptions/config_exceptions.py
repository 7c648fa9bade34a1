"""
Configuration-related exceptions for tagrep.

Custom exception classes for invalid tag options, platform settings and
environment variables, rendered with user-friendly suggestions.
"""

from typing import List, Optional


class TagrepError(Exception):
    """Base exception for all tagrep errors."""


class ConfigurationError(TagrepError):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error description
            option: Name of the option or variable that caused the error
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.option = option
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return formatted error message with suggestions."""
        msg = super().__str__()

        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"

        return msg


class TagConfigurationError(ConfigurationError):
    """Exception raised when the tag output configuration is invalid."""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        allowed_values: Optional[List[str]] = None
    ) -> None:
        """
        Initialize tag configuration error.

        Args:
            message: Error description
            option: Option that holds the invalid value
            allowed_values: Values accepted for the option
        """
        suggestions = []
        if allowed_values:
            suggestions.append(f"Allowed values are: {', '.join(allowed_values)}")

        super().__init__(message, option, suggestions)
        self.allowed_values = allowed_values or []


class EnvironmentVariableError(ConfigurationError):
    """Exception raised when a required environment value is missing or invalid."""

    def __init__(
        self,
        message: str,
        variable_name: Optional[str] = None,
        option: Optional[str] = None
    ) -> None:
        """
        Initialize environment variable error.

        Args:
            message: Error description
            variable_name: Name of the problematic environment variable
            option: Command line option that can be used instead
        """
        suggestions = []
        if variable_name:
            suggestions.append(f"Set {variable_name} in the environment or a .env file")
        if option:
            suggestions.append(f"Pass {option} on the command line")

        super().__init__(message, option, suggestions)
        self.variable_name = variable_name
