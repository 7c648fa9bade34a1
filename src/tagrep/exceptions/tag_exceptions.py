"""
Tag parsing exceptions for tagrep.

Raised by the extraction and serialization engine. Any of these aborts the
whole parse: no partial output is produced.
"""

from typing import List, Optional

from .config_exceptions import TagrepError


class TagParseError(TagrepError):
    """Base exception for failures while turning text into tag output."""


class TagCoercionError(TagParseError):
    """Exception raised when a typed tag value cannot be coerced."""

    def __init__(self, key: str, value: str, target_type: str = "bool") -> None:
        """
        Initialize coercion error.

        Args:
            key: Tag key whose value failed coercion
            value: Raw value as found in the text
            target_type: Name of the type the value was coerced to
        """
        super().__init__(f"failed to parse tag {key}: {value!r} is not a valid {target_type}")
        self.key = key
        self.value = value
        self.target_type = target_type


class TagSerializationError(TagParseError):
    """Exception raised when typed tags cannot be rendered."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        msg = super().__str__()
        for error in self.errors:
            msg += f"\n  - {error}"
        return msg
