"""
Core package for tagrep.

Contains the pure tag extraction and serialization engine.
"""

from .tag_parser import (
    TagConfig,
    OutputFormat,
    TagParser,
    extract_and_serialize,
)

__all__ = [
    "TagConfig",
    "OutputFormat",
    "TagParser",
    "extract_and_serialize",
]
