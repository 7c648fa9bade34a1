"""
tagrep: extract KEY=value tags from pull request, merge request and issue
descriptions and print them as raw env lines or JSON.
"""

from .version import __version__, NAME
from .core.tag_parser import TagConfig, OutputFormat, TagParser, extract_and_serialize

__all__ = [
    "__version__",
    "NAME",
    "TagConfig",
    "OutputFormat",
    "TagParser",
    "extract_and_serialize",
]
