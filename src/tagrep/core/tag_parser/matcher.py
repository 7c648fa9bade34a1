"""
Tag Matcher Module

Finds KEY=value tag lines in free-form text such as pull request
descriptions and issue bodies.

A tag is only recognised at the start of a line. Prose that happens to
contain "word=value" mid-sentence is never treated as a tag.
"""

import logging
import re
from typing import List, Optional

from .types import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    RawTag,
    TagGroups,
    discard_diagnostics,
)

logger = logging.getLogger(__name__)

# Multiline so that '^' anchors at every line start, not only the first.
TAG_PATTERN = re.compile(r'^([A-Za-z0-9_]*)=([^\n\r]*)', re.MULTILINE)


class TagMatcher:
    """Extracts tag lines from text and groups their values by key."""

    def __init__(self, diagnostics: Optional[DiagnosticSink] = None):
        """
        Args:
            diagnostics: Sink receiving malformed-match diagnostics
        """
        self.pattern = TAG_PATTERN
        self.diagnostics = diagnostics if diagnostics is not None else discard_diagnostics

    def find_tags(self, text: str) -> List[RawTag]:
        """Return every tag line in source order.

        Args:
            text: Document to scan

        Returns:
            List of RawTag with keys exactly as written
        """
        if not isinstance(text, str):
            raise ValueError(f"text must be a string, got {type(text)}")

        tags = []
        for match in self.pattern.finditer(text):
            if match.lastindex is None or match.lastindex < 2:
                self.diagnostics(Diagnostic(
                    kind=DiagnosticKind.MALFORMED_MATCH,
                    message="unable to parse tag line",
                    details={"invalid_match": match.group(0), "position": match.start()},
                ))
                continue
            tags.append(RawTag(key=match.group(1), value=match.group(2)))

        logger.debug("Matched %d tag lines", len(tags))
        return tags

    def group_tags(self, text: str) -> TagGroups:
        """Group tag values by upper-cased key.

        Keys are ordered by first occurrence and each key's values keep
        their source order.
        """
        groups: TagGroups = {}
        for tag in self.find_tags(text):
            groups.setdefault(tag.key.upper(), []).append(tag.value)
        return groups
