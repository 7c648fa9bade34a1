"""
Tag Parser Module

Main entry point of the extraction engine: text in, serialized tags out.
"""

import logging
from typing import Optional

from ...exceptions.config_exceptions import TagConfigurationError
from .coercion import TagCoercer
from .matcher import TagMatcher
from .serializer import TagSerializer
from .types import DiagnosticSink, OutputFormat, TagConfig

logger = logging.getLogger(__name__)


class TagParser:
    """Extracts, types and serializes tags using a fixed TagConfig.

    The parser holds no mutable state, so one instance can serve any number
    of documents, including concurrently.
    """

    def __init__(self, config: TagConfig, diagnostics: Optional[DiagnosticSink] = None):
        """
        Args:
            config: Output configuration
            diagnostics: Sink for non-fatal findings; discarded when omitted

        Raises:
            TagConfigurationError: If the configured format is not supported
        """
        if not isinstance(config.format, OutputFormat):
            raise TagConfigurationError(
                f"format '{config.format}' is invalid",
                option="format",
                allowed_values=OutputFormat.allowed_values(),
            )
        self.config = config
        self.matcher = TagMatcher(diagnostics)
        self.coercer = TagCoercer(config, diagnostics)
        self.serializer = TagSerializer(config)

    def parse_tags(self, text: str) -> str:
        """Extract tags from text and return them serialized.

        Raises:
            TagCoercionError: If a bool tag has a non-boolean value
            TagSerializationError: If the typed tags cannot be rendered
        """
        groups = self.matcher.group_tags(text)
        typed = self.coercer.coerce(groups)
        output = self.serializer.serialize(typed)
        logger.debug(
            "Parsed %d tag keys, %d selected for %s output",
            len(groups), len(typed), self.config.format.value,
        )
        return output


def extract_and_serialize(
    text: str,
    config: TagConfig,
    diagnostics: Optional[DiagnosticSink] = None,
) -> str:
    """Extract tags from text and serialize them according to config."""
    return TagParser(config, diagnostics).parse_tags(text)
