"""
Tag Serializer Module

Renders typed tags as raw KEY=value lines or as a JSON object.

Keys are always emitted in ascending case-insensitive order so the output is
deterministic regardless of the order tags appeared in the text.
"""

import json
import logging
from typing import Dict, List

from ...exceptions.tag_exceptions import TagSerializationError
from .types import OutputFormat, TagConfig, TypedValue, ValueKind

logger = logging.getLogger(__name__)

JSON_INDENT = 2

# HTML-safe escapes applied to JSON output; each only occurs inside strings.
_JSON_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def escape_commas(value: str) -> str:
    return value.replace(",", "\\,")


def escape_json_html(encoded: str) -> str:
    """Escape HTML-sensitive characters in already encoded JSON.

    These characters can only occur inside JSON strings, so replacing them
    keeps the document valid and decodes to the same values.
    """
    for char, escaped in _JSON_HTML_ESCAPES.items():
        encoded = encoded.replace(char, escaped)
    return encoded


def sorted_keys(tags: Dict[str, TypedValue]) -> List[str]:
    return sorted(tags, key=lambda key: (key.upper(), key))


def render_raw_value(typed: TypedValue) -> str:
    """Render one typed value for a raw KEY=value line.

    Array elements are joined with ',' and literal commas inside an element
    are escaped as '\\,' so the elements can be recovered.

    Raises:
        TagSerializationError: If the value shape does not match its kind
    """
    if typed.kind is ValueKind.STRING and isinstance(typed.value, str):
        return typed.value
    if typed.kind is ValueKind.BOOL and isinstance(typed.value, bool):
        return "true" if typed.value else "false"
    if typed.kind is ValueKind.ARRAY and isinstance(typed.value, (tuple, list)):
        return ",".join(escape_commas(item) for item in typed.value)
    raise TagSerializationError(
        f"unsupported value for raw output: kind={typed.kind!r} value={typed.value!r}"
    )


class TagSerializer:
    """Serializes typed tags in the configured output format."""

    def __init__(self, config: TagConfig):
        self.config = config

    def serialize(self, tags: Dict[str, TypedValue]) -> str:
        """Render tags in the configured format.

        Raises:
            TagSerializationError: If a value cannot be rendered or the format is unknown
        """
        if self.config.format == OutputFormat.RAW:
            return self.to_raw(tags)
        if self.config.format == OutputFormat.JSON:
            return self.to_json(tags)
        # TagConfig validates the format, so this is only hit if it was mutated afterwards.
        raise TagSerializationError(f"unknown error formatting tags: format '{self.config.format}'")

    def to_raw(self, tags: Dict[str, TypedValue]) -> str:
        lines = []
        errors = []
        for key in sorted_keys(tags):
            try:
                lines.append(f"{key}={render_raw_value(tags[key])}\n")
            except TagSerializationError as e:
                errors.append(f"{key}: {e}")

        if errors:
            raise TagSerializationError("failed to format tags", errors=errors)
        return "".join(lines)

    def to_json(self, tags: Dict[str, TypedValue]) -> str:
        payload = {key: tags[key].to_python() for key in sorted_keys(tags)}
        try:
            if self.config.pretty_print:
                encoded = json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)
            else:
                encoded = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise TagSerializationError(f"failed to format tags as json: {e}") from e
        return escape_json_html(encoded)
