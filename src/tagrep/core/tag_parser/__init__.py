"""
Tag Parser Module

Extraction and typed serialization of KEY=value tags embedded in text.

Components:
- matcher: line-anchored tag matching and grouping by key
- coercion: duplicate-key policy and string/bool/array typing
- serializer: raw and JSON output
- parser: the TagParser facade and extract_and_serialize
- types: data structures, configuration and diagnostics
"""

from .types import (
    RawTag,
    TagGroups,
    TypedValue,
    ValueKind,
    OutputFormat,
    TagConfig,
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    DiagnosticCollector,
    logging_sink,
)

from .matcher import TagMatcher, TAG_PATTERN
from .coercion import TagCoercer, parse_bool_value
from .serializer import TagSerializer, escape_commas, escape_json_html, render_raw_value
from .parser import TagParser, extract_and_serialize

__all__ = [
    # Types
    'RawTag',
    'TagGroups',
    'TypedValue',
    'ValueKind',
    'OutputFormat',
    'TagConfig',

    # Diagnostics
    'Diagnostic',
    'DiagnosticKind',
    'DiagnosticSink',
    'DiagnosticCollector',
    'logging_sink',

    # Components
    'TagMatcher',
    'TAG_PATTERN',
    'TagCoercer',
    'parse_bool_value',
    'TagSerializer',
    'escape_commas',
    'escape_json_html',
    'render_raw_value',

    # Entry points
    'TagParser',
    'extract_and_serialize',
]
