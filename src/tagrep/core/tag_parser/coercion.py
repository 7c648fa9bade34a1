"""
Tag Coercion Module

Applies the duplicate-key policy and per-key typing to grouped tag values.

Array tags keep every value. Every other key takes its last value, which is
then used verbatim or, for bool tags, coerced to a boolean.
"""

import logging
from typing import Dict, List, Optional

from ...exceptions.tag_exceptions import TagCoercionError
from .types import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    TagConfig,
    TagGroups,
    TypedValue,
    discard_diagnostics,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "t", "true", "yes", "y"})
_FALSE_VALUES = frozenset({"0", "f", "false", "no", "n"})


def parse_bool_value(value: str) -> bool:
    """Parse a tag value as a boolean.

    Accepts, case-insensitively and ignoring surrounding whitespace:
    1, t, true, yes, y for True and 0, f, false, no, n for False.

    Raises:
        ValueError: If the value is none of the above
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"failed to parse {normalized!r} as bool")


class TagCoercer:
    """Turns grouped raw values into typed values according to a TagConfig."""

    def __init__(self, config: TagConfig, diagnostics: Optional[DiagnosticSink] = None):
        self.config = config
        self.diagnostics = diagnostics if diagnostics is not None else discard_diagnostics

    def is_selected(self, key: str) -> bool:
        """True if the key takes part in the output."""
        return self.config.output_all or key in self.config.target_tags

    def coerce(self, groups: TagGroups) -> Dict[str, TypedValue]:
        """Coerce every selected group.

        Raises:
            TagCoercionError: If a bool tag has a non-boolean value
        """
        typed = {}
        for key, values in groups.items():
            if not self.is_selected(key):
                continue
            typed[key] = self.coerce_values(key, values)
        return typed

    def coerce_values(self, key: str, values: List[str]) -> TypedValue:
        """Coerce the values seen for one key."""
        if not values:
            raise ValueError(f"no values recorded for tag {key}")

        if key in self.config.array_tags:
            return TypedValue.array(values)

        if len(values) > 1:
            self.diagnostics(Diagnostic(
                kind=DiagnosticKind.DUPLICATE_KEY,
                message="encountered duplicate keys that are not in array tags, defaulting to taking the last value",
                details={
                    "key": key,
                    "values": list(values),
                    "array_tags": list(self.config.array_tags),
                    "string_tags": list(self.config.string_tags),
                    "bool_tags": list(self.config.bool_tags),
                },
            ))

        last = values[-1]
        if key in self.config.string_tags:
            return TypedValue.string(last)

        if key in self.config.bool_tags:
            try:
                return TypedValue.boolean(parse_bool_value(last))
            except ValueError:
                raise TagCoercionError(key, last) from None

        return TypedValue.string(last)
