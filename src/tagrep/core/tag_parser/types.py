"""
Tag Parser Types Module

Core data structures shared by the matcher, the coercer and the serializer:
raw matches, typed values, the output configuration and diagnostics.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, Union

from ...exceptions.config_exceptions import TagConfigurationError

logger = logging.getLogger(__name__)

# Upper-cased key -> every value seen for it, in source order.
TagGroups = Dict[str, List[str]]


class OutputFormat(str, Enum):
    """Supported output formats."""
    RAW = "raw"
    JSON = "json"

    @classmethod
    def allowed_values(cls) -> List[str]:
        return sorted(member.value for member in cls)


class ValueKind(Enum):
    """Discriminator for TypedValue."""
    STRING = "string"
    BOOL = "bool"
    ARRAY = "array"


@dataclass(frozen=True)
class RawTag:
    """A single KEY=value line match.

    Attributes:
        key: The key exactly as written in the text
        value: Everything after '=' up to the line terminator
    """
    key: str
    value: str


@dataclass(frozen=True)
class TypedValue:
    """The coerced value of one tag key.

    Attributes:
        kind: Which shape the value has
        value: A str for STRING, a bool for BOOL, a tuple of str for ARRAY
    """
    kind: ValueKind
    value: Union[str, bool, Tuple[str, ...]]

    @classmethod
    def string(cls, value: str) -> "TypedValue":
        return cls(ValueKind.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> "TypedValue":
        return cls(ValueKind.BOOL, value)

    @classmethod
    def array(cls, values: List[str]) -> "TypedValue":
        return cls(ValueKind.ARRAY, tuple(values))

    def to_python(self) -> Union[str, bool, List[str]]:
        """Plain Python value suitable for json.dumps."""
        if self.kind is ValueKind.ARRAY:
            return list(self.value)
        return self.value


@dataclass
class TagConfig:
    """Configuration for typing and serializing tags.

    Attributes:
        array_tags: Keys always emitted as a list of every value seen
        string_tags: Keys emitted as their last value, verbatim
        bool_tags: Keys emitted as the boolean coercion of their last value
        output_all: Emit every key found, not only the typed ones
        format: Output format, "raw" or "json"
        pretty_print: Indent JSON output (ignored for raw)

    Raises:
        TagConfigurationError: If format is not a supported value
    """
    array_tags: List[str] = field(default_factory=list)
    string_tags: List[str] = field(default_factory=list)
    bool_tags: List[str] = field(default_factory=list)
    output_all: bool = False
    format: Union[OutputFormat, str] = OutputFormat.RAW
    pretty_print: bool = False

    def __post_init__(self) -> None:
        self.format = self.parse_format(self.format)

        overlapping = sorted(
            (set(self.array_tags) & set(self.string_tags))
            | (set(self.array_tags) & set(self.bool_tags))
            | (set(self.string_tags) & set(self.bool_tags))
        )
        if overlapping:
            logger.warning(
                "Tags declared with more than one type, precedence is array, string, bool: %s",
                ", ".join(overlapping),
            )

    @staticmethod
    def parse_format(value: Union[OutputFormat, str]) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return OutputFormat(normalized)
        except ValueError:
            raise TagConfigurationError(
                f"format '{value}' is invalid",
                option="format",
                allowed_values=OutputFormat.allowed_values(),
            ) from None

    @property
    def target_tags(self) -> List[str]:
        """Union of every typed key, in declaration order."""
        seen = {}
        for key in self.array_tags + self.string_tags + self.bool_tags:
            seen.setdefault(key, None)
        return list(seen)


class DiagnosticKind(Enum):
    """Kinds of non-fatal findings reported while parsing."""
    MALFORMED_MATCH = "malformed_match"
    DUPLICATE_KEY = "duplicate_key"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal, observational finding.

    Attributes:
        kind: What was observed
        message: Human readable description
        details: Structured context (key, values, ...)
    """
    kind: DiagnosticKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


DiagnosticSink = Callable[[Diagnostic], None]


class DiagnosticCollector:
    """Diagnostic sink that keeps every diagnostic it receives."""

    def __init__(self) -> None:
        self.diagnostics: List[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def __len__(self) -> int:
        return len(self.diagnostics)


def logging_sink(target: logging.Logger) -> DiagnosticSink:
    """Build a sink that forwards diagnostics to a logger as warnings."""

    def _sink(diagnostic: Diagnostic) -> None:
        target.warning(
            diagnostic.message,
            extra={"extra_data": {"diagnostic": diagnostic.kind.value, **diagnostic.details}},
        )

    return _sink


def discard_diagnostics(diagnostic: Diagnostic) -> None:
    """Sink used when the caller does not provide one."""
