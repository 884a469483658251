"""
Body Segment Engine

Tokenizes a prompt body into an ordered list of literal text runs and typed
placeholders, and renders such a list back to text. Pure functions, no I/O.

A body segment is either a plain ``str`` or one of the placeholder
dataclasses below. Agent-specific spellings live in placeholder_syntax.py.
"""

import logging
import re
from dataclasses import dataclass, fields
from typing import Callable, ClassVar, Iterable, Optional, Union

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Placeholder variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Arguments:
    """All-arguments marker ($ARGUMENTS, {{args}})."""

    type: ClassVar[str] = "arguments"


@dataclass(frozen=True)
class IndividualArgument:
    """Positional argument reference, index 1-9."""

    index: int
    type: ClassVar[str] = "individual-argument"

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int) or not 1 <= self.index <= 9:
            raise ValueError(f"Positional argument index must be in 1..9, got {self.index!r}")


@dataclass(frozen=True)
class ShellCommand:
    command: str
    type: ClassVar[str] = "shell-command"


@dataclass(frozen=True)
class FileReference:
    path: str
    type: ClassVar[str] = "file-reference"


ContentPlaceholder = Union[Arguments, IndividualArgument, ShellCommand, FileReference]
BodySegment = Union[str, ContentPlaceholder]

PLACEHOLDER_CLASSES = (Arguments, IndividualArgument, ShellCommand, FileReference)
PLACEHOLDER_TYPES = tuple(cls.type for cls in PLACEHOLDER_CLASSES)


def _serializer_field(placeholder_type: str) -> str:
    return placeholder_type.replace("-", "_")


# ---------------------------------------------------------------------------
# Pattern and serializer tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PatternDef:
    """A compiled regex and the handler that builds a placeholder from a match."""

    regex: re.Pattern
    handler: Callable[[re.Match], ContentPlaceholder]


@dataclass(frozen=True)
class PlaceholderSerializers:
    """One renderer per placeholder variant. Every field is required."""

    arguments: Callable[[Arguments], str]
    individual_argument: Callable[[IndividualArgument], str]
    shell_command: Callable[[ShellCommand], str]
    file_reference: Callable[[FileReference], str]

    def render(self, placeholder: ContentPlaceholder) -> str:
        renderer = getattr(self, _serializer_field(placeholder.type))
        return renderer(placeholder)


# A new placeholder variant without a serializer field must fail at import.
_serializer_fields = {f.name for f in fields(PlaceholderSerializers)}
_variant_fields = {_serializer_field(t) for t in PLACEHOLDER_TYPES}
if _serializer_fields != _variant_fields:
    raise TypeError(
        f"PlaceholderSerializers out of sync with placeholder variants: "
        f"missing={sorted(_variant_fields - _serializer_fields)} "
        f"extra={sorted(_serializer_fields - _variant_fields)}"
    )


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Match:
    start: int
    end: int
    placeholder: ContentPlaceholder


def _find_all_matches(body: str, patterns: Iterable[PatternDef]) -> list[_Match]:
    matches = []
    for pattern in patterns:
        for m in pattern.regex.finditer(body):
            matches.append(_Match(m.start(), m.end(), pattern.handler(m)))
    return matches


def _remove_overlaps(matches: list[_Match]) -> list[_Match]:
    # sorted() is stable: equal starts keep discovery order
    ordered = sorted(matches, key=lambda m: m.start)
    accepted = []
    last_end = -1
    for match in ordered:
        if match.start >= last_end:
            accepted.append(match)
            last_end = match.end
    return accepted


def _build_segments(body: str, matches: list[_Match]) -> list[BodySegment]:
    segments: list[BodySegment] = []
    last_index = 0
    for match in matches:
        if match.start > last_index:
            segments.append(body[last_index:match.start])
        segments.append(match.placeholder)
        last_index = match.end
    if last_index < len(body):
        segments.append(body[last_index:])
    return segments


def parse_body(body: str, patterns: Iterable[PatternDef]) -> list[BodySegment]:
    """Split ``body`` into literal runs and placeholders.

    Each pattern is scanned over the whole body independently. All matches
    are pooled, ordered by start offset and selected greedily left to right;
    a match overlapping an already accepted one is dropped. At equal start
    offsets the match discovered first (earlier pattern) wins, regardless of
    length. Empty literal runs are never emitted.
    """
    if not body:
        return []
    matches = _find_all_matches(body, patterns)
    return _build_segments(body, _remove_overlaps(matches))


# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------

def serialize_body(
    segments: Iterable[BodySegment],
    serializers: PlaceholderSerializers,
    unsupported: Optional[frozenset[str]] = None,
) -> str:
    """Render segments to text.

    Placeholders whose type is in ``unsupported`` are still rendered with the
    given serializer and reported through a DEBUG log record.
    """
    parts = []
    for segment in segments:
        if isinstance(segment, str):
            parts.append(segment)
            continue
        if unsupported and segment.type in unsupported:
            logger.debug(
                "Placeholder '%s' is not natively supported by target format (serialized as best-effort)",
                segment.type,
            )
        parts.append(serializers.render(segment))
    return "".join(parts)


def body_placeholders(segments: Iterable[BodySegment]) -> list[ContentPlaceholder]:
    """Return only the placeholder segments, in order."""
    return [s for s in segments if not isinstance(s, str)]
