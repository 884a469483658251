"""
Semantic Intermediate Representation

Only properties shared by two or more agents are semantic. Agent-specific
fields travel in ``extras``. ``meta`` carries conversion context and is never
written into a target document.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .body_segments import BodySegment

CONTENT_TYPES = ("command", "skill")
SUPPORT_FILE_TYPES = ("text", "binary", "config")

# Frontmatter key holding origin repository history
PROVENANCE_KEY = "_from"


class ParseError(Exception):
    """A source document could not be read or decoded."""

    def __init__(self, message: str, path: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class SyncError(Exception):
    """A sync run could not start or could not acquire its lock."""


@dataclass
class SupportFile:
    relative_path: str
    type: str = "text"
    content: Optional[str] = None

    def __post_init__(self):
        if self.type not in SUPPORT_FILE_TYPES:
            raise ValueError(f"Unknown support file type {self.type!r}")


@dataclass
class SemanticProperties:
    description: Optional[str] = None
    # skills only
    name: Optional[str] = None
    # Claude: not disable-model-invocation, Codex: policy.allow_implicit_invocation
    model_invocation_enabled: Optional[bool] = None
    from_: Optional[list[str]] = None


@dataclass
class SemanticMeta:
    source_path: str = ""
    source_type: Optional[str] = None
    support_files: Optional[list[SupportFile]] = None
    skill_name: Optional[str] = None


@dataclass
class SemanticIR:
    content_type: str
    body: list[BodySegment]
    semantic: SemanticProperties = field(default_factory=SemanticProperties)
    extras: dict[str, Any] = field(default_factory=dict)
    meta: SemanticMeta = field(default_factory=SemanticMeta)

    def __post_init__(self):
        if self.content_type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type {self.content_type!r}")


@dataclass
class ConverterOptions:
    remove_unsupported: bool = False
    # Only consulted by the Chimera hub format
    destination_type: Optional[str] = None
    existing_target: Any = None


def normalize_provenance(value: Any) -> Optional[list[str]]:
    """Coerce a ``_from`` value to a list of strings, or None when absent/empty."""
    if isinstance(value, str):
        return [value] if value else None
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value if v is not None]
        return items or None
    return None
