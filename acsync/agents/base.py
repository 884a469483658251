"""
Agent definitions: the capability record every agent exposes, the native
document shapes, and the Markdown/YAML behavior most agents share.

Concrete agents override class attributes (dirs, extension, placeholder
syntax, field lists) and only the conversions that differ.
"""

import copy
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..body_segments import BodySegment, PlaceholderSerializers, parse_body, serialize_body
from ..field_prefix import (
    CLAUDE_MODEL_INVOCATION_KEY,
    is_prefixed_key,
    prefix_claude_key,
    unprefix_claude_key,
)
from ..frontmatter import FrontmatterError, join_frontmatter, split_frontmatter
from ..placeholder_syntax import CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS, NO_UNSUPPORTED
from ..semantic_ir import (
    PROVENANCE_KEY,
    ConverterOptions,
    ParseError,
    SemanticIR,
    SemanticMeta,
    SemanticProperties,
    SupportFile,
    normalize_provenance,
)
from ..skill_files import (
    DEFAULT_SKILL_NAME,
    SKILL_FILE_NAME,
    collect_support_files,
    get_skill_name,
    is_skill_directory,
    load_support_file_contents,
    write_skill_directory,
)
from ..validation import validate_markdown_command, validate_skill

PROMPT_EXTENSION = ".prompt.md"
MODEL_INVOCATION_KEY = "disable-model-invocation"

# Claude skill fields that only Claude understands
CLAUDE_SKILL_FIELDS = ("user-invocable", "allowed-tools", "argument-hint", "model", "context", "agent", "hooks")


# ---------------------------------------------------------------------------
# Native document shapes
# ---------------------------------------------------------------------------

@dataclass
class MarkdownCommand:
    """Markdown command with optional YAML frontmatter (Claude, Codex, OpenCode, Copilot, Chimera)."""

    frontmatter: dict[str, Any]
    content: str
    file_path: str = ""


@dataclass
class GeminiCommand:
    """Flattened TOML command. ``fields`` holds every key besides description and prompt."""

    prompt: str
    file_path: str = ""
    description: Optional[str] = None
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class CursorCommand:
    """Plain Markdown, no frontmatter."""

    content: str
    file_path: str = ""


@dataclass
class Skill:
    name: str
    content: str
    dir_path: str = ""
    support_files: list[SupportFile] = field(default_factory=list)
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def description(self) -> Optional[str]:
        return self.frontmatter.get("description")


@dataclass
class CodexSkill(Skill):
    # agents/openai.yaml
    openai_config: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class AgentDirs:
    command_subdir: str
    skill_subdir: str
    # project-level base, relative to the repository root
    project_base: str
    # user-level base, relative to the home directory
    user_default: str


def replace_extension(file_path: str, extension: str) -> str:
    """Force ``file_path`` to end with ``extension``, replacing (not appending to) any existing one."""
    if not file_path:
        return file_path
    if file_path.endswith(PROMPT_EXTENSION):
        if extension == PROMPT_EXTENSION:
            return file_path
        return file_path[:-len(PROMPT_EXTENSION)] + extension
    if file_path.endswith(extension):
        return file_path
    stem, count = re.subn(r"\.[^./\\]+$", "", file_path)
    return (stem if count else file_path) + extension


# ---------------------------------------------------------------------------
# Base agent
# ---------------------------------------------------------------------------

class AgentDefinition:
    """Capability record plus parse/stringify/convert operations for one agent."""

    name: str = ""
    display_name: str = ""
    dirs: AgentDirs
    file_extension: str = ".md"

    patterns = CLAUDE_SYNTAX_PATTERNS
    serializers: PlaceholderSerializers = CLAUDE_SYNTAX_SERIALIZERS
    unsupported: frozenset[str] = NO_UNSUPPORTED

    # Command extras this agent does not understand, dropped by remove_unsupported
    foreign_command_fields: tuple[str, ...] = ()
    # Extras keys never written into this agent's command frontmatter
    skipped_command_extras: tuple[str, ...] = ()
    strip_command_content = False

    # Skill extras this agent does not understand
    foreign_skill_fields: tuple[str, ...] = ()
    # True: foreign skill fields are kept under the reversible _claude_ prefix
    prefixes_claude_fields = False
    # Native skill key -> IR extras key (inverted on write)
    skill_field_aliases: dict[str, str] = {}

    # -- Body ---------------------------------------------------------------

    def parse_body(self, body: str) -> list[BodySegment]:
        return parse_body(body, self.patterns)

    def serialize_body(self, segments: list[BodySegment]) -> str:
        return serialize_body(segments, self.serializers, self.unsupported)

    # -- Commands: I/O ------------------------------------------------------

    def _parse_error(self, kind: str, path: Any, error: BaseException) -> ParseError:
        return ParseError(f"Failed to parse {self.display_name} {kind}: {error}", str(path), error)

    def parse_command(self, file_path: Path) -> Any:
        try:
            text = Path(file_path).read_text(encoding="utf-8")
            data, content = split_frontmatter(text)
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            raise self._parse_error("command file", file_path, e) from e

        if self.strip_command_content:
            content = content.strip()
        return MarkdownCommand(frontmatter=data, content=content, file_path=str(file_path))

    def stringify_command(self, command: Any) -> str:
        return join_frontmatter(command.frontmatter, command.content)

    def command_errors(self, command: Any) -> list:
        return validate_markdown_command(command)

    def validate_command(self, command: Any) -> bool:
        return not self.command_errors(command)

    # -- Commands: conversion -----------------------------------------------

    def _split_command_fields(self, fields: dict[str, Any]) -> tuple[SemanticProperties, dict[str, Any]]:
        semantic = SemanticProperties()
        extras = {}
        for key, value in fields.items():
            if key == "description":
                semantic.description = None if value is None else str(value)
            elif key == PROVENANCE_KEY:
                semantic.from_ = normalize_provenance(value)
            else:
                extras[key] = value
        return semantic, extras

    def _command_fields_from_ir(self, ir: SemanticIR, options: ConverterOptions) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if ir.semantic.description is not None:
            fields["description"] = ir.semantic.description

        for key, value in ir.extras.items():
            if key in fields or key in self.skipped_command_extras:
                continue
            if options.remove_unsupported and key in self.foreign_command_fields:
                continue
            fields[key] = value

        if ir.semantic.from_:
            fields[PROVENANCE_KEY] = list(ir.semantic.from_)
        return fields

    def command_to_ir(self, source: Any, options: Optional[ConverterOptions] = None) -> SemanticIR:
        semantic, extras = self._split_command_fields(source.frontmatter or {})
        return SemanticIR(
            content_type="command",
            body=self.parse_body(source.content),
            semantic=semantic,
            extras=extras,
            meta=SemanticMeta(source_path=source.file_path, source_type=self.name),
        )

    def command_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Any:
        options = options or ConverterOptions()
        return MarkdownCommand(
            frontmatter=self._command_fields_from_ir(ir, options),
            content=self.serialize_body(ir.body),
            file_path=replace_extension(ir.meta.source_path, self.file_extension),
        )

    # -- Skills: I/O --------------------------------------------------------

    def _skill_exclusions(self) -> tuple[str, ...]:
        return (SKILL_FILE_NAME,)

    def _read_skill(self, dir_path: Path) -> tuple[dict[str, Any], str, list[SupportFile]]:
        dir_path = Path(dir_path)
        if not is_skill_directory(dir_path):
            raise FileNotFoundError(f"Not a valid skill directory: missing {SKILL_FILE_NAME}")

        text = (dir_path / SKILL_FILE_NAME).read_text(encoding="utf-8")
        data, content = split_frontmatter(text)

        support_files = collect_support_files(dir_path, self._skill_exclusions())
        load_support_file_contents(dir_path, support_files)
        return data, content, support_files

    def parse_skill(self, dir_path: Path) -> Skill:
        try:
            data, content, support_files = self._read_skill(dir_path)
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            raise self._parse_error("skill", dir_path, e) from e

        return Skill(
            name=data.get("name") or get_skill_name(dir_path),
            content=content,
            dir_path=str(dir_path),
            support_files=support_files,
            frontmatter=data,
        )

    def stringify_skill(self, skill: Skill) -> str:
        return join_frontmatter(skill.frontmatter, skill.content)

    def validate_skill(self, skill: Skill) -> bool:
        return not validate_skill(skill)

    def write_skill_to_directory(self, skill: Skill, source_dir: Optional[Path], target_dir: Path) -> list[Path]:
        return write_skill_directory(self.stringify_skill(skill), skill.support_files, source_dir, target_dir)

    # -- Skills: conversion -------------------------------------------------

    def _model_invocation_keys(self) -> tuple[str, ...]:
        if self.prefixes_claude_fields:
            return (MODEL_INVOCATION_KEY, CLAUDE_MODEL_INVOCATION_KEY)
        return (MODEL_INVOCATION_KEY,)

    def _split_skill_fields(self, frontmatter: dict[str, Any]) -> tuple[SemanticProperties, dict[str, Any]]:
        semantic = SemanticProperties(name=frontmatter.get("name"), description=frontmatter.get("description"))
        extras = {}
        invocation_keys = self._model_invocation_keys()

        for key, value in frontmatter.items():
            if key in ("name", "description"):
                continue
            if key in invocation_keys:
                semantic.model_invocation_enabled = (not value) if isinstance(value, bool) else None
            elif key == PROVENANCE_KEY:
                semantic.from_ = normalize_provenance(value)
            elif self.prefixes_claude_fields and is_prefixed_key(key):
                extras[unprefix_claude_key(key)] = value
            else:
                extras[self.skill_field_aliases.get(key, key)] = value

        return semantic, extras

    def _skill_fields_from_ir(self, ir: SemanticIR, options: ConverterOptions) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if ir.semantic.name is not None:
            fields["name"] = ir.semantic.name
        if ir.semantic.description is not None:
            fields["description"] = ir.semantic.description

        enabled = ir.semantic.model_invocation_enabled
        if enabled is not None:
            if not self.prefixes_claude_fields:
                fields[MODEL_INVOCATION_KEY] = not enabled
            elif not options.remove_unsupported:
                fields[CLAUDE_MODEL_INVOCATION_KEY] = not enabled

        native_names = {v: k for k, v in self.skill_field_aliases.items()}
        for key, value in ir.extras.items():
            if key in self.foreign_skill_fields:
                if options.remove_unsupported:
                    continue
                if self.prefixes_claude_fields:
                    key = prefix_claude_key(key)
            key = native_names.get(key, key)
            if key not in fields:
                fields[key] = value

        if ir.semantic.from_:
            fields[PROVENANCE_KEY] = list(ir.semantic.from_)
        return fields

    def _skill_meta(self, source: Skill) -> SemanticMeta:
        return SemanticMeta(
            source_path=source.dir_path,
            source_type=self.name,
            support_files=source.support_files,
            skill_name=source.name,
        )

    def skill_to_ir(self, source: Skill, options: Optional[ConverterOptions] = None) -> SemanticIR:
        semantic, extras = self._split_skill_fields(source.frontmatter)
        return SemanticIR(
            content_type="skill",
            body=self.parse_body(source.content),
            semantic=semantic,
            extras=extras,
            meta=self._skill_meta(source),
        )

    def skill_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Skill:
        options = options or ConverterOptions()
        return Skill(
            name=ir.meta.skill_name or DEFAULT_SKILL_NAME,
            content=self.serialize_body(ir.body),
            dir_path=ir.meta.source_path or "",
            support_files=list(ir.meta.support_files or []),
            frontmatter=self._skill_fields_from_ir(ir, options),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def deep_copy_mapping(value: Any) -> dict[str, Any]:
    """Deep copy ``value`` when it is a mapping, otherwise return an empty dict."""
    if isinstance(value, dict):
        return copy.deepcopy(value)
    return {}
