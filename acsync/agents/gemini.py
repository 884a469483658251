"""
Gemini CLI: TOML commands ({{args}}, !{cmd}, @{path}) and Markdown skills.

A command file is a flat TOML table: ``prompt`` holds the body,
``description`` the summary, every other key is carried through.
"""

from pathlib import Path
from typing import Any, Optional

import toml

from ..frontmatter import clean_fields
from ..placeholder_syntax import GEMINI_PATTERNS, GEMINI_SERIALIZERS, GEMINI_UNSUPPORTED
from ..semantic_ir import ConverterOptions, ParseError, SemanticIR, SemanticMeta
from ..validation import validate_gemini_command
from .base import CLAUDE_SKILL_FIELDS, AgentDefinition, AgentDirs, GeminiCommand, replace_extension

# Claude command fields Gemini has no use for
CLAUDE_COMMAND_FIELDS = ("allowed-tools", "argument-hint", "model")

_TOML_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


def _dump_toml_str(value: str) -> str:
    """Render a TOML basic string, escaping control characters as \\uXXXX."""
    out = []
    for ch in value:
        if ch in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


class _CommandEncoder(toml.TomlEncoder):
    # toml's own string dumper mangles \x1b-style escapes
    def __init__(self, _dict=dict, preserve=False):
        super().__init__(_dict, preserve)
        self.dump_funcs[str] = _dump_toml_str


class GeminiAgent(AgentDefinition):
    name = "gemini"
    display_name = "Gemini CLI"
    dirs = AgentDirs(
        command_subdir="commands",
        skill_subdir="skills",
        project_base=".gemini",
        user_default=".gemini",
    )
    file_extension = ".toml"

    patterns = GEMINI_PATTERNS
    serializers = GEMINI_SERIALIZERS
    unsupported = GEMINI_UNSUPPORTED

    foreign_command_fields = CLAUDE_COMMAND_FIELDS
    foreign_skill_fields = CLAUDE_SKILL_FIELDS
    prefixes_claude_fields = True

    def parse_command(self, file_path: Path) -> GeminiCommand:
        try:
            data = toml.loads(Path(file_path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, toml.TomlDecodeError) as e:
            raise self._parse_error("command file", file_path, e) from e

        prompt = data.pop("prompt", "")
        description = data.pop("description", None)
        return GeminiCommand(
            prompt=prompt if isinstance(prompt, str) else "",
            file_path=str(file_path),
            description=str(description) if description is not None else None,
            fields=data,
        )

    def stringify_command(self, command: GeminiCommand) -> str:
        data: dict[str, Any] = {}
        if command.description is not None and command.description.strip():
            data["description"] = command.description
        for key, value in clean_fields(command.fields).items():
            if key not in ("description", "prompt"):
                data[key] = value
        data["prompt"] = command.prompt

        try:
            return toml.dumps(data, encoder=_CommandEncoder())
        except (TypeError, ValueError) as e:
            raise ParseError(f"Failed to stringify Gemini command: {e}", command.file_path, e) from e

    def command_errors(self, command: GeminiCommand):
        return validate_gemini_command(command)

    def command_to_ir(self, source: GeminiCommand, options: Optional[ConverterOptions] = None) -> SemanticIR:
        fields = dict(source.fields)
        if source.description is not None:
            fields["description"] = source.description
        semantic, extras = self._split_command_fields(fields)
        return SemanticIR(
            content_type="command",
            body=self.parse_body(source.prompt),
            semantic=semantic,
            extras=extras,
            meta=SemanticMeta(source_path=source.file_path, source_type=self.name),
        )

    def command_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> GeminiCommand:
        fields = self._command_fields_from_ir(ir, options or ConverterOptions())
        fields.pop("prompt", None)
        return GeminiCommand(
            prompt=self.serialize_body(ir.body),
            file_path=replace_extension(ir.meta.source_path, self.file_extension),
            description=fields.pop("description", None),
            fields=fields,
        )
