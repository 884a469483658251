"""
Cursor: commands are plain Markdown without frontmatter, so description and
provenance cannot be stored. Skills follow the agentskills.io layout.
"""

from pathlib import Path
from typing import Optional

from ..placeholder_syntax import CURSOR_UNSUPPORTED
from ..semantic_ir import ConverterOptions, SemanticIR, SemanticMeta, SemanticProperties
from .base import AgentDefinition, AgentDirs, CursorCommand, replace_extension


class CursorAgent(AgentDefinition):
    name = "cursor"
    display_name = "Cursor"
    dirs = AgentDirs(
        command_subdir="commands",
        skill_subdir="skills",
        project_base=".cursor",
        user_default=".cursor",
    )
    file_extension = ".md"
    unsupported = CURSOR_UNSUPPORTED

    foreign_skill_fields = ("context", "hooks", "model", "agent", "argument-hint")

    def parse_command(self, file_path: Path) -> CursorCommand:
        try:
            text = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise self._parse_error("command file", file_path, e) from e
        return CursorCommand(content=text.strip(), file_path=str(file_path))

    def stringify_command(self, command: CursorCommand) -> str:
        return command.content

    def command_to_ir(self, source: CursorCommand, options: Optional[ConverterOptions] = None) -> SemanticIR:
        return SemanticIR(
            content_type="command",
            body=self.parse_body(source.content),
            semantic=SemanticProperties(),
            extras={},
            meta=SemanticMeta(source_path=source.file_path, source_type=self.name),
        )

    def command_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> CursorCommand:
        return CursorCommand(
            content=self.serialize_body(ir.body),
            file_path=replace_extension(ir.meta.source_path, self.file_extension),
        )
