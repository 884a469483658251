"""
Chimera: the lossless hub format.

Claude syntax and layout, plus a ``_chimera`` frontmatter block holding the
extras of each agent that was imported, keyed by agent name:

    ---
    description: Review a PR
    _chimera:
      claude:
        allowed-tools: Bash(git:*)
      gemini:
        sandbox: true
    ---

Reading for a destination merges that agent's block over the top-level
extras; writing replaces the block of the source agent and keeps the others.
"""

from typing import Any, Optional

from ..frontmatter import clean_fields
from ..semantic_ir import PROVENANCE_KEY, ConverterOptions, SemanticIR
from .base import MODEL_INVOCATION_KEY, AgentDefinition, AgentDirs, MarkdownCommand, Skill, deep_copy_mapping

CHIMERA_KEY = "_chimera"


class ChimeraAgent(AgentDefinition):
    name = "chimera"
    display_name = "Chimera"
    dirs = AgentDirs(
        command_subdir="commands",
        skill_subdir="skills",
        project_base=".config/acsync",
        user_default=".config/acsync",
    )
    file_extension = ".md"

    def validate_command(self, command: MarkdownCommand) -> bool:
        return isinstance(command.content, str) and isinstance(command.file_path, str)

    # -- Helpers ------------------------------------------------------------

    def _resolve_extras(self, ir: SemanticIR, chimera_section: Any, options: Optional[ConverterOptions]) -> SemanticIR:
        destination = options.destination_type if options else None
        if destination and destination != self.name and isinstance(chimera_section, dict):
            agent_extras = chimera_section.get(destination)
            if isinstance(agent_extras, dict):
                ir.extras = {**ir.extras, **agent_extras}
        return ir

    def _merge_section(self, fields: dict[str, Any], ir: SemanticIR, options: ConverterOptions) -> dict[str, Any]:
        existing = options.existing_target
        existing_fields = getattr(existing, "frontmatter", None) or {}
        section = deep_copy_mapping(existing_fields.get(CHIMERA_KEY))

        source_type = ir.meta.source_type
        if source_type and source_type != self.name:
            extras = clean_fields(ir.extras)
            if extras:
                section[source_type] = extras

        if section:
            fields[CHIMERA_KEY] = section
        return fields

    @staticmethod
    def _without_section(frontmatter: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in (frontmatter or {}).items() if k != CHIMERA_KEY}

    # -- Commands -----------------------------------------------------------

    def command_to_ir(self, source: MarkdownCommand, options: Optional[ConverterOptions] = None) -> SemanticIR:
        stripped = MarkdownCommand(
            frontmatter=self._without_section(source.frontmatter),
            content=source.content,
            file_path=source.file_path,
        )
        ir = super().command_to_ir(stripped, options)
        return self._resolve_extras(ir, (source.frontmatter or {}).get(CHIMERA_KEY), options)

    def command_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> MarkdownCommand:
        options = options or ConverterOptions()
        fields: dict[str, Any] = {}
        if ir.semantic.description is not None:
            fields["description"] = ir.semantic.description
        if ir.semantic.from_:
            fields[PROVENANCE_KEY] = list(ir.semantic.from_)

        command = super().command_from_ir(ir, options)
        command.frontmatter = self._merge_section(fields, ir, options)
        return command

    # -- Skills -------------------------------------------------------------

    def skill_to_ir(self, source: Skill, options: Optional[ConverterOptions] = None) -> SemanticIR:
        stripped = Skill(
            name=source.name,
            content=source.content,
            dir_path=source.dir_path,
            support_files=source.support_files,
            frontmatter=self._without_section(source.frontmatter),
        )
        ir = super().skill_to_ir(stripped, options)
        return self._resolve_extras(ir, source.frontmatter.get(CHIMERA_KEY), options)

    def skill_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Skill:
        options = options or ConverterOptions()
        skill = super().skill_from_ir(ir, options)

        fields = {k: v for k, v in skill.frontmatter.items()
                  if k in ("name", "description", MODEL_INVOCATION_KEY, PROVENANCE_KEY)}
        skill.frontmatter = self._merge_section(fields, ir, options)
        return skill
