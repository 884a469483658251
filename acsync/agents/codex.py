"""
Codex CLI: Markdown prompts in prompts/ and skills with an optional
agents/openai.yaml that carries invocation policy, UI metadata and tool
dependencies.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ..frontmatter import FrontmatterError, dump_yaml
from ..placeholder_syntax import CODEX_UNSUPPORTED
from ..semantic_ir import ConverterOptions, SemanticIR
from ..skill_files import CODEX_CONFIG_DIR, CODEX_CONFIG_FILE, SKILL_FILE_NAME, get_skill_name
from .base import CLAUDE_SKILL_FIELDS, AgentDefinition, AgentDirs, CodexSkill, Skill

logger = logging.getLogger(__name__)

OPENAI_CONFIG_PATH = f"{CODEX_CONFIG_DIR}/{CODEX_CONFIG_FILE}"

# openai.yaml top-level keys routed through extras
OPENAI_YAML_KEYS = ("interface", "dependencies")


class CodexAgent(AgentDefinition):
    name = "codex"
    display_name = "Codex CLI"
    dirs = AgentDirs(
        command_subdir="prompts",
        skill_subdir="skills",
        project_base=".codex",
        user_default=".codex",
    )
    file_extension = ".md"
    unsupported = CODEX_UNSUPPORTED

    foreign_command_fields = ("allowed-tools", "argument-hint", "model")
    strip_command_content = True

    foreign_skill_fields = CLAUDE_SKILL_FIELDS
    prefixes_claude_fields = True

    # -- I/O ----------------------------------------------------------------

    def _skill_exclusions(self) -> tuple[str, ...]:
        return (SKILL_FILE_NAME, OPENAI_CONFIG_PATH)

    def _read_openai_config(self, dir_path: Path) -> Optional[dict[str, Any]]:
        config_path = Path(dir_path) / CODEX_CONFIG_DIR / CODEX_CONFIG_FILE
        if not config_path.is_file():
            return None
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable %s: %s", config_path, e)
            return None
        return data if isinstance(data, dict) else None

    def parse_skill(self, dir_path: Path) -> CodexSkill:
        try:
            data, content, support_files = self._read_skill(dir_path)
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            raise self._parse_error("skill", dir_path, e) from e

        return CodexSkill(
            name=data.get("name") or get_skill_name(dir_path),
            content=content,
            dir_path=str(dir_path),
            support_files=support_files,
            frontmatter=data,
            openai_config=self._read_openai_config(dir_path),
        )

    def write_skill_to_directory(self, skill: Skill, source_dir: Optional[Path], target_dir: Path) -> list[Path]:
        written = super().write_skill_to_directory(skill, source_dir, target_dir)

        openai_config = getattr(skill, "openai_config", None)
        config_dir = Path(target_dir) / CODEX_CONFIG_DIR
        config_path = config_dir / CODEX_CONFIG_FILE
        if openai_config:
            config_dir.mkdir(parents=True, exist_ok=True)
            config_path.write_text(dump_yaml(openai_config), encoding="utf-8")
            written.append(config_path)
        elif config_path.is_file():
            # left over from an earlier write
            config_path.unlink()
            if not any(config_dir.iterdir()):
                config_dir.rmdir()

        return written

    # -- Conversion ---------------------------------------------------------

    def skill_to_ir(self, source: Skill, options: Optional[ConverterOptions] = None) -> SemanticIR:
        ir = super().skill_to_ir(source, options)

        openai_config = getattr(source, "openai_config", None) or {}
        for key, value in openai_config.items():
            if key != "policy":
                ir.extras[key] = value

        policy = openai_config.get("policy")
        if isinstance(policy, dict) and isinstance(policy.get("allow_implicit_invocation"), bool):
            ir.semantic.model_invocation_enabled = policy["allow_implicit_invocation"]

        return ir

    def skill_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> CodexSkill:
        options = options or ConverterOptions()

        openai_config: dict[str, Any] = {}
        if ir.semantic.model_invocation_enabled is not None:
            openai_config["policy"] = {"allow_implicit_invocation": ir.semantic.model_invocation_enabled}
        for key in OPENAI_YAML_KEYS:
            if ir.extras.get(key) is not None:
                openai_config[key] = ir.extras[key]

        routed = SemanticIR(
            content_type=ir.content_type,
            body=ir.body,
            semantic=ir.semantic,
            extras={k: v for k, v in ir.extras.items() if k not in OPENAI_YAML_KEYS},
            meta=ir.meta,
        )
        skill = super().skill_from_ir(routed, options)

        return CodexSkill(
            name=skill.name,
            content=skill.content,
            dir_path=skill.dir_path,
            support_files=skill.support_files,
            frontmatter=skill.frontmatter,
            openai_config=openai_config or None,
        )
