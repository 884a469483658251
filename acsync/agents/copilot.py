"""
GitHub Copilot: .prompt.md files under prompts/. Copilot spells the skill
flag "user-invokable"; the IR uses Claude's "user-invocable".
"""

from ..placeholder_syntax import COPILOT_UNSUPPORTED
from .base import AgentDefinition, AgentDirs


class CopilotAgent(AgentDefinition):
    name = "copilot"
    display_name = "GitHub Copilot"
    dirs = AgentDirs(
        command_subdir="prompts",
        skill_subdir="skills",
        project_base=".github",
        user_default=".copilot",
    )
    file_extension = ".prompt.md"
    unsupported = COPILOT_UNSUPPORTED

    foreign_command_fields = ("allowed-tools",)
    skipped_command_extras = ("prompt",)

    foreign_skill_fields = ("context", "hooks", "allowed-tools", "user-invocable")
    skill_field_aliases = {"user-invokable": "user-invocable"}
