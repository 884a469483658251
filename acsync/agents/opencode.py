"""
OpenCode: Claude placeholder syntax. Supports model and agent on commands,
but not Claude's tool restrictions. Claude-only skill fields are kept under
the _claude_ prefix.
"""

from .base import AgentDefinition, AgentDirs


class OpenCodeAgent(AgentDefinition):
    name = "opencode"
    display_name = "OpenCode"
    dirs = AgentDirs(
        command_subdir="commands",
        skill_subdir="skills",
        project_base=".opencode",
        user_default=".config/opencode",
    )
    file_extension = ".md"

    foreign_command_fields = ("allowed-tools", "argument-hint")
    strip_command_content = True

    foreign_skill_fields = ("user-invocable", "allowed-tools", "argument-hint", "context", "hooks")
    prefixes_claude_fields = True
