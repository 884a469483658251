"""
Claude Code: Markdown commands in commands/, skills in skills/, both with
YAML frontmatter. Claude's vocabulary is the reference the other agents
prefix or drop.
"""

from ..validation import validate_claude_command
from .base import AgentDefinition, AgentDirs


class ClaudeAgent(AgentDefinition):
    name = "claude"
    display_name = "Claude Code"
    dirs = AgentDirs(
        command_subdir="commands",
        skill_subdir="skills",
        project_base=".claude",
        user_default=".claude",
    )
    file_extension = ".md"

    # Gemini's body key never becomes frontmatter
    skipped_command_extras = ("prompt",)

    def command_errors(self, command):
        return validate_claude_command(command)
