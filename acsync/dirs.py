"""
Directory resolution for agent command and skill folders.

Project mode places every agent under the repository root
(``<root>/.claude/commands``); global mode under the home directory
(``~/.config/opencode/commands``). A custom directory given for an agent
replaces its base directory in both modes.
"""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .agents.base import PROMPT_EXTENSION, AgentDefinition
from .skill_files import is_skill_directory


@dataclass
class DirContext:
    custom_dirs: dict[str, str] = field(default_factory=dict)
    git_root: Optional[Path] = None
    global_: bool = False


def find_git_root(cwd: Optional[Path] = None) -> Optional[Path]:
    """Return the repository top-level directory, or None outside a git repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True, text=True, timeout=5, cwd=cwd
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return None
    if result.returncode != 0 or not result.stdout.strip():
        return None
    return Path(result.stdout.strip())


def expand_path(path: str) -> Path:
    return Path(path).expanduser().resolve()


def resolve_base_dir(agent: AgentDefinition, context: DirContext) -> Path:
    custom = context.custom_dirs.get(agent.name)
    if custom:
        return expand_path(custom)
    if context.global_ or context.git_root is None:
        return Path.home() / agent.dirs.user_default
    return Path(context.git_root) / agent.dirs.project_base


def resolve_command_dir(agent: AgentDefinition, context: DirContext) -> Path:
    return resolve_base_dir(agent, context) / agent.dirs.command_subdir


def resolve_skill_dir(agent: AgentDefinition, context: DirContext) -> Path:
    return resolve_base_dir(agent, context) / agent.dirs.skill_subdir


def strip_extension(file_name: str, extension: str) -> str:
    if file_name.endswith(extension):
        return file_name[:-len(extension)]
    return file_name


def find_agent_commands(
    agent: AgentDefinition,
    specific_file: Optional[str] = None,
    context: Optional[DirContext] = None,
) -> list[Path]:
    command_dir = resolve_command_dir(agent, context or DirContext())
    if not command_dir.is_dir():
        return []

    if specific_file:
        name = strip_extension(specific_file, agent.file_extension)
        candidate = command_dir / f"{name}{agent.file_extension}"
        return [candidate] if candidate.is_file() else []

    return sorted(
        path for path in command_dir.rglob(f"*{agent.file_extension}")
        if path.is_file()
    )


def find_agent_skills(
    agent: AgentDefinition,
    specific_skill: Optional[str] = None,
    context: Optional[DirContext] = None,
) -> list[Path]:
    skill_dir = resolve_skill_dir(agent, context or DirContext())
    if not skill_dir.is_dir():
        return []

    if specific_skill:
        candidate = skill_dir / specific_skill
        return [candidate] if is_skill_directory(candidate) else []

    return sorted(path for path in skill_dir.iterdir() if path.is_dir() and is_skill_directory(path))


def get_command_name(file_path: Path, base_dir: Path, extension: Optional[str] = None) -> str:
    """``<base>/git/commit.md`` -> ``git:commit``."""
    relative = Path(file_path).relative_to(base_dir).as_posix()
    if extension and relative.endswith(extension):
        relative = relative[:-len(extension)]
    elif relative.endswith(PROMPT_EXTENSION):
        relative = relative[:-len(PROMPT_EXTENSION)]
    else:
        stem, dot, suffix = relative.rpartition(".")
        if dot and "/" not in suffix:
            relative = stem
    return relative.replace("/", ":")


def get_file_path_from_command_name(command_name: str, base_dir: Path, extension: str) -> Path:
    return Path(base_dir) / f"{command_name.replace(':', '/')}{extension}"
