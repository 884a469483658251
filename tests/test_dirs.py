"""
Tests for agent directory resolution and command discovery.

Run with: pytest tests/test_dirs.py -v
"""

import subprocess
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from acsync.agents.registry import get_agent
from acsync.dirs import (
    DirContext,
    find_agent_commands,
    find_agent_skills,
    find_git_root,
    get_command_name,
    get_file_path_from_command_name,
    resolve_base_dir,
    resolve_command_dir,
    resolve_skill_dir,
)


def make_skill(root: Path, name: str) -> Path:
    skill_dir = root / name
    skill_dir.mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(f"---\nname: {name}\n---\nBody\n")
    return skill_dir


class TestResolveDirs:
    """Test base, command and skill directory resolution."""

    def test_project_mode_uses_git_root(self, tmp_path):
        context = DirContext(git_root=tmp_path)
        assert resolve_command_dir(get_agent("claude"), context) == tmp_path / ".claude" / "commands"
        assert resolve_command_dir(get_agent("copilot"), context) == tmp_path / ".github" / "prompts"
        assert resolve_skill_dir(get_agent("opencode"), context) == tmp_path / ".opencode" / "skills"

    def test_global_mode_uses_home(self, tmp_path):
        with patch("acsync.dirs.Path.home", return_value=tmp_path):
            context = DirContext(git_root=tmp_path / "repo", global_=True)
            assert resolve_base_dir(get_agent("opencode"), context) == tmp_path / ".config" / "opencode"
            assert resolve_command_dir(get_agent("codex"), context) == tmp_path / ".codex" / "prompts"

    def test_no_git_root_falls_back_to_home(self, tmp_path):
        with patch("acsync.dirs.Path.home", return_value=tmp_path):
            assert resolve_base_dir(get_agent("copilot"), DirContext()) == tmp_path / ".copilot"

    def test_custom_dir_wins(self, tmp_path):
        context = DirContext(custom_dirs={"gemini": str(tmp_path / "g")}, git_root=tmp_path, global_=True)
        assert resolve_base_dir(get_agent("gemini"), context) == (tmp_path / "g").resolve()

    def test_custom_dir_expands_user(self, tmp_path):
        with patch("acsync.dirs.Path.home", return_value=tmp_path):
            with patch.dict("os.environ", {"HOME": str(tmp_path)}):
                context = DirContext(custom_dirs={"claude": "~/work/claude"})
                assert resolve_base_dir(get_agent("claude"), context) == (tmp_path / "work" / "claude").resolve()


class TestFindCommands:
    """Test command discovery across project, user and custom dirs."""

    @pytest.fixture
    def context(self, tmp_path):
        commands = tmp_path / ".claude" / "commands"
        (commands / "git").mkdir(parents=True)
        (commands / "review.md").write_text("a")
        (commands / "git" / "commit.md").write_text("b")
        (commands / "notes.txt").write_text("ignored")
        return DirContext(git_root=tmp_path)

    def test_recursive_and_sorted(self, context, tmp_path):
        found = find_agent_commands(get_agent("claude"), None, context)
        base = tmp_path / ".claude" / "commands"
        assert found == [base / "git" / "commit.md", base / "review.md"]

    def test_specific_file_with_or_without_extension(self, context):
        agent = get_agent("claude")
        assert [p.name for p in find_agent_commands(agent, "review", context)] == ["review.md"]
        assert [p.name for p in find_agent_commands(agent, "review.md", context)] == ["review.md"]
        assert find_agent_commands(agent, "missing", context) == []

    def test_missing_directory(self, tmp_path):
        assert find_agent_commands(get_agent("gemini"), None, DirContext(git_root=tmp_path)) == []

    def test_copilot_compound_extension(self, tmp_path):
        prompts = tmp_path / ".github" / "prompts"
        prompts.mkdir(parents=True)
        (prompts / "review.prompt.md").write_text("x")
        (prompts / "README.md").write_text("not a prompt")
        found = find_agent_commands(get_agent("copilot"), None, DirContext(git_root=tmp_path))
        assert [p.name for p in found] == ["review.prompt.md"]


class TestFindSkills:
    """Test skill directory discovery."""

    def test_only_directories_with_skill_file(self, tmp_path):
        skills = tmp_path / ".claude" / "skills"
        make_skill(skills, "b-skill")
        make_skill(skills, "a-skill")
        (skills / "empty").mkdir()
        (skills / "stray.md").write_text("x")

        found = find_agent_skills(get_agent("claude"), None, DirContext(git_root=tmp_path))
        assert [p.name for p in found] == ["a-skill", "b-skill"]

    def test_specific_skill(self, tmp_path):
        skills = tmp_path / ".codex" / "skills"
        make_skill(skills, "deploy")
        context = DirContext(git_root=tmp_path)
        assert [p.name for p in find_agent_skills(get_agent("codex"), "deploy", context)] == ["deploy"]
        assert find_agent_skills(get_agent("codex"), "other", context) == []


class TestCommandNames:
    """Test command names derived from nested paths."""

    def test_nested_name(self, tmp_path):
        assert get_command_name(tmp_path / "git" / "commit.md", tmp_path) == "git:commit"

    def test_compound_extension_stripped_whole(self, tmp_path):
        assert get_command_name(tmp_path / "review.prompt.md", tmp_path) == "review"
        assert get_command_name(tmp_path / "review.prompt.md", tmp_path, ".prompt.md") == "review"

    def test_inverse(self, tmp_path):
        path = get_file_path_from_command_name("git:commit", tmp_path, ".toml")
        assert path == tmp_path / "git" / "commit.toml"
        assert get_command_name(path, tmp_path, ".toml") == "git:commit"


class TestFindGitRoot:
    """Test git repository root lookup."""

    def test_inside_repository(self, tmp_path):
        result = MagicMock(returncode=0, stdout=f"{tmp_path}\n")
        with patch("acsync.dirs.subprocess.run", return_value=result):
            assert find_git_root() == tmp_path

    def test_outside_repository(self):
        result = MagicMock(returncode=128, stdout="")
        with patch("acsync.dirs.subprocess.run", return_value=result):
            assert find_git_root() is None

    def test_git_missing(self):
        with patch("acsync.dirs.subprocess.run", side_effect=FileNotFoundError):
            assert find_git_root() is None

    def test_timeout(self):
        with patch("acsync.dirs.subprocess.run", side_effect=subprocess.TimeoutExpired("git", 5)):
            assert find_git_root() is None
