"""
Tests for command parsing, stringifying and cross-agent conversion.

Run with: pytest tests/test_agents_commands.py -v
"""

import pytest
import toml
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from acsync.agents.base import GeminiCommand, MarkdownCommand, replace_extension
from acsync.agents.registry import AGENT_REGISTRY, AGENT_TYPES, get_agent, spoke_agents
from acsync.body_segments import Arguments, IndividualArgument, ShellCommand
from acsync.semantic_ir import ConverterOptions, ParseError


CLAUDE_COMMAND = """---
description: Review code
allowed-tools: Read
argument-hint: <file>
model: sonnet
---
Review $1 with !`git diff` and $ARGUMENTS
"""

GEMINI_COMMAND = '''description = "Greet"
sandbox = true
prompt = "Hello {{args}}, see @{README.md}"
'''


def convert(source_name, dest_name, source_path, **options):
    source = get_agent(source_name)
    dest = get_agent(dest_name)
    ir = source.command_to_ir(source.parse_command(source_path), ConverterOptions(destination_type=dest_name))
    return dest.command_from_ir(ir, ConverterOptions(**options))


@pytest.fixture
def claude_file(tmp_path):
    path = tmp_path / "review.md"
    path.write_text(CLAUDE_COMMAND)
    return path


@pytest.fixture
def gemini_file(tmp_path):
    path = tmp_path / "greet.toml"
    path.write_text(GEMINI_COMMAND)
    return path


class TestRegistry:
    """Test that every agent name resolves to its definition."""

    def test_every_agent_registered(self):
        assert tuple(AGENT_REGISTRY) == AGENT_TYPES
        for name in AGENT_TYPES:
            assert get_agent(name).name == name

    def test_unknown_agent(self):
        with pytest.raises(KeyError, match="Unknown agent"):
            get_agent("emacs")

    def test_spoke_agents_exclude_hub(self):
        assert "chimera" not in [a.name for a in spoke_agents()]
        assert len(spoke_agents()) == len(AGENT_TYPES) - 1


class TestReplaceExtension:
    """Test target file extensions, including the compound .prompt.md."""

    def test_replaces_simple_extension(self):
        assert replace_extension("cmds/review.md", ".toml") == "cmds/review.toml"

    def test_strips_compound_prompt_extension(self):
        assert replace_extension("prompts/review.prompt.md", ".md") == "prompts/review.md"
        assert replace_extension("prompts/review.prompt.md", ".toml") == "prompts/review.toml"

    def test_adds_compound_extension(self):
        assert replace_extension("cmds/review.md", ".prompt.md") == "cmds/review.prompt.md"

    def test_keeps_matching_extension(self):
        assert replace_extension("cmds/review.md", ".md") == "cmds/review.md"

    def test_path_without_extension(self):
        assert replace_extension("cmds/review", ".md") == "cmds/review.md"

    def test_empty_path(self):
        assert replace_extension("", ".md") == ""


class TestClaudeCommands:
    """Test that Claude commands parse, stringify and convert losslessly."""

    def test_parse(self, claude_file):
        command = get_agent("claude").parse_command(claude_file)
        assert command.frontmatter["description"] == "Review code"
        assert command.content == "Review $1 with !`git diff` and $ARGUMENTS\n"
        assert command.file_path == str(claude_file)

    def test_stringify_round_trip(self, claude_file):
        agent = get_agent("claude")
        assert agent.stringify_command(agent.parse_command(claude_file)) == CLAUDE_COMMAND

    def test_to_ir(self, claude_file):
        agent = get_agent("claude")
        ir = agent.command_to_ir(agent.parse_command(claude_file))
        assert ir.content_type == "command"
        assert ir.semantic.description == "Review code"
        assert ir.extras == {"allowed-tools": "Read", "argument-hint": "<file>", "model": "sonnet"}
        assert ir.meta.source_type == "claude"
        assert IndividualArgument(1) in ir.body
        assert ShellCommand("git diff") in ir.body
        assert Arguments() in ir.body

    def test_invalid_yaml_raises_parse_error(self, tmp_path):
        path = tmp_path / "bad.md"
        path.write_text("---\ndescription: [oops\n---\nBody")
        with pytest.raises(ParseError) as exc_info:
            get_agent("claude").parse_command(path)
        assert exc_info.value.path == str(path)

    def test_missing_file_raises_parse_error(self, tmp_path):
        with pytest.raises(ParseError):
            get_agent("claude").parse_command(tmp_path / "missing.md")

    def test_claude_round_trip_is_identity(self, claude_file):
        command = convert("claude", "claude", claude_file)
        assert get_agent("claude").stringify_command(command) == CLAUDE_COMMAND


class TestGeminiCommands:
    """Test Gemini TOML commands and their conversion to and from Claude."""

    def test_parse(self, gemini_file):
        command = get_agent("gemini").parse_command(gemini_file)
        assert command.prompt == "Hello {{args}}, see @{README.md}"
        assert command.description == "Greet"
        assert command.fields == {"sandbox": True}

    def test_invalid_toml_raises_parse_error(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('prompt = "unterminated\n')
        with pytest.raises(ParseError):
            get_agent("gemini").parse_command(path)

    def test_stringify_orders_description_fields_prompt(self):
        text = get_agent("gemini").stringify_command(
            GeminiCommand(prompt="Do it", description="Desc", fields={"sandbox": True, "skip": None})
        )
        assert list(toml.loads(text)) == ["description", "sandbox", "prompt"]

    def test_stringify_omits_blank_description(self):
        text = get_agent("gemini").stringify_command(GeminiCommand(prompt="Do it", description="  "))
        assert toml.loads(text) == {"prompt": "Do it"}

    def test_control_characters_survive_round_trip(self, tmp_path):
        gemini = get_agent("gemini")
        prompt = "ctrl \x1b esc \x7f del\ttab \"quoted\" back\\slash\r\n"
        path = tmp_path / "ctrl.toml"
        path.write_text(gemini.stringify_command(GeminiCommand(prompt=prompt, fields={"tag": "a\x01b"})))

        command = gemini.parse_command(path)
        assert command.prompt == prompt
        assert command.fields == {"tag": "a\x01b"}
        assert "\\u001b" in path.read_text()

    def test_non_string_description_kept_as_text(self, tmp_path):
        path = tmp_path / "num.toml"
        path.write_text('description = 42\nprompt = "x"\n')
        assert get_agent("gemini").parse_command(path).description == "42"

    def test_claude_to_gemini(self, claude_file):
        command = convert("claude", "gemini", claude_file)
        assert command.prompt == "Review $1 with !{git diff} and {{args}}\n"
        assert command.description == "Review code"
        assert command.fields == {"allowed-tools": "Read", "argument-hint": "<file>", "model": "sonnet"}
        assert command.file_path.endswith("review.toml")

    def test_claude_to_gemini_remove_unsupported(self, claude_file):
        command = convert("claude", "gemini", claude_file, remove_unsupported=True)
        assert command.fields == {}
        assert command.description == "Review code"

    def test_gemini_to_claude(self, gemini_file):
        command = convert("gemini", "claude", gemini_file)
        assert command.frontmatter == {"description": "Greet", "sandbox": True}
        assert command.content == "Hello $ARGUMENTS, see @README.md"
        assert command.file_path.endswith("greet.md")

    def test_claude_gemini_claude_restores_document(self, claude_file, tmp_path):
        gemini = get_agent("gemini")
        out = tmp_path / "review.toml"
        out.write_text(gemini.stringify_command(convert("claude", "gemini", claude_file)))

        back = convert("gemini", "claude", out)
        assert back.frontmatter == {
            "description": "Review code",
            "allowed-tools": "Read",
            "argument-hint": "<file>",
            "model": "sonnet",
        }
        assert back.content == "Review $1 with !`git diff` and $ARGUMENTS\n"


class TestMarkdownFamilyCommands:
    """Test OpenCode, Codex and Copilot command conversion."""

    def test_opencode_drops_tool_fields_only(self, claude_file):
        command = convert("claude", "opencode", claude_file, remove_unsupported=True)
        assert command.frontmatter == {"description": "Review code", "model": "sonnet"}

    def test_opencode_keeps_fields_by_default(self, claude_file):
        command = convert("claude", "opencode", claude_file)
        assert command.frontmatter["allowed-tools"] == "Read"

    def test_codex_strips_content(self, tmp_path):
        path = tmp_path / "p.md"
        path.write_text("---\ndescription: x\n---\n\n  Body $ARGUMENTS  \n\n")
        command = get_agent("codex").parse_command(path)
        assert command.content == "Body $ARGUMENTS"

    def test_codex_remove_unsupported(self, claude_file):
        command = convert("claude", "codex", claude_file, remove_unsupported=True)
        assert command.frontmatter == {"description": "Review code"}
        assert command.content == "Review $1 with !`git diff` and $ARGUMENTS\n"

    def test_copilot_extension(self, claude_file):
        command = convert("claude", "copilot", claude_file, remove_unsupported=True)
        assert command.file_path.endswith("review.prompt.md")
        assert "allowed-tools" not in command.frontmatter
        assert command.frontmatter["model"] == "sonnet"

    def test_copilot_to_claude_extension(self, tmp_path):
        path = tmp_path / "review.prompt.md"
        path.write_text("---\ndescription: x\n---\nBody\n")
        command = convert("copilot", "claude", path)
        assert command.file_path.endswith("review.md")
        assert not command.file_path.endswith(".prompt.md")


class TestCursorCommands:
    """Test that Cursor commands carry a body and no metadata."""

    def test_parse_has_no_frontmatter(self, tmp_path):
        path = tmp_path / "c.md"
        path.write_text("\nDo $ARGUMENTS\n")
        command = get_agent("cursor").parse_command(path)
        assert command.content == "Do $ARGUMENTS"

    def test_claude_to_cursor_drops_metadata(self, claude_file):
        command = convert("claude", "cursor", claude_file)
        assert get_agent("cursor").stringify_command(command) == "Review $1 with !`git diff` and $ARGUMENTS\n"

    def test_cursor_to_claude(self, tmp_path):
        path = tmp_path / "c.md"
        path.write_text("Do $ARGUMENTS")
        command = convert("cursor", "claude", path)
        assert command.frontmatter == {}
        assert get_agent("claude").stringify_command(command) == "Do $ARGUMENTS"


class TestCommandProvenance:
    """Test that _from history survives command conversion."""

    def test_string_from_written_as_list(self, tmp_path):
        path = tmp_path / "p.md"
        path.write_text("---\n_from: owner/repo\n---\nBody\n")
        command = convert("claude", "gemini", path)
        assert command.fields == {"_from": ["owner/repo"]}

    def test_order_preserved_through_gemini(self, tmp_path):
        path = tmp_path / "p.toml"
        path.write_text('_from = ["a/one", "b/two"]\nprompt = "x"\n')
        command = convert("gemini", "claude", path)
        assert command.frontmatter == {"_from": ["a/one", "b/two"]}

    def test_empty_from_omitted(self, tmp_path):
        path = tmp_path / "p.md"
        path.write_text("---\ndescription: d\n_from: []\n---\nBody\n")
        command = convert("claude", "opencode", path)
        assert command.frontmatter == {"description": "d"}


class TestCommandValidation:
    """Test the advisory validation of converted commands."""

    def test_claude_valid(self, claude_file):
        agent = get_agent("claude")
        assert agent.validate_command(agent.parse_command(claude_file))

    def test_claude_bad_model(self):
        command = MarkdownCommand(frontmatter={"model": "gpt"}, content="x", file_path="a.md")
        errors = get_agent("claude").command_errors(command)
        assert [e.field for e in errors] == ["frontmatter.model"]

    def test_gemini_requires_prompt(self):
        assert not get_agent("gemini").validate_command(GeminiCommand(prompt="", file_path="a.toml"))
