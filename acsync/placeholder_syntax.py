"""
Placeholder spellings per agent family.

Claude, Codex, OpenCode, Copilot, Cursor and Chimera share the Claude syntax
($ARGUMENTS, $1-$9, !`cmd`, @path). Gemini uses {{args}}, !{cmd}, @{path}
and passes $N through unchanged.
"""

import re

from .body_segments import (
    PLACEHOLDER_TYPES,
    Arguments,
    FileReference,
    IndividualArgument,
    PatternDef,
    PlaceholderSerializers,
    ShellCommand,
)


def _individual_argument(m: re.Match) -> IndividualArgument:
    return IndividualArgument(int(m.group(1)))


# ---------------------------------------------------------------------------
# Claude syntax
# ---------------------------------------------------------------------------

CLAUDE_SYNTAX_PATTERNS = [
    # $ARGUMENTS before $1-$9
    PatternDef(re.compile(r"\$ARGUMENTS"), lambda m: Arguments()),
    # !`command`
    PatternDef(re.compile(r"!`([^`]+)`"), lambda m: ShellCommand(m.group(1))),
    # ! command at line start
    PatternDef(re.compile(r"^!\s*([^\s{][^\n]*)", re.MULTILINE), lambda m: ShellCommand(m.group(1))),
    # @path/to/file
    PatternDef(re.compile(r"@([^\s{}\[\]()<>]+(?:\.[a-zA-Z0-9]+)?)"), lambda m: FileReference(m.group(1))),
    # $1-$9, but not $10
    PatternDef(re.compile(r"\$([1-9])(?!\d)"), _individual_argument),
]

CLAUDE_SYNTAX_SERIALIZERS = PlaceholderSerializers(
    arguments=lambda p: "$ARGUMENTS",
    individual_argument=lambda p: f"${p.index}",
    shell_command=lambda p: f"!`{p.command}`",
    file_reference=lambda p: f"@{p.path}",
)


# ---------------------------------------------------------------------------
# Gemini syntax
# ---------------------------------------------------------------------------

GEMINI_PATTERNS = [
    PatternDef(re.compile(r"\{\{args\}\}"), lambda m: Arguments()),
    PatternDef(re.compile(r"!\{([^}]+)\}"), lambda m: ShellCommand(m.group(1))),
    PatternDef(re.compile(r"@\{([^}]+)\}"), lambda m: FileReference(m.group(1))),
    PatternDef(re.compile(r"\$([1-9])(?!\d)"), _individual_argument),
]

GEMINI_SERIALIZERS = PlaceholderSerializers(
    arguments=lambda p: "{{args}}",
    individual_argument=lambda p: f"${p.index}",
    shell_command=lambda p: f"!{{{p.command}}}",
    file_reference=lambda p: f"@{{{p.path}}}",
)


# ---------------------------------------------------------------------------
# Placeholder types each family cannot express natively
# ---------------------------------------------------------------------------

NO_UNSUPPORTED: frozenset[str] = frozenset()
ALL_UNSUPPORTED: frozenset[str] = frozenset(PLACEHOLDER_TYPES)

GEMINI_UNSUPPORTED = frozenset({IndividualArgument.type})
CODEX_UNSUPPORTED = frozenset({ShellCommand.type, FileReference.type})
COPILOT_UNSUPPORTED = ALL_UNSUPPORTED
CURSOR_UNSUPPORTED = ALL_UNSUPPORTED
