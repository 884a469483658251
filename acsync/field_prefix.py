"""
Reversible retagging of Claude-only field names for agents that do not
understand them (Gemini, Codex and OpenCode skills).

    allowed-tools            <->  _claude_allowed_tools
    disable-model-invocation <->  _claude_disable_model_invocation

The pair is an exact inverse for hyphenated lowercase keys, which is the
shape of every Claude frontmatter field.
"""

CLAUDE_PREFIX = "_claude_"
CLAUDE_MODEL_INVOCATION_KEY = f"{CLAUDE_PREFIX}disable_model_invocation"


def prefix_claude_key(key: str) -> str:
    return f"{CLAUDE_PREFIX}{key.replace('-', '_')}"


def unprefix_claude_key(key: str) -> str:
    if not key.startswith(CLAUDE_PREFIX):
        return key
    return key[len(CLAUDE_PREFIX):].replace("_", "-")


def is_prefixed_key(key: str) -> bool:
    return key.startswith(CLAUDE_PREFIX)
