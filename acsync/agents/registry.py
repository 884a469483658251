"""
Agent registry: one AgentDefinition per supported agent, keyed by name.
"""

from .base import AgentDefinition
from .chimera import ChimeraAgent
from .claude import ClaudeAgent
from .codex import CodexAgent
from .copilot import CopilotAgent
from .cursor import CursorAgent
from .gemini import GeminiAgent
from .opencode import OpenCodeAgent

AGENT_TYPES = ("claude", "gemini", "codex", "opencode", "copilot", "cursor", "chimera")

AGENT_REGISTRY: dict[str, AgentDefinition] = {
    agent.name: agent
    for agent in (
        ClaudeAgent(),
        GeminiAgent(),
        CodexAgent(),
        OpenCodeAgent(),
        CopilotAgent(),
        CursorAgent(),
        ChimeraAgent(),
    )
}

if tuple(AGENT_REGISTRY) != AGENT_TYPES:
    raise RuntimeError(f"Registry out of sync with AGENT_TYPES: {sorted(AGENT_REGISTRY)}")

HUB_AGENT = "chimera"


def get_agent(name: str) -> AgentDefinition:
    try:
        return AGENT_REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown agent '{name}'. Available agents: {', '.join(AGENT_TYPES)}") from None


def spoke_agents() -> list[AgentDefinition]:
    """Every agent except the Chimera hub."""
    return [agent for name, agent in AGENT_REGISTRY.items() if name != HUB_AGENT]
