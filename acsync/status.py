"""
Status report: how many commands and skills each installed agent holds.

The hub level is the number of distinct agents with at least one command or
skill, at user level or in the current repository.
"""

from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version

from .agents.registry import get_agent, spoke_agents
from .dirs import DirContext, find_agent_commands, find_agent_skills

DISTRIBUTION_NAME = "agent-command-sync"


@dataclass
class AgentStats:
    command_count: int = 0
    skill_count: int = 0
    agent_count: int = 0
    # Agent names with at least one command or skill
    detected_agents: set[str] = field(default_factory=set)


def get_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.0.0+unknown"


def collect_agent_stats(context: DirContext) -> AgentStats:
    stats = AgentStats()
    for agent in spoke_agents():
        commands = find_agent_commands(agent, None, context)
        skills = find_agent_skills(agent, None, context)
        stats.command_count += len(commands)
        stats.skill_count += len(skills)
        if commands or skills:
            stats.agent_count += 1
            stats.detected_agents.add(agent.name)
    return stats


def format_stats_line(label: str, stats: AgentStats) -> str:
    return f"{label} {stats.command_count} commands, {stats.skill_count} skills ({stats.agent_count} agents)"


def show_status(context: DirContext) -> int:
    """Print the status report and return the hub level."""
    custom_dirs = context.custom_dirs
    in_project = context.git_root is not None and not context.global_
    mode = f"project: {context.git_root}" if in_project else "global"

    print(f"acs v{get_version()} [{mode}]")
    print()

    user_stats = collect_agent_stats(DirContext(custom_dirs=custom_dirs, global_=True))
    project_stats = None
    if context.git_root is not None:
        project_stats = collect_agent_stats(DirContext(custom_dirs=custom_dirs, git_root=context.git_root))

    detected = set(user_stats.detected_agents)
    if project_stats:
        detected |= project_stats.detected_agents
        print(format_stats_line("  User:   ", user_stats))
        print(format_stats_line("  Project:", project_stats))
    else:
        print(format_stats_line("  User:", user_stats))

    level = len(detected)
    print()
    print(f"Hub level: {level}")
    if level == 0:
        print("  No agents detected yet. Run `acs import <agent>` to start.")
    else:
        names = [get_agent(name).display_name for name in sorted(detected)]
        print(f"  Agents: {', '.join(names)}")
    return level
