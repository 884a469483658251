#!/usr/bin/env python3
"""
acs: convert slash commands and skills between AI coding agents.

Usage:
    acs sync claude gemini -t both
    acs import claude            # claude -> chimera hub
    acs drift claude             # preview of import
    acs apply codex --sync-delete
    acs plan codex               # preview of apply
    acs status
    acs agents
"""

import argparse
import logging
import sys
from typing import Optional

from .agents.registry import AGENT_REGISTRY, AGENT_TYPES, HUB_AGENT, get_agent
from .config_tools import CONTENT_TYPE_CHOICES, config_get_custom_dirs, config_get_effective
from .dirs import DirContext, find_git_root
from .semantic_ir import SyncError
from .status import get_version, show_status
from .sync_tools import SyncOptions, SyncResult, sync

logger = logging.getLogger(__name__)

SUBCOMMAND_HELP = {
    "sync": "Convert from one agent to another",
    "import": "Import an agent's content into the Chimera hub",
    "drift": "Preview what import would change",
    "apply": "Apply the Chimera hub to an agent",
    "plan": "Preview what apply would change",
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _add_location_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--global", "-g",
        dest="global_",
        action="store_true",
        help="Use user-level directories instead of the repository's",
    )
    for name in AGENT_TYPES:
        parser.add_argument(
            f"--{name}-dir",
            dest=f"{name}_dir",
            metavar="PATH",
            help=f"{AGENT_REGISTRY[name].display_name} base directory",
        )


def _add_sync_options(parser: argparse.ArgumentParser, delete: bool, noop: bool) -> None:
    parser.add_argument(
        "--type", "-t",
        dest="content_type",
        help=f"Content to sync: {', '.join(CONTENT_TYPE_CHOICES)} (default from config, else skills)",
    )
    parser.add_argument(
        "--remove-unsupported",
        action="store_true",
        default=None,
        help="Drop fields the destination does not support",
    )
    parser.add_argument(
        "--no-overwrite",
        action="store_true",
        default=None,
        help="Skip destination files that already exist",
    )
    if delete:
        parser.add_argument(
            "--sync-delete",
            action="store_true",
            default=None,
            help="Delete destination items with no source counterpart",
        )
    parser.add_argument(
        "--file", "-f",
        help="Sync a single command or skill by name",
    )
    if noop:
        parser.add_argument(
            "--noop", "-n",
            action="store_true",
            help="Show what would change without writing",
        )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show discovery and unsupported-placeholder details",
    )
    _add_location_options(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acs",
        description="Convert slash commands and skills between AI coding agents.",
    )
    subparsers = parser.add_subparsers(dest="command")

    sync_parser = subparsers.add_parser("sync", help=SUBCOMMAND_HELP["sync"])
    sync_parser.add_argument("source", help="Source agent")
    sync_parser.add_argument("destination", help="Destination agent")
    _add_sync_options(sync_parser, delete=True, noop=True)

    for name in ("import", "drift", "apply", "plan"):
        sub = subparsers.add_parser(name, help=SUBCOMMAND_HELP[name])
        sub.add_argument("agent", help="Agent to exchange content with the hub")
        _add_sync_options(sub, delete=name in ("apply", "plan"), noop=False)

    status_parser = subparsers.add_parser("status", help="Show command and skill counts per agent")
    _add_location_options(status_parser)

    subparsers.add_parser("agents", help="List supported agents")
    subparsers.add_parser("version", help="Show version")
    return parser


# ---------------------------------------------------------------------------
# Option resolution
# ---------------------------------------------------------------------------

def _custom_dirs(args: argparse.Namespace, config: dict) -> dict[str, str]:
    custom_dirs = config_get_custom_dirs(config)
    for name in AGENT_TYPES:
        value = getattr(args, f"{name}_dir", None)
        if value:
            custom_dirs[name] = value
    return custom_dirs


def _pick(value, default):
    return default if value is None else value


def build_sync_options(args: argparse.Namespace, source: str, destination: str, noop: bool = False) -> SyncOptions:
    git_root = None if args.global_ else find_git_root()
    effective = config_get_effective(str(git_root) if git_root else None)
    for warning in effective["warnings"]:
        logger.warning(warning)

    config = effective["config"]
    defaults = config["sync"]
    content_type = _pick(args.content_type, defaults["content_type"])
    if content_type not in CONTENT_TYPE_CHOICES:
        raise SyncError(f"Invalid type '{content_type}'. Choose from: {', '.join(CONTENT_TYPE_CHOICES)}")

    return SyncOptions(
        source=source,
        destination=destination,
        content_type=content_type,
        remove_unsupported=_pick(args.remove_unsupported, defaults["remove_unsupported"]),
        no_overwrite=_pick(args.no_overwrite, defaults["no_overwrite"]),
        sync_delete=_pick(getattr(args, "sync_delete", None), defaults["sync_delete"] if not noop else False),
        file=args.file,
        noop=noop or getattr(args, "noop", False),
        verbose=args.verbose,
        custom_dirs=_custom_dirs(args, config),
        git_root=git_root,
        global_=args.global_,
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def display_results(result: SyncResult, noop: bool) -> None:
    print("\nResults:")
    if not result.operations:
        print("No operations performed.")
    for op in result.operations:
        print(f"[{op.type}] {op.file_path} - {op.description}")

    summary = result.summary
    print("\nSummary:")
    print(f"  Processed: {summary.get('processed', 0)}")
    for key, label in (("created", "Created"), ("modified", "Modified"), ("deleted", "Deleted"), ("skipped", "Skipped")):
        if summary.get(key):
            print(f"  {label}: {summary[key]}")

    if result.errors:
        print("\nErrors:")
        for i, error in enumerate(result.errors, 1):
            print(f"  {i}. {error}")

    if noop:
        print("\nThis was a dry run. Run without --noop to apply changes.")
    elif not result.errors:
        print("\nSync completed successfully.")


def list_agents() -> None:
    print("Available agents:\n")
    for name, agent in AGENT_REGISTRY.items():
        role = "hub" if name == HUB_AGENT else agent.file_extension
        print(f"  {name:10s}  {agent.display_name:16s} {role}")
    print()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def _run_sync(args: argparse.Namespace) -> int:
    if args.command == "sync":
        source, destination = args.source, args.destination
    elif args.command in ("import", "drift"):
        source, destination = args.agent, HUB_AGENT
    else:
        source, destination = HUB_AGENT, args.agent

    # Validates both names before any directory is touched
    get_agent(source)
    get_agent(destination)

    options = build_sync_options(args, source, destination, noop=args.command in ("drift", "plan"))
    print(f"Starting {source} -> {destination} conversion ({options.content_type})...")
    if options.noop:
        print("DRY RUN MODE - No files will be modified")

    result = sync(options)
    display_results(result, options.noop)
    return 0 if result.success else 1


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "agents":
            list_agents()
            return 0
        if args.command == "version":
            print(f"acs {get_version()}")
            return 0
        if args.command == "status":
            git_root = None if args.global_ else find_git_root()
            config = config_get_effective(str(git_root) if git_root else None)["config"]
            show_status(DirContext(custom_dirs=_custom_dirs(args, config), git_root=git_root, global_=args.global_))
            return 0
        return _run_sync(args)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
    except (SyncError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
