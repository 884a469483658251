"""
Sync workflow: convert every command and/or skill of one agent into another.

Each item goes through the same pipeline:

    parse -> to_ir (destination_type=dest) -> from_ir -> stringify -> write

Per-item failures are collected and the run continues. Writes happen under
a file lock in the hub directory so two concurrent runs never interleave.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from filelock import FileLock, Timeout

from .agents.base import AgentDefinition
from .agents.registry import HUB_AGENT, get_agent
from .body_segments import body_placeholders
from .dirs import (
    DirContext,
    find_agent_commands,
    find_agent_skills,
    get_command_name,
    get_file_path_from_command_name,
    resolve_base_dir,
    resolve_command_dir,
    resolve_skill_dir,
)
from .semantic_ir import ConverterOptions, ParseError, SemanticIR, SyncError
from .skill_files import get_skill_name, is_skill_directory

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = "sync.lock"
LOCK_TIMEOUT = 10


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass
class SyncOptions:
    source: str
    destination: str
    content_type: str = "skills"
    remove_unsupported: bool = False
    no_overwrite: bool = False
    sync_delete: bool = False
    # Single command name or skill name
    file: Optional[str] = None
    noop: bool = False
    verbose: bool = False
    custom_dirs: dict[str, str] = field(default_factory=dict)
    git_root: Optional[Path] = None
    global_: bool = False

    @property
    def context(self) -> DirContext:
        return DirContext(custom_dirs=self.custom_dirs, git_root=self.git_root, global_=self.global_)


@dataclass
class FileOperation:
    # A created, M modified, D deleted, - skipped
    type: str
    file_path: str
    description: str


@dataclass
class SyncResult:
    success: bool
    operations: list[FileOperation] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)


def _summarize(operations: list[FileOperation], processed: int) -> dict[str, int]:
    counts = {"A": 0, "M": 0, "D": 0, "-": 0}
    for op in operations:
        counts[op.type] = counts.get(op.type, 0) + 1
    return {
        "processed": processed,
        "created": counts["A"],
        "modified": counts["M"],
        "deleted": counts["D"],
        "skipped": counts["-"],
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _report_unsupported(dest: AgentDefinition, ir: SemanticIR, label: str) -> None:
    seen = []
    for placeholder in body_placeholders(ir.body):
        if placeholder.type in dest.unsupported and placeholder.type not in seen:
            seen.append(placeholder.type)
    for placeholder_type in seen:
        print(f"  ! {label}: {placeholder_type} is not supported by {dest.display_name}")


def _write_operation(target: Path, exists: bool, options: SyncOptions) -> Optional[FileOperation]:
    """Return the skip/noop operation for ``target``, or None when it should be written."""
    if exists and options.no_overwrite:
        return FileOperation("-", str(target), "Skipped (file exists and --no-overwrite specified)")
    if options.noop:
        return FileOperation("M" if exists else "A", str(target), "Would modify" if exists else "Would create")
    return None


def _written(target: Path, exists: bool) -> FileOperation:
    return FileOperation("M" if exists else "A", str(target), "Modified" if exists else "Created")


def _deleted(target: Path, options: SyncOptions) -> FileOperation:
    if options.noop:
        return FileOperation("D", str(target), "Would delete (orphaned)")
    return FileOperation("D", str(target), "Deleted (orphaned)")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _convert_command(
    source: AgentDefinition,
    dest: AgentDefinition,
    source_file: Path,
    target: Path,
    options: SyncOptions,
) -> FileOperation:
    command = source.parse_command(source_file)
    ir = source.command_to_ir(command, ConverterOptions(destination_type=dest.name))

    exists = target.is_file()
    skipped = _write_operation(target, exists, options)
    if skipped and skipped.type == "-":
        return skipped

    existing_target = None
    if dest.name == HUB_AGENT and exists:
        existing_target = dest.parse_command(target)

    converted = dest.command_from_ir(ir, ConverterOptions(
        remove_unsupported=options.remove_unsupported,
        existing_target=existing_target,
    ))
    content = dest.stringify_command(converted)

    if options.verbose:
        _report_unsupported(dest, ir, str(source_file))
    if skipped:
        return skipped

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return _written(target, exists)


def _sync_commands(source: AgentDefinition, dest: AgentDefinition, options: SyncOptions, result: SyncResult) -> int:
    context = options.context
    source_dir = resolve_command_dir(source, context)
    dest_dir = resolve_command_dir(dest, context)

    source_files = find_agent_commands(source, options.file, context)
    if options.verbose:
        print(f"Found {len(source_files)} {source.display_name} command(s) in {source_dir}")

    processed = 0
    expected = set()
    for source_file in source_files:
        name = get_command_name(source_file, source_dir, source.file_extension)
        target = get_file_path_from_command_name(name, dest_dir, dest.file_extension)
        expected.add(target)
        try:
            result.operations.append(_convert_command(source, dest, source_file, target, options))
            processed += 1
        except (ParseError, OSError) as e:
            logger.debug("Command conversion failed for %s", source_file, exc_info=True)
            result.errors.append(e)

    if options.sync_delete and not options.file:
        for target in find_agent_commands(dest, None, context):
            if target in expected:
                continue
            try:
                if not options.noop:
                    target.unlink()
                result.operations.append(_deleted(target, options))
            except OSError as e:
                result.errors.append(e)

    return processed


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

def _convert_skill(
    source: AgentDefinition,
    dest: AgentDefinition,
    source_dir: Path,
    target_dir: Path,
    options: SyncOptions,
) -> FileOperation:
    skill = source.parse_skill(source_dir)
    ir = source.skill_to_ir(skill, ConverterOptions(destination_type=dest.name))

    exists = is_skill_directory(target_dir)
    skipped = _write_operation(target_dir, exists, options)
    if skipped and skipped.type == "-":
        return skipped

    existing_target = None
    if dest.name == HUB_AGENT and exists:
        existing_target = dest.parse_skill(target_dir)

    converted = dest.skill_from_ir(ir, ConverterOptions(
        remove_unsupported=options.remove_unsupported,
        existing_target=existing_target,
    ))

    if options.verbose:
        _report_unsupported(dest, ir, str(source_dir))
    if skipped:
        return skipped

    for path in dest.write_skill_to_directory(converted, source_dir, target_dir):
        logger.debug("Wrote %s", path)
    return _written(target_dir, exists)


def _sync_skills(source: AgentDefinition, dest: AgentDefinition, options: SyncOptions, result: SyncResult) -> int:
    context = options.context
    dest_root = resolve_skill_dir(dest, context)

    skill_dirs = find_agent_skills(source, options.file, context)
    if options.verbose:
        print(f"Found {len(skill_dirs)} {source.display_name} skill(s) in {resolve_skill_dir(source, context)}")

    processed = 0
    expected = set()
    for skill_dir in skill_dirs:
        name = get_skill_name(skill_dir)
        target_dir = dest_root / name
        expected.add(name)
        try:
            result.operations.append(_convert_skill(source, dest, skill_dir, target_dir, options))
            processed += 1
        except (ParseError, OSError) as e:
            logger.debug("Skill conversion failed for %s", skill_dir, exc_info=True)
            result.errors.append(e)

    if options.sync_delete and not options.file:
        for target_dir in find_agent_skills(dest, None, context):
            if get_skill_name(target_dir) in expected:
                continue
            try:
                if not options.noop:
                    shutil.rmtree(target_dir)
                result.operations.append(_deleted(target_dir, options))
            except OSError as e:
                result.errors.append(e)

    return processed


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def _run(source: AgentDefinition, dest: AgentDefinition, options: SyncOptions, result: SyncResult) -> int:
    processed = 0
    if options.content_type in ("commands", "both"):
        processed += _sync_commands(source, dest, options, result)
    if options.content_type in ("skills", "both"):
        processed += _sync_skills(source, dest, options, result)
    return processed


def sync(options: SyncOptions) -> SyncResult:
    """Convert the source agent's content into the destination agent's directories.

    Raises:
        SyncError: source equals destination, unknown content type, or the lock is held.
        KeyError: unknown agent name.
    """
    if options.source == options.destination:
        raise SyncError(f"Source and destination must differ (both are '{options.source}')")
    if options.content_type not in ("skills", "commands", "both"):
        raise SyncError(f"Invalid content type: '{options.content_type}' (expected skills, commands or both)")

    source = get_agent(options.source)
    dest = get_agent(options.destination)
    result = SyncResult(success=True)

    logger.info("Syncing %s -> %s (%s)", source.name, dest.name, options.content_type)

    if options.noop:
        processed = _run(source, dest, options, result)
    else:
        lock_dir = resolve_base_dir(get_agent(HUB_AGENT), options.context)
        lock_dir.mkdir(parents=True, exist_ok=True)
        lock_file = lock_dir / LOCK_FILE_NAME
        try:
            with FileLock(str(lock_file), timeout=LOCK_TIMEOUT):
                processed = _run(source, dest, options, result)
        except Timeout as e:
            raise SyncError(f"Another sync is running (lock held: {lock_file})") from e

    result.success = not result.errors
    result.summary = _summarize(result.operations, processed)
    return result


def import_agent(agent: str, **kwargs: Any) -> SyncResult:
    """Pull ``agent``'s content into the hub."""
    return sync(SyncOptions(source=agent, destination=HUB_AGENT, **kwargs))


def drift(agent: str, **kwargs: Any) -> SyncResult:
    """Preview what an import of ``agent`` would change."""
    kwargs["noop"] = True
    return import_agent(agent, **kwargs)


def apply(agent: str, **kwargs: Any) -> SyncResult:
    """Push the hub's content out to ``agent``."""
    return sync(SyncOptions(source=HUB_AGENT, destination=agent, **kwargs))


def plan(agent: str, **kwargs: Any) -> SyncResult:
    """Preview what an apply to ``agent`` would change."""
    kwargs["noop"] = True
    return apply(agent, **kwargs)
