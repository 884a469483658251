"""
Configuration for acs.

Settings cascade from built-in defaults, then the global file
(~/.config/acsync/config.yaml), then the project file
(<repo>/.config/acsync/config.yaml). Command-line flags override all three.

Example:

    sync:
      content_type: both
      remove_unsupported: true
    dirs:
      opencode: ~/work/opencode
"""

import copy
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from .agents.registry import AGENT_TYPES, HUB_AGENT, get_agent

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yaml"
CONTENT_TYPE_CHOICES = ("skills", "commands", "both")

DEFAULT_CONFIG: dict[str, Any] = {
    "sync": {
        "content_type": "skills",
        "remove_unsupported": False,
        "no_overwrite": False,
        "sync_delete": False,
    },
    # Per-agent base directory overrides; None keeps the agent default
    "dirs": {name: None for name in AGENT_TYPES},
}


def _validate_config(config: dict, defaults: dict, prefix: str = "") -> list[str]:
    """Validate config against defaults, returning warnings for unknown keys."""
    warnings = []
    for key, value in config.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if key not in defaults:
            warnings.append(f"Unknown config key: '{full_key}'")
        elif isinstance(value, dict) and isinstance(defaults.get(key), dict):
            warnings.extend(_validate_config(value, defaults[key], full_key))
        elif value is not None:
            expected_type = type(defaults.get(key))
            if expected_type is type(None):
                expected_type = str
            if not isinstance(value, expected_type):
                warnings.append(
                    f"Invalid type for '{full_key}': expected {expected_type.__name__}, got {type(value).__name__}"
                )
    return warnings


def _deep_merge(base: dict, override: dict) -> dict:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> Optional[dict]:
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def _hub_dir(root: Path) -> Path:
    return root / get_agent(HUB_AGENT).dirs.user_default


def _get_global_config_path() -> Path:
    return _hub_dir(Path.home()) / CONFIG_FILE_NAME


def _get_project_config_path(project_dir: Optional[str] = None) -> Path:
    base = Path(project_dir) if project_dir else Path.cwd()
    return base / get_agent(HUB_AGENT).dirs.project_base / CONFIG_FILE_NAME


def config_get_effective(project_dir: Optional[str] = None) -> dict[str, Any]:
    config = copy.deepcopy(DEFAULT_CONFIG)
    warnings = []
    sources = []

    global_path = _get_global_config_path()
    global_config = _load_yaml(global_path)
    if global_config:
        warnings.extend(_validate_config(global_config, DEFAULT_CONFIG))
        config = _deep_merge(config, global_config)
        sources.append(str(global_path))

    project_path = _get_project_config_path(project_dir)
    project_config = None
    if project_path != global_path:
        project_config = _load_yaml(project_path)
    if project_config:
        warnings.extend(_validate_config(project_config, DEFAULT_CONFIG))
        config = _deep_merge(config, project_config)
        sources.append(str(project_path))

    for section in ("sync", "dirs"):
        if not isinstance(config.get(section), dict):
            config[section] = copy.deepcopy(DEFAULT_CONFIG[section])

    content_type = config["sync"].get("content_type")
    if content_type not in CONTENT_TYPE_CHOICES:
        warnings.append(f"Invalid value for 'sync.content_type': {content_type!r}, using 'skills'")
        config["sync"]["content_type"] = "skills"

    return {
        "config": config,
        "sources": sources,
        "warnings": warnings,
        "has_global": global_config is not None,
        "has_project": project_config is not None,
    }


def config_get_custom_dirs(config: dict[str, Any]) -> dict[str, str]:
    """Agent name -> configured base directory, for agents that have one."""
    dirs = config.get("dirs") or {}
    return {name: path for name, path in dirs.items() if name in AGENT_TYPES and isinstance(path, str) and path}
