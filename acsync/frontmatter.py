"""
YAML frontmatter for Markdown command and skill files.
"""

import re
from typing import Any

import yaml

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


class FrontmatterError(ValueError):
    pass


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (data, content). A document without a frontmatter block yields ({}, text)."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(f"Frontmatter must be a mapping, got {type(data).__name__}")

    return data, text[match.end():]


def clean_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Drop None values; YAML and TOML writers have no way to express them."""
    return {k: v for k, v in data.items() if v is not None}


def dump_yaml(data: dict[str, Any]) -> str:
    return yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )


def join_frontmatter(data: dict[str, Any], content: str) -> str:
    """Render ``content`` with ``data`` as frontmatter. Without fields, only the content is returned."""
    fields = clean_fields(data or {})
    if not fields:
        return content

    if not content.endswith("\n"):
        content += "\n"
    return f"---\n{dump_yaml(fields)}---\n{content}"
