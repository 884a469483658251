"""
Skill directory helpers: discovery, support-file collection and writing.

A skill is a directory holding SKILL.md plus any number of support files.
Binary support files are never read into memory; they are copied
byte-for-byte from the source directory when the skill is written.
"""

import logging
import shutil
from pathlib import Path
from typing import Iterable, Optional

from .semantic_ir import SupportFile

logger = logging.getLogger(__name__)

SKILL_FILE_NAME = "SKILL.md"
DEFAULT_SKILL_NAME = "unnamed-skill"
CODEX_CONFIG_DIR = "agents"
CODEX_CONFIG_FILE = "openai.yaml"

BINARY_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff",
    ".pdf", ".zip", ".gz", ".tar", ".tgz", ".bz2", ".xz", ".7z", ".jar",
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    ".mp3", ".mp4", ".wav", ".ogg", ".mov", ".avi", ".webm",
    ".exe", ".dll", ".so", ".dylib", ".bin", ".wasm", ".pyc", ".class",
    ".sqlite", ".db",
}

CONFIG_FILES = {
    "package.json", "tsconfig.json", "pyproject.toml", "requirements.txt",
    "setup.cfg", "Makefile", "Dockerfile", ".gitignore", ".editorconfig",
    ".prettierrc", ".eslintrc", ".eslintrc.json", "config.json", "config.yaml",
    "config.yml", "settings.json",
}


def classify_support_file(relative_path: str) -> str:
    path = Path(relative_path)
    if path.suffix.lower() in BINARY_EXTENSIONS:
        return "binary"
    if path.name in CONFIG_FILES:
        return "config"
    return "text"


def is_skill_directory(dir_path: Path) -> bool:
    return (Path(dir_path) / SKILL_FILE_NAME).is_file()


def get_skill_name(dir_path: Path) -> str:
    return Path(dir_path).name


def collect_support_files(skill_dir: Path, exclude: Iterable[str] = (SKILL_FILE_NAME,)) -> list[SupportFile]:
    """Walk ``skill_dir`` and list every file except the excluded relative paths.

    Paths use forward slashes so they stay stable across platforms.
    """
    skill_dir = Path(skill_dir)
    excluded = set(exclude)
    support_files = []

    for path in sorted(skill_dir.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(skill_dir).as_posix()
        if relative in excluded:
            continue
        support_files.append(SupportFile(relative_path=relative, type=classify_support_file(relative)))

    return support_files


def load_support_file_contents(skill_dir: Path, support_files: list[SupportFile]) -> None:
    """Read text and config support files in place. Binary files stay unloaded."""
    for support_file in support_files:
        if support_file.type == "binary":
            continue
        path = Path(skill_dir) / support_file.relative_path
        try:
            support_file.content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read support file %s: %s", path, e)


def write_skill_directory(
    skill_content: str,
    support_files: list[SupportFile],
    source_dir: Optional[Path],
    target_dir: Path,
) -> list[Path]:
    """Write SKILL.md and support files into ``target_dir``. Returns the written paths."""
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    skill_path = target_dir / SKILL_FILE_NAME
    skill_path.write_text(skill_content, encoding="utf-8")
    written = [skill_path]

    for support_file in support_files:
        target_path = target_dir / support_file.relative_path
        target_path.parent.mkdir(parents=True, exist_ok=True)

        if support_file.type == "binary":
            if source_dir is None:
                continue
            source_path = Path(source_dir) / support_file.relative_path
            if source_path.is_file():
                shutil.copyfile(source_path, target_path)
                written.append(target_path)
        elif support_file.content is not None:
            target_path.write_text(support_file.content, encoding="utf-8")
            written.append(target_path)

    return written
