from __future__ import annotations

import shutil
from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import Path

from .log import get_logger

logger = get_logger("static")


def is_excluded(relative: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        if fnmatchcase(relative, pattern):
            return True
        # "**/" also matches files at the top level.
        if pattern.startswith("**/") and fnmatchcase(relative, pattern[3:]):
            return True
    return False


def list_files(root: Path) -> list[Path]:
    if not root.exists():
        return []
    return sorted((path for path in root.rglob("*") if path.is_file()), key=lambda p: p.as_posix())


def copy_static_files(templates_dir: Path, output_dir: Path, patterns: Iterable[str]) -> list[str]:
    patterns = list(patterns)
    copied = []
    for path in list_files(templates_dir):
        relative = path.relative_to(templates_dir).as_posix()
        if is_excluded(relative, patterns):
            continue
        dest = output_dir / relative
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(path, dest)
        copied.append(relative)
        logger.info("Copied: %s", relative)
    return copied
