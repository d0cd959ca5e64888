"""Collects TypeScript / JavaScript sources of a directory into ``FileInput`` values."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .config import SKIP_DIRS, SUPPORTED_EXTENSIONS, TYPESCRIPT_EXTENSIONS
from .errors import ValidationError
from .models import FileInput

logger = logging.getLogger(__name__)


def language_for(path: str) -> str:
    return "typescript" if path.endswith(TYPESCRIPT_EXTENSIONS) else "javascript"


def is_excluded(rel_path: str, patterns: Iterable[str]) -> bool:
    """Case-insensitive substring match of *rel_path* against exclude patterns."""
    normalized = rel_path.lower().replace("\\", "/")
    return any(p and p.lower() in normalized for p in patterns)


def collect_files(root: Path, exclude: Optional[Iterable[str]] = None) -> List[FileInput]:
    """Read every supported source file below *root*.

    Paths are POSIX-style and relative to *root*; the result is sorted by path.

    Raises:
        ValidationError: *root* is not a directory or holds no source files.
    """
    if not root.is_dir():
        raise ValidationError(f"Not a directory: {root}")

    patterns = list(exclude or [])
    files: List[FileInput] = []
    excluded = 0

    for file_path in sorted(root.rglob("*")):
        if not file_path.is_file() or file_path.suffix not in SUPPORTED_EXTENSIONS:
            continue
        rel = file_path.relative_to(root)
        if any(part in SKIP_DIRS for part in rel.parts[:-1]):
            continue
        rel_path = rel.as_posix()
        if is_excluded(rel_path, patterns):
            excluded += 1
            logger.debug("Excluded %s", rel_path)
            continue
        content = file_path.read_text(encoding="utf-8", errors="replace")
        files.append(FileInput(path=rel_path, content=content, language=language_for(rel_path)))

    logger.info("Collected %d source files from %s (%d excluded)", len(files), root, excluded)
    if not files:
        raise ValidationError(f"No source files found in {root}")
    return files
