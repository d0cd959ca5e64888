"""Resolution of relative import specifiers to files of the analyzed batch."""

from __future__ import annotations

from typing import AbstractSet, List, Optional

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

# Fixed precedence; changing it changes the graphs (and diagrams) of existing snapshots.
RESOLUTION_SUFFIXES = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    "/index.ts",
    "/index.tsx",
    "/index.js",
    "/index.jsx",
)


def is_relative(specifier: str) -> bool:
    return specifier.startswith(".")


def normalize_path(path: str) -> str:
    """Collapse ``.``, ``..`` and empty segments of a ``/``-separated path.

    A ``..`` with nothing left to pop is dropped, so the result never
    escapes above the batch root.
    """
    stack: List[str] = []
    for part in path.split("/"):
        if part == "..":
            if stack:
                stack.pop()
        elif part and part != ".":
            stack.append(part)
    return "/".join(stack)


def resolve_import(
    specifier: str,
    from_path: str,
    known_paths: AbstractSet[str],
) -> Optional[str]:
    """Map *specifier*, imported from *from_path*, to a path in *known_paths*.

    Args:
        specifier: Module specifier exactly as written in the import.
        from_path: Path of the importing file.
        known_paths: Every path of the current batch.

    Returns:
        The matching known path, or ``None`` for package imports and
        relative imports that match no file.
    """
    if not is_relative(specifier):
        return None

    current_dir = "/".join(from_path.split("/")[:-1])
    candidate = normalize_path(f"{current_dir}/{specifier}")

    if candidate.endswith(SOURCE_EXTENSIONS):
        return candidate if candidate in known_paths else None

    for suffix in RESOLUTION_SUFFIXES:
        if candidate + suffix in known_paths:
            return candidate + suffix
    return None
