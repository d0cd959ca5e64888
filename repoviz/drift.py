"""Drift detection: per-file dependency changes between two analysis snapshots."""

from __future__ import annotations

from typing import Dict, List, Sequence

from .models import (
    AnalysisResult,
    DependencyNode,
    DependencySnapshot,
    DriftResult,
    FileChange,
)


class DriftDetector:
    """Compares a current analysis against a previous one.

    Files are matched by path. A file present on both sides counts as
    modified only when its dependencies differ in size or membership;
    ordering is ignored.
    """

    def detect(self, current: AnalysisResult, previous: AnalysisResult) -> DriftResult:
        current_paths = {node.path for node in current.graph}
        previous_by_path = _first_by_path(previous.graph)

        added: List[str] = []
        removed: List[str] = []
        modified: List[str] = []
        changes: List[FileChange] = []

        for node in current.graph:
            if node.path not in previous_by_path:
                added.append(node.path)
                changes.append(FileChange(
                    path=node.path,
                    change_type="added",
                    after=DependencySnapshot(dependencies=list(node.dependencies)),
                ))

        for node in previous.graph:
            if node.path not in current_paths:
                removed.append(node.path)
                changes.append(FileChange(
                    path=node.path,
                    change_type="removed",
                    before=DependencySnapshot(dependencies=list(node.dependencies)),
                ))

        for node in current.graph:
            before = previous_by_path.get(node.path)
            if before is None:
                continue
            if dependencies_changed(node.dependencies, before.dependencies):
                modified.append(node.path)
                changes.append(FileChange(
                    path=node.path,
                    change_type="modified",
                    before=DependencySnapshot(dependencies=list(before.dependencies)),
                    after=DependencySnapshot(dependencies=list(node.dependencies)),
                ))

        return DriftResult(added=added, removed=removed, modified=modified, changes=changes)


def dependencies_changed(current: Sequence[str], previous: Sequence[str]) -> bool:
    if len(current) != len(previous):
        return True
    return set(current) != set(previous)


def _first_by_path(graph: Sequence[DependencyNode]) -> Dict[str, DependencyNode]:
    by_path: Dict[str, DependencyNode] = {}
    for node in graph:
        by_path.setdefault(node.path, node)
    return by_path
