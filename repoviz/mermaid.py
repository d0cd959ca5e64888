"""Mermaid flowchart rendering of a dependency graph.

The output grammar is consumed by external tooling by convention, so the
exact text (header, two-space indent, quoting, placeholder) must not change.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from .models import DependencyNode

HEADER = "graph LR"
EMPTY_PLACEHOLDER = 'empty["No files analyzed"]'


def node_label(path: str) -> str:
    """Final path segment, or the whole path when that segment is empty."""
    return path.split("/")[-1] or path


def render_mermaid(graph: Sequence[DependencyNode]) -> str:
    lines: List[str] = [HEADER]

    node_ids: Dict[str, str] = {}
    for index, node in enumerate(graph):
        node_id = f"N{index}"
        node_ids[node.path] = node_id
        lines.append(f'  {node_id}["{node_label(node.path)}"]')

    for node in graph:
        source_id = node_ids.get(node.path)
        if source_id is None:
            continue
        for dep in node.dependencies:
            target_id = node_ids.get(dep)
            if target_id:
                lines.append(f"  {source_id} --> {target_id}")

    if not graph:
        lines.append(f"  {EMPTY_PLACEHOLDER}")

    return "\n".join(lines)
