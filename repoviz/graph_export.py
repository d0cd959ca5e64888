"""Graph export helpers: Graphviz DOT output and focused subgraphs."""

from __future__ import annotations

from typing import List, Sequence, Set

from .mermaid import node_label
from .models import DependencyNode


def render_dot(graph: Sequence[DependencyNode], name: str = "Dependencies") -> str:
    known = {node.path for node in graph}

    lines = [f"digraph {name} {{"]
    lines.append("  rankdir=LR;")

    for node in graph:
        lines.append(f'  "{_esc(node.path)}" [label="{_esc(node_label(node.path))}"];')

    for node in graph:
        for dep in node.dependencies:
            if dep not in known:
                continue
            lines.append(f'  "{_esc(node.path)}" -> "{_esc(dep)}";')

    lines.append("}")
    return "\n".join(lines)


def focused_subgraph(graph: Sequence[DependencyNode], focus: str) -> List[DependencyNode]:
    """Restrict *graph* to nodes whose path contains *focus* plus their direct neighbours.

    Nodes keep their original order. Dependencies pointing outside the
    subgraph are dropped. An empty or unmatched focus returns the graph
    unchanged.
    """
    if not focus:
        return list(graph)

    focus_paths = {node.path for node in graph if focus in node.path}
    if not focus_paths:
        return list(graph)

    selected: Set[str] = set(focus_paths)
    for node in graph:
        if node.path in focus_paths:
            selected.update(node.dependencies)
        elif any(dep in focus_paths for dep in node.dependencies):
            selected.add(node.path)

    return [
        DependencyNode(
            path=node.path,
            dependencies=[
                dep for dep in node.dependencies
                if dep in selected and (node.path in focus_paths or dep in focus_paths)
            ],
        )
        for node in graph
        if node.path in selected
    ]


def _esc(text: str) -> str:
    return text.replace('"', '\\"')
