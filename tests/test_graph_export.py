"""Tests for DOT export and focused subgraphs."""

from repoviz.graph_export import focused_subgraph, render_dot
from repoviz.models import DependencyNode


def test_render_dot():
    graph = [
        DependencyNode("src/a.ts", ["src/b.ts", "gone.ts"]),
        DependencyNode("src/b.ts", []),
    ]

    assert render_dot(graph).splitlines() == [
        "digraph Dependencies {",
        "  rankdir=LR;",
        '  "src/a.ts" [label="a.ts"];',
        '  "src/b.ts" [label="b.ts"];',
        '  "src/a.ts" -> "src/b.ts";',
        "}",
    ]


def test_render_dot_escapes_quotes():
    text = render_dot([DependencyNode('odd"name.ts')], name="G")
    assert text.startswith("digraph G {")
    assert '"odd\\"name.ts"' in text


class TestFocusedSubgraph:

    def setup_method(self):
        self.graph = [
            DependencyNode("app.ts", ["main.ts"]),
            DependencyNode("main.ts", ["utils.ts", "models.ts"]),
            DependencyNode("utils.ts", ["models.ts"]),
            DependencyNode("models.ts", []),
            DependencyNode("other.ts", []),
        ]

    def test_empty_focus_returns_graph(self):
        assert focused_subgraph(self.graph, "") == self.graph

    def test_unmatched_focus_returns_graph(self):
        assert focused_subgraph(self.graph, "nothing") == self.graph

    def test_focus_keeps_direct_neighbours(self):
        sub = focused_subgraph(self.graph, "main")

        assert [n.path for n in sub] == ["app.ts", "main.ts", "utils.ts", "models.ts"]
        assert {n.path: n.dependencies for n in sub} == {
            "app.ts": ["main.ts"],
            "main.ts": ["utils.ts", "models.ts"],
            "utils.ts": [],
            "models.ts": [],
        }
