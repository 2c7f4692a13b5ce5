"""
경로 역추적 및 강조 테스트
"""

import pytest

from wikigraph.explorer.models import EdgeKind, ExplorerEdge, PageNode, RootNode, TagNode, edge_id
from wikigraph.explorer.renderer import MemoryRenderer
from wikigraph.explorer.styles import ROOT_COLOR, highlight_color, render_edge, render_node
from wikigraph.explorer.traceback import TraceHighlighter, trace_back


def page(node_id, parent, level):
    return PageNode(id=node_id, label=node_id, level=level, parent=parent, page_id=node_id)


def link(source, target, kind=EdgeKind.LINK):
    return ExplorerEdge(id=edge_id(kind, source, target), source=source, target=target, kind=kind)


@pytest.fixture
def graph():
    """root → a → tag:t → b"""
    nodes = {
        "root": RootNode(id="root", label="root", parent="root", page_id="root"),
        "a": page("a", "root", 1),
        "tag:t": TagNode(id="tag:t", label="#t", level=2, parent="a", tag_name="t"),
        "b": page("b", "tag:t", 3),
    }
    edges = {e.id: e for e in [
        link("root", "a"),
        link("a", "tag:t", EdgeKind.TAG),
        link("tag:t", "b", EdgeKind.TAG),
    ]}
    return nodes, edges


class TestTraceBack:
    """trace_back 테스트 클래스"""

    def test_path_from_root(self, graph):
        nodes, edges = graph

        path = trace_back(nodes, edges, ["root"], "b")

        assert path.nodes == ["root", "a", "tag:t", "b"]
        assert path.edges == ["link:root->a", "tag:a->tag:t", "tag:tag:t->b"]
        assert not path.truncated

    def test_stops_at_nearest_active_root(self, graph):
        nodes, edges = graph

        path = trace_back(nodes, edges, ["root", "a"], "b")

        assert path.nodes == ["a", "tag:t", "b"]

    def test_root_itself(self, graph):
        nodes, edges = graph

        path = trace_back(nodes, edges, ["root"], "root")

        assert path.nodes == ["root"]
        assert path.edges == []

    def test_unknown_node(self, graph):
        nodes, edges = graph

        path = trace_back(nodes, edges, ["root"], "missing")

        assert path.nodes == []
        assert not path.truncated

    def test_long_parent_cycle_truncated(self):
        size = 150
        nodes = {
            f"n{i}": page(f"n{i}", f"n{(i + 1) % size}", 1)
            for i in range(size)
        }

        path = trace_back(nodes, {}, [], "n0", max_iterations=100)

        assert path.truncated
        assert len(path.nodes) == 100
        assert path.nodes[-1] == "n0"

    def test_short_cycle_stops(self):
        nodes = {"x": page("x", "y", 1), "y": page("y", "x", 1)}

        path = trace_back(nodes, {}, [], "x")

        assert path.nodes == ["y", "x"]
        assert path.truncated


class TestTraceHighlighter:
    """TraceHighlighter 테스트 클래스"""

    @pytest.fixture
    def setup(self, graph):
        nodes, edges = graph
        renderer = MemoryRenderer()
        renderer.add_nodes([render_node(n) for n in nodes.values()])
        renderer.add_edges([render_edge(e) for e in edges.values()])
        highlighter = TraceHighlighter(nodes, edges, ["root"], renderer)
        return highlighter, renderer

    def test_highlight_and_reset(self, setup):
        highlighter, renderer = setup

        highlighter.highlight("a")

        assert renderer.nodes["root"]["color"] == highlight_color(0)
        assert renderer.edges["link:root->a"]["width"] == 5
        assert renderer.edges["tag:a->tag:t"]["width"] == 1

        highlighter.reset()

        assert renderer.nodes["root"]["color"] == ROOT_COLOR
        assert renderer.edges["link:root->a"]["width"] == 1
        assert highlighter.selected is None

    def test_reselect_is_noop(self, setup):
        highlighter, renderer = setup

        first = highlighter.highlight("b")
        renderer.update_edges([{"id": "link:root->a", "width": 3}])
        second = highlighter.highlight("b")

        assert first is second
        assert renderer.edges["link:root->a"]["width"] == 3

    def test_switch_reverts_previous(self, setup):
        highlighter, renderer = setup

        highlighter.highlight("b")
        highlighter.highlight("a")

        assert renderer.edges["tag:tag:t->b"]["width"] == 1
        assert renderer.edges["link:root->a"]["width"] == 5
        assert highlighter.selected == "a"

    def test_moved_positions_kept(self, graph):
        nodes, edges = graph
        nodes["a"].x, nodes["a"].y = 10, 20
        renderer = MemoryRenderer()
        renderer.add_nodes([render_node(n) for n in nodes.values()])
        renderer.add_edges([render_edge(e) for e in edges.values()])
        highlighter = TraceHighlighter(nodes, edges, ["root"], renderer)

        # 레이아웃이 노드를 옮긴 뒤
        renderer.update_nodes([{"id": "a", "x": 555, "y": 777}])

        highlighter.highlight("a")
        assert renderer.positions()["a"] == (555, 777)

        highlighter.reset()
        assert renderer.positions()["a"] == (555, 777)
        assert renderer.nodes["a"]["color"] != highlight_color(1)
