"""Tests for graph reconciliation."""
import pytest

from conftest import CHAIN_GRAPH, SCENARIO_GRAPH, meta
from cartui import layout_graph
from cutengine import GraphDiffEngine, reconcile
from depgraph import RenderedGraph, parse_adjacency


class CountingRender:
    def __init__(self):
        self.calls = 0

    def __call__(self, graph):
        self.calls += 1
        layout_graph(graph)


def drawn_pairs(graph):
    return sorted(graph.edge_keys())


def test_scenario_labels_carry_sizes():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency(SCENARIO_GRAPH))

    assert rendered.find_vertex("A").label == "A\n1mb"
    assert rendered.find_vertex("B").label == "B\n2mb"
    assert drawn_pairs(rendered) == [("A", "B")]


def test_unknown_size_label():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency(CHAIN_GRAPH))
    assert rendered.find_vertex("C").label == "C\n(unknown size)"


def test_removes_placeholder():
    rendered = RenderedGraph()
    rendered.show_placeholder()
    reconcile(rendered, parse_adjacency(SCENARIO_GRAPH))
    assert not rendered.has_placeholder
    assert sorted(rendered.vertex_ids()) == ["A", "B"]


def test_empty_snapshot_clears_placeholder():
    rendered = RenderedGraph()
    rendered.show_placeholder()
    reconcile(rendered, {})
    assert rendered.vertex_count() == 0
    assert rendered.edge_count() == 0


def test_prunes_edges_and_orphaned_vertices():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency(CHAIN_GRAPH))

    smaller = parse_adjacency({"A": {"B": meta(500000, 2000000)}})
    reconcile(rendered, smaller)
    assert drawn_pairs(rendered) == [("A", "B")]
    assert sorted(rendered.vertex_ids()) == ["A", "B"]


def test_row_left_empty_after_cut_prunes_its_vertices():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency(SCENARIO_GRAPH))
    reconcile(rendered, parse_adjacency({"A": {}}))
    assert rendered.vertex_count() == 0
    assert rendered.edge_count() == 0


def test_surviving_vertices_keep_label_and_element_id():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency(SCENARIO_GRAPH))
    element = rendered.element_id("B")

    # B reported with a different size: still the vertex drawn first
    reconcile(rendered, parse_adjacency({"A": {"B": meta(500000, 9000000), "D": meta(500000, 1)}}))
    assert rendered.find_vertex("B").label == "B\n2mb"
    assert rendered.element_id("B") == element
    assert rendered.find_vertex("D").label == "D\n1mb"


def test_reconcile_is_idempotent():
    render = CountingRender()
    rendered = RenderedGraph()
    snapshot = parse_adjacency(CHAIN_GRAPH)

    reconcile(rendered, snapshot, render=render)
    before = (sorted(rendered.vertex_ids()), drawn_pairs(rendered),
              {vid: rendered.element_id(vid) for vid in rendered.vertex_ids()})
    reconcile(rendered, snapshot, render=render)
    after = (sorted(rendered.vertex_ids()), drawn_pairs(rendered),
             {vid: rendered.element_id(vid) for vid in rendered.vertex_ids()})

    assert before == after
    assert render.calls == 2


def test_self_loop():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency({"A": {"A": meta(10, 10)}}))
    assert sorted(rendered.vertex_ids()) == ["A"]
    assert drawn_pairs(rendered) == [("A", "A")]
    assert len(rendered.find_edge("A", "A").points) == 4

    reconcile(rendered, {})
    assert rendered.vertex_count() == 0


def test_render_called_once_per_reconcile():
    render = CountingRender()
    reconcile(RenderedGraph(), parse_adjacency(CHAIN_GRAPH), render=render)
    assert render.calls == 1


def test_every_drawn_edge_is_rebound():
    calls = []
    engine = GraphDiffEngine(
        on_hover_start=lambda s, t: calls.append(("start", s, t)),
        on_hover_end=lambda s, t: calls.append(("end", s, t)),
    )
    rendered = RenderedGraph()
    engine.reconcile(rendered, parse_adjacency(CHAIN_GRAPH))
    assert sorted(rendered.bound_edges()) == [("A", "B"), ("A", "D"), ("B", "C")]

    engine.reconcile(rendered, parse_adjacency(SCENARIO_GRAPH))
    assert rendered.bound_edges() == [("A", "B")]

    start, end = rendered.hover_binding(("A", "B"))
    start("A", "B")
    end("A", "B")
    assert calls == [("start", "A", "B"), ("end", "A", "B")]


def test_without_handlers_nothing_is_bound():
    rendered = RenderedGraph()
    reconcile(rendered, parse_adjacency(SCENARIO_GRAPH))
    assert rendered.bound_edges() == []


@pytest.mark.parametrize("graph", [SCENARIO_GRAPH, CHAIN_GRAPH, {"X": {"Y": {}}, "Y": {"X": {}}}])
def test_drawn_graph_matches_snapshot(graph):
    rendered = RenderedGraph()
    rendered.show_placeholder()
    snapshot = parse_adjacency(graph)
    reconcile(rendered, snapshot)

    expected_pairs = sorted((s, t) for s, row in graph.items() for t in row)
    expected_ids = sorted({v for pair in expected_pairs for v in pair})
    assert drawn_pairs(rendered) == expected_pairs
    assert sorted(rendered.vertex_ids()) == expected_ids
