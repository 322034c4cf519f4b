"""Tests for backend payload parsing and adjacency helpers."""
import pytest

from depgraph import (
    CutPreview,
    EdgeMeta,
    PayloadError,
    Snapshot,
    VertexInfo,
    exclude_pairs,
    has_pair,
    iter_pairs,
    pair_count,
    parse_adjacency,
    vertex_ids,
)


class TestParseAdjacency:

    def test_go_style_keys(self):
        graph = parse_adjacency({"A": {"B": {"From": {"SizeBytes": 500000},
                                             "To": {"SizeBytes": 2000000},
                                             "NumUsages": 4}}})
        assert graph["A"]["B"] == EdgeMeta(VertexInfo(500000), VertexInfo(2000000), 4)

    def test_lower_camel_keys(self):
        graph = parse_adjacency({"A": {"B": {"from": {"sizeBytes": 1}, "to": {"sizeBytes": 2}}}})
        assert graph["A"]["B"].source.size_bytes == 1
        assert graph["A"]["B"].target.size_bytes == 2

    def test_cart_entries_without_metadata(self):
        graph = parse_adjacency({"A": {"B": {}}})
        assert graph["A"]["B"] == EdgeMeta()
        assert graph["A"]["B"].target.size_bytes is None

    def test_null_is_empty(self):
        assert parse_adjacency(None) == {}
        assert parse_adjacency({"A": None}) == {"A": {}}

    def test_non_object_row_is_skipped(self):
        graph = parse_adjacency({"A": ["B"], "C": {"D": {}}})
        assert "A" not in graph
        assert has_pair(graph, "C", "D")

    def test_top_level_must_be_object(self):
        with pytest.raises(PayloadError):
            parse_adjacency(["A", "B"])

    def test_bool_size_is_not_a_size(self):
        graph = parse_adjacency({"A": {"B": {"To": {"SizeBytes": True}}}})
        assert graph["A"]["B"].target.size_bytes is None


class TestAdjacencyHelpers:

    graph = parse_adjacency({"A": {"B": {}, "C": {}}, "B": {"C": {}}, "E": {}})

    def test_has_pair_tolerates_missing_rows(self):
        assert has_pair(self.graph, "A", "B")
        assert not has_pair(self.graph, "A", "Z")
        assert not has_pair(self.graph, "Z", "A")
        assert not has_pair(self.graph, "E", "A")

    def test_vertex_ids_only_counts_endpoints(self):
        # E has an empty row: it touches no edge
        assert vertex_ids(self.graph) == {"A", "B", "C"}

    def test_pairs(self):
        assert sorted((s, t) for s, t, _ in iter_pairs(self.graph)) == [("A", "B"), ("A", "C"), ("B", "C")]
        assert pair_count(self.graph) == 3

    def test_exclude_pairs(self):
        other = parse_adjacency({"A": {"C": {}}, "X": {"Y": {}}})
        out = exclude_pairs(self.graph, other)
        assert sorted((s, t) for s, t, _ in iter_pairs(out)) == [("A", "B"), ("B", "C")]


class TestEnvelopes:

    def test_snapshot(self):
        snap = Snapshot.from_json({"graph": {"A": {"B": {}}}, "shoppingCart": {"B": {"C": {}}}})
        assert has_pair(snap.graph, "A", "B")
        assert has_pair(snap.shopping_cart, "B", "C")

    def test_snapshot_requires_both_halves(self):
        with pytest.raises(PayloadError):
            Snapshot.from_json({"graph": {}})
        with pytest.raises(PayloadError):
            Snapshot.from_json([])

    def test_preview_vertices_as_list(self):
        preview = CutPreview.from_json({"edges": {"A": {"B": {}}}, "vertices": ["B", "C"]})
        assert preview.edge_keys() == [("A", "B")]
        assert preview.vertices == ["B", "C"]

    def test_preview_vertices_as_object(self):
        preview = CutPreview.from_json({"edges": None, "vertices": {"0": "B", "1": "C"}})
        assert preview.edge_keys() == []
        assert preview.vertices == ["B", "C"]

    def test_preview_null_vertices(self):
        assert CutPreview.from_json({"edges": {}, "vertices": None}).vertices == []

    def test_preview_bad_vertices(self):
        with pytest.raises(PayloadError):
            CutPreview.from_json({"edges": {}, "vertices": "B"})
