"""
depgraph/
---------
Core data layer.  Public API:

    from depgraph import RenderedGraph, Vertex, Edge
    from depgraph import VertexState, EdgeState
    from depgraph import Snapshot, CutPreview, EdgeMeta, VertexInfo
"""

from depgraph.node    import Vertex, VertexState
from depgraph.edge    import Edge, EdgeKey, EdgeState
from depgraph.graph   import RenderedGraph, PLACEHOLDER_ID
from depgraph.payload import (
    AuthoritativeGraph,
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

__all__ = [
    "Vertex",        "VertexState",
    "Edge",          "EdgeKey",       "EdgeState",
    "RenderedGraph", "PLACEHOLDER_ID",
    "AuthoritativeGraph",
    "CutPreview",
    "EdgeMeta",
    "PayloadError",
    "Snapshot",
    "VertexInfo",
    "exclude_pairs",
    "has_pair",
    "iter_pairs",
    "pair_count",
    "parse_adjacency",
    "vertex_ids",
]
