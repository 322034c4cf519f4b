"""
diff.py — Graph Diff Engine
===========================
Brings the RenderedGraph in line with a new authoritative snapshot by
removing what is gone and adding what is new, never by redrawing from
scratch.  Vertices that survive keep their label, position history and
element id.

Passes, in order:
    1. edge pruning    – drop every drawn edge the snapshot no longer has
    2. vertex pruning  – drop every drawn vertex no snapshot pair touches
    3. addition        – draw missing endpoints (label "<id>\\n<size>") and edges
    4. render          – one layout/draw call, then re-bind edge hover handlers

Malformed snapshots (a row whose targets were all cut, a vertex with no
edges left, a self-loop) need no special-casing: the pruning passes
only ever ask "is this pair / id in the snapshot".
"""

import logging
from typing import Callable, Optional

from depgraph import (
    AuthoritativeGraph,
    RenderedGraph,
    has_pair,
    iter_pairs,
    vertex_ids,
)
from cartui.canvas import layout_graph
from cartui.sizes import vertex_label


logger = logging.getLogger(__name__)

RenderPrimitive = Callable[[RenderedGraph], None]
HoverHandler = Callable[[str, str], object]


def reconcile(
    rendered: RenderedGraph,
    authoritative: AuthoritativeGraph,
    render: RenderPrimitive = layout_graph,
    on_hover_start: Optional[HoverHandler] = None,
    on_hover_end: Optional[HoverHandler] = None,
) -> None:
    """Mutate `rendered` into the drawing of `authoritative`."""
    rendered.remove_placeholder()

    # 1. edge pruning
    edges_removed = 0
    for edge in rendered.iter_edges():
        if not has_pair(authoritative, edge.source, edge.target):
            rendered.remove_edge(edge.source, edge.target)
            edges_removed += 1

    # 2. vertex pruning
    wanted = vertex_ids(authoritative)
    vertices_removed = 0
    for vid in rendered.vertex_ids():
        if vid not in wanted:
            rendered.remove_vertex(vid)
            vertices_removed += 1

    # 3. addition
    vertices_added = edges_added = 0
    for source, target, meta in iter_pairs(authoritative):
        if not rendered.has_vertex(source):
            rendered.create_vertex(source, label=vertex_label(source, meta.source.size_bytes),
                                   size_bytes=meta.source.size_bytes)
            vertices_added += 1
        if not rendered.has_vertex(target):
            rendered.create_vertex(target, label=vertex_label(target, meta.target.size_bytes),
                                   size_bytes=meta.target.size_bytes)
            vertices_added += 1
        if not rendered.has_edge(source, target):
            rendered.add_edge(source, target)
            edges_added += 1

    # 4. render once, then re-bind: a redraw invalidates the old edge elements
    render(rendered)
    rendered.clear_hover_bindings()
    if on_hover_start is not None and on_hover_end is not None:
        for key in rendered.edge_keys():
            rendered.bind_hover(key, on_hover_start, on_hover_end)

    logger.debug(
        "Reconciled revision %d: -%d/+%d edges, -%d/+%d vertices (%d edges, %d vertices drawn)",
        rendered.revision, edges_removed, edges_added, vertices_removed, vertices_added,
        rendered.edge_count(), rendered.vertex_count(),
    )


class GraphDiffEngine:
    """
    reconcile() with the render primitive and the hover handlers fixed
    at construction, so callers only pass the two graphs.
    """

    def __init__(
        self,
        render: RenderPrimitive = layout_graph,
        on_hover_start: Optional[HoverHandler] = None,
        on_hover_end: Optional[HoverHandler] = None,
    ):
        self.render = render
        self.on_hover_start = on_hover_start
        self.on_hover_end = on_hover_end

    def reconcile(self, rendered: RenderedGraph, authoritative: AuthoritativeGraph) -> None:
        reconcile(
            rendered,
            authoritative,
            render=self.render,
            on_hover_start=self.on_hover_start,
            on_hover_end=self.on_hover_end,
        )
