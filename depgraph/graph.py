"""
graph.py — Rendered Graph Container
===================================
The viewer's own picture of the dependency graph: which vertices and
edges are currently drawn, where the layout put them and how they are
painted.  The diff engine is its only structural writer; the highlight
layer only touches visual state.

Responsibilities:
  1. CRUD on vertices & edges                     (add / remove / get)
  2. Tolerant lookups for recolouring             (find_vertex / find_edge)
  3. Element index                                (vertex id → SVG element id)
  4. Per-edge hover bindings                      (rebuilt after every render)
  5. Loading placeholder                          (shown until the first snapshot)
  6. Style reset                                  (wipe highlight, keep structure)

Design decisions:
  - Vertices keyed by id, edges keyed by (source, target) for O(1) lookup.
  - A separate incidence dict `_incident[vertex_id] → {edge_key, …}` is
    maintained incrementally so removing a vertex drops its edges in
    O(degree).  Every drawn edge therefore always has both endpoints drawn.
  - Element ids are handed out once per vertex and never reused, so the
    browser can address a glyph directly instead of walking the SVG tree.
"""

import itertools
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from depgraph.node import Vertex
from depgraph.edge import Edge, EdgeKey


PLACEHOLDER_ID = "loading"

HoverHandler = Callable[[str, str], object]


class RenderedGraph:
    """
    Attributes:
        vertices : {vertex_id: Vertex}
        edges    : {(source, target): Edge}
        revision : Incremented by every render pass.
        width    : Laid-out drawing width.
        height   : Laid-out drawing height.
    """

    def __init__(self):
        self.vertices: Dict[str, Vertex]   = {}
        self.edges:    Dict[EdgeKey, Edge] = {}
        self.revision: int                 = 0
        self.width:    float               = 0.0
        self.height:   float               = 0.0
        self._incident:    Dict[str, Set[EdgeKey]] = {}
        self._element_ids: Dict[str, str]          = {}
        self._element_seq                          = itertools.count(1)
        self._hover:       Dict[EdgeKey, Tuple[HoverHandler, HoverHandler]] = {}
        self._placeholder: bool                    = False

    # ==================================================================
    # VERTEX CRUD
    # ==================================================================
    def add_vertex(self, vertex: Vertex) -> Vertex:
        self.vertices[vertex.id] = vertex
        self._incident.setdefault(vertex.id, set())
        if vertex.id not in self._element_ids:
            self._element_ids[vertex.id] = f"vertex-{next(self._element_seq)}"
        return vertex

    def create_vertex(self, vertex_id: str, label: Optional[str] = None,
                      size_bytes: Optional[int] = None) -> Vertex:
        """Convenience: create + add in one call."""
        return self.add_vertex(Vertex(vertex_id, label=label, size_bytes=size_bytes))

    def remove_vertex(self, vertex_id: str) -> None:
        if vertex_id not in self.vertices:
            return
        # remove every edge touching this vertex
        for key in list(self._incident.get(vertex_id, ())):
            self.remove_edge(*key)
        del self.vertices[vertex_id]
        self._incident.pop(vertex_id, None)
        self._element_ids.pop(vertex_id, None)
        if vertex_id == PLACEHOLDER_ID:
            self._placeholder = False

    def has_vertex(self, vertex_id: str) -> bool:
        return vertex_id in self.vertices

    def find_vertex(self, vertex_id: str) -> Optional[Vertex]:
        return self.vertices.get(vertex_id)

    def element_id(self, vertex_id: str) -> Optional[str]:
        """SVG element id owning the glyph of `vertex_id` (None if not drawn)."""
        return self._element_ids.get(vertex_id)

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, source: str, target: str) -> Edge:
        if source not in self.vertices or target not in self.vertices:
            raise KeyError(f"cannot draw edge ({source}, {target}): endpoint not drawn")
        key = (source, target)
        edge = self.edges.get(key)
        if edge is None:
            edge = Edge(source, target)
            self.edges[key] = edge
            self._incident[source].add(key)
            self._incident[target].add(key)
        return edge

    def remove_edge(self, source: str, target: str) -> None:
        key = (source, target)
        if key not in self.edges:
            return
        del self.edges[key]
        self._incident.get(source, set()).discard(key)
        self._incident.get(target, set()).discard(key)
        self._hover.pop(key, None)

    def has_edge(self, source: str, target: str) -> bool:
        return (source, target) in self.edges

    def find_edge(self, source: str, target: str) -> Optional[Edge]:
        return self.edges.get((source, target))

    # ==================================================================
    # HOVER BINDINGS
    # ==================================================================
    def clear_hover_bindings(self) -> None:
        self._hover.clear()

    def bind_hover(self, key: EdgeKey, on_start: HoverHandler, on_end: HoverHandler) -> None:
        if key in self.edges:
            self._hover[key] = (on_start, on_end)

    def hover_binding(self, key: EdgeKey) -> Optional[Tuple[HoverHandler, HoverHandler]]:
        return self._hover.get(key)

    def bound_edges(self) -> List[EdgeKey]:
        return list(self._hover)

    # ==================================================================
    # LOADING PLACEHOLDER
    # ==================================================================
    def show_placeholder(self) -> None:
        self.create_vertex(PLACEHOLDER_ID, label=PLACEHOLDER_ID)
        self._placeholder = True

    def remove_placeholder(self) -> None:
        if self._placeholder:
            self.remove_vertex(PLACEHOLDER_ID)

    @property
    def has_placeholder(self) -> bool:
        return self._placeholder

    # ==================================================================
    # STYLE RESET (keep structure, wipe highlight)
    # ==================================================================
    def reset_styles(self) -> None:
        for vertex in self.vertices.values():
            vertex.reset()
        for edge in self.edges.values():
            edge.reset()

    def emphasized_vertices(self) -> List[str]:
        return [v.id for v in self.vertices.values() if v.emphasized]

    def emphasized_edges(self) -> List[EdgeKey]:
        return [e.key for e in self.edges.values() if e.emphasized]

    # ==================================================================
    # UTILITY
    # ==================================================================
    def vertex_ids(self) -> List[str]:
        return list(self.vertices.keys())

    def edge_keys(self) -> List[EdgeKey]:
        return list(self.edges.keys())

    def iter_edges(self) -> Iterator[Edge]:
        return iter(list(self.edges.values()))

    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)

    def __repr__(self) -> str:
        return f"RenderedGraph(vertices={self.vertex_count()}, edges={self.edge_count()}, revision={self.revision})"
