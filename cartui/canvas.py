"""
canvas.py — Layered Layout & SVG Renderer
==========================================
Two pieces that together are the viewer's rendering primitive:

  • layout_graph(graph)   – assigns ranks, glyph sizes, positions and edge
                            polylines to a RenderedGraph (mutates geometry only)
  • render_canvas(graph)  – RenderedGraph → SVG string

Design decisions:
  - Layout is a longest-path layering from the sources, top to bottom,
    the way a dependency graph reads: a module sits above everything it
    depends on.  Ranks are networkx topological generations of the
    graph minus its self-loops and the edge closing each cycle, so a
    cyclic snapshot still lays out.
  - Within a rank vertices are ordered by id.  The same snapshot always
    lays out the same way, so an add/remove elsewhere does not shuffle
    the whole picture.
  - Colouring is a dict lookup: state → colour.  A heavy (hovered) edge
    only changes stroke width.
  - render_canvas does NOT mutate.  The caller lays out first.
"""

import html
from typing import Dict, List, Tuple

import networkx as nx

from depgraph import RenderedGraph, Vertex, Edge, VertexState


# ---------------------------------------------------------------------------
# Visual Config
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    bg:             str   = "#ffffff"
    initial_scale:  float = 0.4
    offset_x:       float = 20.0
    margin:         float = 20.0

    # vertex stroke (state → colour)
    vertex_colors: Dict[str, str] = {
        "default":  "#000000",
        "emphasis": "#ff0000",
    }

    # edge stroke (state → colour)
    edge_colors: Dict[str, str] = {
        "default":  "#000000",
        "emphasis": "#ff0000",
    }

    # vertex glyph
    vertex_fill:        str   = "#ffffff"
    vertex_stroke_width: float = 1.5
    char_width:         float = 7.5
    line_height:        float = 16.0
    padding_x:          float = 10.0
    padding_y:          float = 10.0
    label_size:         int   = 14

    # edges
    edge_width:         str   = "1.5px"
    edge_width_heavy:   str   = "5px"
    edge_arrow_size:    float = 8.0

    # spacing
    rank_sep:           float = 60.0
    vertex_sep:         float = 40.0


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
def layout_graph(graph: RenderedGraph, config: CanvasConfig = CONFIG) -> None:
    """Lay out every drawn vertex and edge, then bump the graph revision."""
    ranks = _assign_ranks(graph)

    for vertex in graph.vertices.values():
        lines = vertex.label_lines
        vertex.width = max(len(line) for line in lines) * config.char_width + 2 * config.padding_x
        vertex.height = len(lines) * config.line_height + 2 * config.padding_y
        vertex.rank = ranks.get(vertex.id, 0)

    layers: Dict[int, List[Vertex]] = {}
    for vertex in sorted(graph.vertices.values(), key=lambda v: v.id):
        layers.setdefault(vertex.rank, []).append(vertex)

    layer_widths = {
        rank: sum(v.width for v in members) + config.vertex_sep * (len(members) - 1)
        for rank, members in layers.items()
    }
    total_width = max(layer_widths.values(), default=0.0)

    y = config.margin
    for rank in sorted(layers):
        members = layers[rank]
        layer_height = max(v.height for v in members)
        x = config.margin + (total_width - layer_widths[rank]) / 2
        for vertex in members:
            vertex.x = x + vertex.width / 2
            vertex.y = y + layer_height / 2
            x += vertex.width + config.vertex_sep
        y += layer_height + config.rank_sep

    for edge in graph.edges.values():
        edge.points = _edge_points(graph, edge)

    graph.width = total_width + 2 * config.margin
    graph.height = max(y - config.rank_sep + config.margin, 2 * config.margin) if layers else 0.0
    graph.revision += 1


def _assign_ranks(graph: RenderedGraph) -> Dict[str, int]:
    """Longest-path layering over the graph minus the edges that close a cycle."""
    dag = nx.DiGraph()
    dag.add_nodes_from(sorted(graph.vertices))
    dag.add_edges_from(sorted(key for key in graph.edges if key[0] != key[1]))

    while True:
        try:
            cycle = nx.find_cycle(dag)
        except nx.NetworkXNoCycle:
            break
        dag.remove_edge(*cycle[-1][:2])

    ranks: Dict[str, int] = {}
    for rank, generation in enumerate(nx.topological_generations(dag)):
        for vid in generation:
            ranks[vid] = rank
    return ranks


def _edge_points(graph: RenderedGraph, edge: Edge) -> List[Tuple[float, float]]:
    src = graph.vertices[edge.source]
    tgt = graph.vertices[edge.target]

    if edge.is_self_loop:
        right = src.x + src.width / 2
        return [
            (right, src.y - src.height / 4),
            (right + 25, src.y - src.height / 4),
            (right + 25, src.y + src.height / 4),
            (right, src.y + src.height / 4),
        ]

    if tgt.rank > src.rank:
        return [(src.x, src.y + src.height / 2), (tgt.x, tgt.y - tgt.height / 2)]
    if tgt.rank < src.rank:
        return [(src.x, src.y - src.height / 2), (tgt.x, tgt.y + tgt.height / 2)]
    # same rank: side to side
    if tgt.x >= src.x:
        return [(src.x + src.width / 2, src.y), (tgt.x - tgt.width / 2, tgt.y)]
    return [(src.x - src.width / 2, src.y), (tgt.x + tgt.width / 2, tgt.y)]


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(graph: RenderedGraph, config: CanvasConfig = CONFIG) -> str:
    """
    Returns an SVG string.  Edges carry data-from / data-to so the page
    can report hover gestures; vertex glyphs carry the element id handed
    out by the graph's element index.
    """
    scale = config.initial_scale
    height = graph.height * scale + 40

    svg_parts = [
        f'<svg width="100%" height="{height:.0f}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};" '
        f'data-revision="{graph.revision}" data-offset-x="{config.offset_x}" data-scale="{scale}">',
        f'<g class="output" transform="translate({config.offset_x},0) scale({scale})">',
    ]

    # -- edges (draw first so glyphs sit on top) --
    for edge in graph.edges.values():
        svg_parts.append(_render_edge(edge, config))

    # -- vertices --
    for vertex in graph.vertices.values():
        svg_parts.append(_render_vertex(graph, vertex, config))

    svg_parts.append("</g>")
    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


# ---------------------------------------------------------------------------
# Vertex Rendering
# ---------------------------------------------------------------------------
def _render_vertex(graph: RenderedGraph, vertex: Vertex, config: CanvasConfig) -> str:
    stroke = config.vertex_colors.get(vertex.state.value, config.vertex_colors["default"])
    left = vertex.x - vertex.width / 2
    top = vertex.y - vertex.height / 2

    lines = vertex.label_lines
    first_dy = -(len(lines) - 1) * config.line_height / 2
    tspans = []
    for i, line in enumerate(lines):
        dy = first_dy if i == 0 else config.line_height
        tspans.append(
            f'<tspan x="{vertex.x}" dy="{dy}" stroke="{stroke}" '
            f'stroke-width="{0.5 if vertex.state is VertexState.EMPHASIS else 0}">'
            f'{html.escape(line)}</tspan>'
        )

    parts = [
        f'<g class="node" id="{graph.element_id(vertex.id)}" data-id="{html.escape(vertex.id, quote=True)}">',
        f'  <rect x="{left}" y="{top}" width="{vertex.width}" height="{vertex.height}" rx="4" '
        f'fill="{config.vertex_fill}" stroke="{stroke}" stroke-width="{config.vertex_stroke_width}"/>',
        f'  <text y="{vertex.y + 5}" text-anchor="middle" font-size="{config.label_size}" '
        f'font-family="\'DM Sans\', sans-serif">{"".join(tspans)}</text>',
        '</g>',
    ]
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Edge Rendering
# ---------------------------------------------------------------------------
def _render_edge(edge: Edge, config: CanvasConfig) -> str:
    if len(edge.points) < 2:
        return ""  # not laid out yet

    stroke = config.edge_colors.get(edge.state.value, config.edge_colors["default"])
    stroke_width = config.edge_width_heavy if edge.heavy else config.edge_width

    d = "M" + " L".join(f"{x},{y}" for x, y in edge.points)
    (x1, y1), (x2, y2) = edge.points[-2], edge.points[-1]

    parts = [
        f'<g class="edgePath" data-from="{html.escape(edge.source, quote=True)}" '
        f'data-to="{html.escape(edge.target, quote=True)}">',
        f'  <path d="{d}" fill="none" style="stroke: {stroke}; stroke-width: {stroke_width};"/>',
        _render_arrow(x1, y1, x2, y2, stroke, config),
        '</g>',
    ]
    return "\n".join(parts)


def _render_arrow(x1: float, y1: float, x2: float, y2: float, color: str, config: CanvasConfig) -> str:
    """Draw an arrowhead at (x2, y2) pointing along (x1, y1) → (x2, y2)."""
    dx, dy = x2 - x1, y2 - y1
    dist = (dx * dx + dy * dy) ** 0.5
    if dist < 0.001:
        return ""
    ux, uy = dx / dist, dy / dist
    size = config.edge_arrow_size
    # perpendicular
    px, py = -uy, ux
    p1_x = x2 - ux * size + px * (size * 0.5)
    p1_y = y2 - uy * size + py * (size * 0.5)
    p2_x = x2 - ux * size - px * (size * 0.5)
    p2_y = y2 - uy * size - py * (size * 0.5)
    return f'  <polygon points="{x2},{y2} {p1_x},{p1_y} {p2_x},{p2_y}" fill="{color}"/>'
