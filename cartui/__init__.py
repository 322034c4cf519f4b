"""
cartui/
-------
Presentation layer.

    from cartui import format_size, vertex_label
    from cartui import layout_graph, render_canvas, CanvasConfig
    from cartui import EdgeList, EdgeRow, ListAction
"""

from cartui.sizes  import format_size, vertex_label, UNKNOWN_SIZE
from cartui.canvas import layout_graph, render_canvas, CanvasConfig, CONFIG
from cartui.edge_list import (
    EDGE_LIST_ID,
    SHOPPING_CART_ID,
    ActionOutcome,
    EdgeList,
    EdgeRow,
    ListAction,
    row_id,
)

__all__ = [
    "format_size",
    "vertex_label",
    "UNKNOWN_SIZE",
    "layout_graph",
    "render_canvas",
    "CanvasConfig",
    "CONFIG",
    "EDGE_LIST_ID",
    "SHOPPING_CART_ID",
    "ActionOutcome",
    "EdgeList",
    "EdgeRow",
    "ListAction",
    "row_id",
]
