"""
node.py — Rendered Vertex
=========================
One drawn resource in the dependency graph.  Carries its display label,
the size it was first drawn with, its layout position and the visual
state the highlight layer paints onto it.

Design decisions:
  - Identity is the vertex id string the backend uses (a module path).
    Two Vertex objects with the same id are the same vertex.
  - The label is fixed when the vertex is first drawn.  Later snapshots
    never relabel an already-drawn vertex.
  - Geometry (x, y, width, height) is written only by the layout
    primitive; everything else treats it as read-only.
"""

from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Vertex State Enum: visual encoding for the renderer
# ---------------------------------------------------------------------------
class VertexState(Enum):
    DEFAULT  = "default"    # black outline
    EMPHASIS = "emphasis"   # red outline, part of a hypothetical cut


# ---------------------------------------------------------------------------
# Vertex
# ---------------------------------------------------------------------------
class Vertex:
    """
    Attributes:
        id         : Vertex id as sent by the backend.
        label      : Text drawn inside the glyph ("<id>\\n<size>").
        size_bytes : Size reported when the vertex was first drawn (None = unknown).
        x, y       : Centre of the glyph, set by the layout pass.
        width      : Glyph width, set by the layout pass.
        height     : Glyph height, set by the layout pass.
        rank       : Layer index assigned by the layout pass.
        state      : VertexState for visual encoding.
    """

    __slots__ = ("id", "label", "size_bytes", "x", "y", "width", "height",
                 "rank", "state")

    def __init__(
        self,
        vertex_id: str,
        label: Optional[str] = None,
        size_bytes: Optional[int] = None,
    ):
        self.id:         str           = vertex_id
        self.label:      str           = label or vertex_id
        self.size_bytes: Optional[int] = size_bytes
        self.x:          float         = 0.0
        self.y:          float         = 0.0
        self.width:      float         = 0.0
        self.height:     float         = 0.0
        self.rank:       int           = 0
        self.state:      VertexState   = VertexState.DEFAULT

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    def emphasize(self) -> None:
        self.state = VertexState.EMPHASIS

    def reset(self) -> None:
        """Back to baseline styling."""
        self.state = VertexState.DEFAULT

    @property
    def emphasized(self) -> bool:
        return self.state is VertexState.EMPHASIS

    @property
    def label_lines(self):
        return self.label.split("\n")

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Vertex(id={self.id}, label={self.label!r}, state={self.state.value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Vertex) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
