"""
edge.py — Rendered Edge
=======================
A drawn dependency: `source` depends on `target`.  Carries its own visual
state so the renderer can paint the hovered edge and the edges of a
hypothetical cut.

Design decisions:
  - `source` and `target` are vertex-id strings, NOT Vertex references.
    The pair (source, target) is the identity; the backend never sends
    parallel edges.
  - Colour and weight are independent: a hovered edge is red AND heavy,
    an edge named by a cut preview is only red.  A preview painting the
    hovered edge keeps it heavy.
"""

from enum import Enum
from typing import Tuple


EdgeKey = Tuple[str, str]


# ---------------------------------------------------------------------------
# Edge State Enum: visual encoding for the renderer
# ---------------------------------------------------------------------------
class EdgeState(Enum):
    DEFAULT  = "default"    # thin black line
    EMPHASIS = "emphasis"   # red line


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------
class Edge:
    """
    Attributes:
        source : ID of the depending vertex.
        target : ID of the dependency.
        state  : EdgeState (stroke colour).
        heavy  : True while the edge is the hovered selection (stroke weight).
        points : Polyline computed by the layout pass.
    """

    __slots__ = ("source", "target", "state", "heavy", "points")

    def __init__(self, source: str, target: str):
        self.source: str       = source
        self.target: str       = target
        self.state:  EdgeState = EdgeState.DEFAULT
        self.heavy:  bool      = False
        self.points: list      = []

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    def emphasize(self, heavy: bool = False) -> None:
        self.state = EdgeState.EMPHASIS
        if heavy:
            self.heavy = True

    def reset(self) -> None:
        """Back to baseline styling."""
        self.state = EdgeState.DEFAULT
        self.heavy = False

    @property
    def emphasized(self) -> bool:
        return self.state is EdgeState.EMPHASIS or self.heavy

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.source} → {self.target}, state={self.state.value}, heavy={self.heavy})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)
