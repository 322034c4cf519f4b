"""
cutengine/
----------
Reconciliation, highlighting and gesture routing.

    from cutengine import reconcile, GraphDiffEngine
    from cutengine import HighlightController, HighlightState, HoverPhase
    from cutengine import Orchestrator, UiLoop
"""

from cutengine.diff         import reconcile, GraphDiffEngine
from cutengine.highlight    import HighlightController, HighlightState, HoverPhase
from cutengine.orchestrator import Orchestrator, GRAPH_ORIGIN
from cutengine.loop         import UiLoop

__all__ = [
    "reconcile",
    "GraphDiffEngine",
    "HighlightController",
    "HighlightState",
    "HoverPhase",
    "Orchestrator",
    "GRAPH_ORIGIN",
    "UiLoop",
]
