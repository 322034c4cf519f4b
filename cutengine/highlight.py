"""
highlight.py — Hover Highlight Controller
=========================================
Two overlays painted on top of the rendered graph and both lists:

    selection  – the hovered edge: its row goes red + bold, its line red + heavy
    preview    – everything the backend says a cut of that edge would
                 disconnect: rows red, lines red, vertex glyphs red

State machine (selection track):
    any       →  hover_start()  →  SELECTED   (full reset, then the new edge)
    any       →  hover_end()    →  IDLE       (full reset)
    SELECTED  →  hover_end() of another edge  →  SELECTED   (late report, ignored)

The preview track has no states of its own.  hover_start() fires the
/hypotheticalCut query as a task on the running loop and returns; the
task paints whatever comes back.  Nothing cancels it.  hover_end()
therefore resets EVERY row, glyph and line, not just the ones this
controller remembers painting: that reset is what undoes a preview,
however much of it had landed.

A preview that resolves after its hover ended still paints (the next
hover_end clears it).  With `guard_stale_previews` set, a preview paints
only if no hover_start / hover_end happened since it was requested.

Thread safety:
  NOT thread-safe.  Every call must come from the UI loop thread.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Set

from depgraph import CutPreview, EdgeKey, RenderedGraph
from cartui.edge_list import EdgeList
from cutclient import BackendError


logger = logging.getLogger(__name__)

CutQuery = Callable[[str, str], Awaitable[CutPreview]]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class HoverPhase(Enum):
    IDLE     = "idle"
    SELECTED = "selected"


@dataclass
class HighlightState:
    """
    Attributes:
        phase            : Selection track state.
        selected         : Hovered edge, or None.
        preview_edges    : Edges painted by previews since the last reset.
        preview_vertices : Vertices painted by previews since the last reset.
        generation       : Bumped by every hover_start and hover_end.
    """

    phase:            HoverPhase    = HoverPhase.IDLE
    selected:         Optional[EdgeKey] = None
    preview_edges:    Set[EdgeKey]  = field(default_factory=set)
    preview_vertices: Set[str]      = field(default_factory=set)
    generation:       int           = 0


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class HighlightController:

    def __init__(
        self,
        graph: RenderedGraph,
        query: CutQuery,
        guard_stale_previews: bool = False,
    ):
        self.graph = graph
        self.state = HighlightState()
        self.guard_stale_previews = guard_stale_previews
        self._query = query
        self._lists: List[EdgeList] = []
        self._pending: Set[asyncio.Task] = set()

    def attach(self, edge_list: EdgeList) -> None:
        """Register a list whose rows this controller paints and resets."""
        self._lists.append(edge_list)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------
    def hover_start(self, source: str, target: str) -> asyncio.Task:
        """Select (source, target) and fire its hypothetical-cut query."""
        # drop whatever the previous hover (or its late preview) left painted
        self._clear()
        self.state.generation += 1
        self.state.phase = HoverPhase.SELECTED
        self.state.selected = (source, target)

        for edge_list in self._lists:
            row = edge_list.find_row(source, target)
            if row is not None:
                row.emphasize(bold=True)
        edge = self.graph.find_edge(source, target)
        if edge is not None:
            edge.emphasize(heavy=True)

        task = asyncio.get_running_loop().create_task(
            self._preview(source, target, self.state.generation)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def hover_end(self, source: Optional[str] = None, target: Optional[str] = None) -> None:
        """
        Back to baseline: every row, glyph and line, whoever painted it.
        A hover-end naming an edge other than the current selection is a
        late report from an earlier hover and is ignored.
        """
        key = (source, target)
        if source is not None and self.state.phase is HoverPhase.SELECTED and key != self.state.selected:
            logger.debug("Ignoring hover-end of (%s, %s): (%s, %s) is selected",
                         source, target, *self.state.selected)
            return
        self.state.generation += 1
        self._clear()

    def _clear(self) -> None:
        self.state.phase = HoverPhase.IDLE
        self.state.selected = None
        self.state.preview_edges.clear()
        self.state.preview_vertices.clear()

        self.graph.reset_styles()
        for edge_list in self._lists:
            edge_list.reset_styles()

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------
    async def _preview(self, source: str, target: str, generation: int) -> None:
        try:
            preview = await self._query(source, target)
        except BackendError as e:
            logger.error("Hypothetical cut of (%s, %s) failed: %s", source, target, e)
            return

        if self.guard_stale_previews and generation != self.state.generation:
            logger.debug("Dropping stale preview for (%s, %s): generation %d, now %d",
                         source, target, generation, self.state.generation)
            return
        self.apply_preview(preview)

    def apply_preview(self, preview: CutPreview) -> None:
        for source, target in preview.edge_keys():
            self.state.preview_edges.add((source, target))
            for edge_list in self._lists:
                row = edge_list.find_row(source, target)
                if row is not None:
                    row.emphasize()
            edge = self.graph.find_edge(source, target)
            if edge is not None:
                edge.emphasize()

        for vid in preview.vertices:
            self.state.preview_vertices.add(vid)
            vertex = self.graph.find_vertex(vid)
            if vertex is not None:
                vertex.emphasize()

        logger.debug("Painted preview: %d edges, %d vertices",
                     len(preview.edge_keys()), len(preview.vertices))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def pending_previews(self) -> int:
        return len(self._pending)

    async def settle(self) -> None:
        """Wait for every in-flight preview to finish painting (or fail)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def emphasized_elements(self) -> List[str]:
        """Ids of every row, glyph and line currently painted off-baseline."""
        out: List[str] = []
        for edge_list in self._lists:
            out.extend(edge_list.emphasized_rows())
        out.extend(f"vertex:{vid}" for vid in self.graph.emphasized_vertices())
        out.extend(f"edge:{s}->{t}" for s, t in self.graph.emphasized_edges())
        return out
