"""
edge_list.py — Edge List Renderer
=================================
The two lists under the graph: the live edges (each with a Remove
button) and the shopping cart (each with a Return button).

A list is rebuilt wholesale from an adjacency map on every snapshot;
rows are never patched in place.  Each row:
  • shows "from -> to", the dependency's size and, when known, its usage count
  • exposes the id `<container_id>-<from><to>` the highlight layer paints
  • forwards hover-start / hover-end to the highlight layer
  • on activation issues its mutation and hands the response Snapshot
    back to the orchestrator, which redraws graph and both lists from it
"""

import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from depgraph import AuthoritativeGraph, EdgeKey, Snapshot, iter_pairs
from cartui.sizes import format_size
from cutclient import BackendError


logger = logging.getLogger(__name__)


EDGE_LIST_ID = "edgeList"
SHOPPING_CART_ID = "shoppingCart"


class ListAction(Enum):
    REMOVE = "remove"   # DELETE /edge
    RETURN = "return"   # POST /edge

    @property
    def label(self) -> str:
        return "Remove" if self is ListAction.REMOVE else "Return"


class ActionOutcome(Enum):
    APPLIED  = "applied"    # mutation answered, snapshot handed on
    NO_ROW   = "no_row"     # no such row in this list
    FAILED   = "failed"     # backend call failed, screen unchanged


Mutation = Callable[[str, str], Awaitable[Snapshot]]
SnapshotHandler = Callable[[Snapshot], None]
HoverHandler = Callable[[str, str], object]


# ---------------------------------------------------------------------------
# Row
# ---------------------------------------------------------------------------
@dataclass
class EdgeRow:
    row_id:      str
    source:      str
    target:      str
    size_text:   str
    num_usages:  Optional[int] = None
    highlighted: bool          = False
    bold:        bool          = False

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)

    @property
    def emphasized(self) -> bool:
        return self.highlighted or self.bold

    def emphasize(self, bold: bool = False) -> None:
        self.highlighted = True
        if bold:
            self.bold = True

    def reset(self) -> None:
        self.highlighted = False
        self.bold = False


def row_id(container_id: str, source: str, target: str) -> str:
    return f"{container_id}-{source}{target}"


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------
class EdgeList:
    """
    Attributes:
        container_id : DOM id of the list container ("edgeList" / "shoppingCart").
        action       : What the row button does.
        rows         : {(source, target): EdgeRow} in payload order.
    """

    def __init__(
        self,
        container_id: str,
        action: ListAction,
        mutate: Mutation,
        on_snapshot: SnapshotHandler,
        on_hover_start: HoverHandler,
        on_hover_end: HoverHandler,
    ):
        self.container_id = container_id
        self.action = action
        self.rows: Dict[EdgeKey, EdgeRow] = {}
        self._mutate = mutate
        self._on_snapshot = on_snapshot
        self._on_hover_start = on_hover_start
        self._on_hover_end = on_hover_end

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, entries: AuthoritativeGraph) -> None:
        """Replace every row with one row per (from, to) pair of `entries`."""
        self.rows = {}
        for source, target, meta in iter_pairs(entries):
            self.rows[(source, target)] = EdgeRow(
                row_id=row_id(self.container_id, source, target),
                source=source,
                target=target,
                size_text=format_size(meta.target.size_bytes),
                num_usages=meta.num_usages,
            )

    def to_html(self) -> str:
        parts = []
        for row in self.rows.values():
            parts.append(_render_row(row, self.action))
        return "\n".join(parts)

    # ------------------------------------------------------------------
    # Lookups (tolerant of absence)
    # ------------------------------------------------------------------
    def find_row(self, source: str, target: str) -> Optional[EdgeRow]:
        return self.rows.get((source, target))

    def keys(self) -> List[EdgeKey]:
        return list(self.rows)

    def emphasized_rows(self) -> List[str]:
        return [row.row_id for row in self.rows.values() if row.emphasized]

    def reset_styles(self) -> None:
        for row in self.rows.values():
            row.reset()

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------
    def hover_start(self, source: str, target: str):
        if (source, target) not in self.rows:
            logger.debug("Hover on missing row %s", row_id(self.container_id, source, target))
            return None
        return self._on_hover_start(source, target)

    def hover_end(self, source: str, target: str):
        return self._on_hover_end(source, target)

    async def activate(self, source: str, target: str) -> ActionOutcome:
        """
        Press the row's button.  On success the response snapshot is handed
        on; if the row is gone or the call fails nothing on screen changes.
        """
        if (source, target) not in self.rows:
            logger.debug("Activation of missing row %s", row_id(self.container_id, source, target))
            return ActionOutcome.NO_ROW
        try:
            snapshot = await self._mutate(source, target)
        except BackendError as e:
            logger.error("%s of edge (%s, %s) failed: %s", self.action.label, source, target, e)
            return ActionOutcome.FAILED
        self._on_snapshot(snapshot)
        return ActionOutcome.APPLIED


def _render_row(row: EdgeRow, action: ListAction) -> str:
    background = "red" if row.highlighted else "transparent"
    weight = "bold" if row.bold else "normal"
    usages = ""
    if row.num_usages is not None:
        usages = f'<div class="usages">{row.num_usages} usages</div>'
    return (
        f'<div class="edgeRow" id="{html.escape(row.row_id, quote=True)}" '
        f'data-from="{html.escape(row.source, quote=True)}" data-to="{html.escape(row.target, quote=True)}" '
        f'style="background-color: {background}; font-weight: {weight};">'
        f'<div class="edge">{html.escape(row.source)} -&gt; {html.escape(row.target)}</div>'
        f'<div class="size">{html.escape(row.size_text)}</div>'
        f'{usages}'
        f'<button type="button" class="right" data-action="{action.value}">{action.label}</button>'
        f'</div>'
    )
