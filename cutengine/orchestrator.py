"""
orchestrator.py — Interaction Orchestrator
==========================================
Owns the whole view: the rendered graph, the edge list, the shopping
cart list and the highlight controller, and routes every gesture to the
backend and back.

    load()           GET /graph and GET /shoppingCart, unordered
    reset()          GET /reset, then graph + both lists from that ONE response
    remove_edge()    Remove button in the edge list   (DELETE /edge)
    return_edge()    Return button in the cart list   (POST /edge)
    hover_start()    edge line or list row entered
    hover_end()      edge line or list row left
    view()           current SVG + both lists as HTML

Every method must run on the UI loop: the orchestrator is the single
writer of the state it owns and takes no locks.

Design decisions:
  - A mutation response carries graph AND cart; all three views are
    redrawn from it.  Only the initial load reads the two separately.
  - The cart list is always drawn minus the pairs of the latest graph,
    so a torn initial load cannot show one edge in both lists.
  - Backend failures are logged and leave the screen as it was;
    `last_error` keeps the message for the HTTP layer.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from depgraph import AuthoritativeGraph, RenderedGraph, Snapshot, exclude_pairs, pair_count
from cartui import (
    CONFIG,
    EDGE_LIST_ID,
    SHOPPING_CART_ID,
    ActionOutcome,
    CanvasConfig,
    EdgeList,
    ListAction,
    layout_graph,
    render_canvas,
)
from cutclient import BackendClient, BackendError
from cutengine.diff import GraphDiffEngine, RenderPrimitive
from cutengine.highlight import HighlightController


logger = logging.getLogger(__name__)

GRAPH_ORIGIN = "graph"


class Orchestrator:
    """
    Attributes:
        client         : BackendClient for the cut backend.
        graph          : The RenderedGraph (starts with the loading placeholder).
        authoritative  : Latest graph snapshot seen.
        shopping_cart  : Latest cart snapshot seen.
        highlight      : HighlightController painting graph and lists.
        edge_list      : Rows of the live edges ("edgeList").
        cart_list      : Rows of the cut edges ("shoppingCart").
        last_error     : Message of the most recent backend failure, or None.
    """

    def __init__(
        self,
        client: BackendClient,
        guard_stale_previews: bool = False,
        render: RenderPrimitive = layout_graph,
        canvas_config: CanvasConfig = CONFIG,
    ):
        self.client = client
        self.canvas_config = canvas_config
        self.authoritative: AuthoritativeGraph = {}
        self.shopping_cart: AuthoritativeGraph = {}
        self.last_error: Optional[str] = None

        self.graph = RenderedGraph()
        self.graph.show_placeholder()
        render(self.graph)

        self.highlight = HighlightController(
            self.graph, client.hypothetical_cut, guard_stale_previews=guard_stale_previews,
        )
        self.diff = GraphDiffEngine(
            render=render,
            on_hover_start=self.highlight.hover_start,
            on_hover_end=self.highlight.hover_end,
        )
        self.edge_list = EdgeList(
            EDGE_LIST_ID, ListAction.REMOVE, client.cut_edge, self.apply_snapshot,
            self.highlight.hover_start, self.highlight.hover_end,
        )
        self.cart_list = EdgeList(
            SHOPPING_CART_ID, ListAction.RETURN, client.restore_edge, self.apply_snapshot,
            self.highlight.hover_start, self.highlight.hover_end,
        )
        self.highlight.attach(self.edge_list)
        self.highlight.attach(self.cart_list)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    async def load(self) -> bool:
        """Fetch graph and cart independently; True if both arrived."""
        graph_ok, cart_ok = await asyncio.gather(self._load_graph(), self._load_cart())
        return graph_ok and cart_ok

    async def _load_graph(self) -> bool:
        try:
            graph = await self.client.fetch_graph()
        except BackendError as e:
            self._record_failure("Fetching graph", e)
            return False
        self.apply_graph(graph)
        return True

    async def _load_cart(self) -> bool:
        try:
            cart = await self.client.fetch_shopping_cart()
        except BackendError as e:
            self._record_failure("Fetching shopping cart", e)
            return False
        self.shopping_cart = cart
        self._render_cart()
        return True

    # ------------------------------------------------------------------
    # Applying authoritative state
    # ------------------------------------------------------------------
    def apply_graph(self, graph: AuthoritativeGraph) -> None:
        self.authoritative = graph
        self.diff.reconcile(self.graph, graph)
        self.edge_list.render(graph)
        self._render_cart()

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        """Redraw graph, edge list and cart list from one response."""
        self.last_error = None
        self.shopping_cart = snapshot.shopping_cart
        self.apply_graph(snapshot.graph)
        logger.info("Applied snapshot: %d edges in graph, %d in cart",
                    pair_count(snapshot.graph), pair_count(self.cart_view()))

    def cart_view(self) -> AuthoritativeGraph:
        return exclude_pairs(self.shopping_cart, self.authoritative)

    def _render_cart(self) -> None:
        self.cart_list.render(self.cart_view())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def reset(self) -> bool:
        try:
            snapshot = await self.client.reset()
        except BackendError as e:
            self._record_failure("Reset", e)
            return False
        self.apply_snapshot(snapshot)
        return True

    async def remove_edge(self, source: str, target: str) -> ActionOutcome:
        return self._note(await self.edge_list.activate(source, target), "Remove", source, target)

    async def return_edge(self, source: str, target: str) -> ActionOutcome:
        return self._note(await self.cart_list.activate(source, target), "Return", source, target)

    def _note(self, outcome: ActionOutcome, action: str, source: str, target: str) -> ActionOutcome:
        if outcome is ActionOutcome.FAILED:
            self.last_error = f"{action} of edge ({source}, {target}) failed"
        return outcome

    # ------------------------------------------------------------------
    # Hover gestures
    # ------------------------------------------------------------------
    async def hover_start(self, source: str, target: str, origin: str = GRAPH_ORIGIN) -> Optional[asyncio.Task]:
        """Route a hover-start to the handler bound to the element under the pointer."""
        if origin == GRAPH_ORIGIN:
            binding = self.graph.hover_binding((source, target))
            if binding is None:
                logger.debug("Hover on unbound edge (%s, %s)", source, target)
                return None
            return binding[0](source, target)
        return self._list_for(origin).hover_start(source, target)

    async def hover_end(self, source: str, target: str, origin: str = GRAPH_ORIGIN) -> None:
        """Route a hover-end.  The reset runs even if the element has since gone."""
        if origin == GRAPH_ORIGIN:
            binding = self.graph.hover_binding((source, target))
            if binding is not None:
                binding[1](source, target)
            else:
                self.highlight.hover_end(source, target)
            return
        self._list_for(origin).hover_end(source, target)

    def _list_for(self, origin: str) -> EdgeList:
        if origin == EDGE_LIST_ID:
            return self.edge_list
        if origin == SHOPPING_CART_ID:
            return self.cart_list
        raise ValueError(f"unknown gesture origin {origin!r}")

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    async def view(self) -> Dict[str, Any]:
        return {
            "svg":          render_canvas(self.graph, self.canvas_config),
            "edgeList":     self.edge_list.to_html(),
            "shoppingCart": self.cart_list.to_html(),
            "generation":   self.highlight.state.generation,
            "revision":     self.graph.revision,
            "error":        self.last_error,
        }

    async def close(self) -> None:
        await self.highlight.settle()
        await self.client.aclose()

    def _record_failure(self, action: str, error: BackendError) -> None:
        logger.error("%s failed: %s", action, error)
        self.last_error = f"{action} failed: {error}"
