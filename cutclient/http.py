"""
HTTP client for the cut backend.

Uses httpx.AsyncClient so every backend call is a suspension point on
the viewer's UI loop and nothing else blocks it.  Failures are reported
once, as a BackendError subclass; nothing is retried.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from depgraph.payload import (
    AuthoritativeGraph,
    CutPreview,
    PayloadError,
    Snapshot,
    parse_adjacency,
)


logger = logging.getLogger(__name__)

# Default timeout for backend requests (seconds)
DEFAULT_TIMEOUT = 10.0


class BackendError(Exception):
    """Base exception for cut backend errors."""
    pass


class BackendTransportError(BackendError):
    """Raised when the request never produced a response (connect, timeout, protocol)."""
    pass


class BackendStatusError(BackendError):
    """Raised when the backend answers with a non-2xx status."""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


class BackendPayloadError(BackendError):
    """Raised when the response body is not JSON or not the expected shape."""
    pass


class BackendClient:
    """
    Client for the six calls the viewer makes.

    Every method returns parsed payload objects rather than raw JSON:
    adjacency maps for /graph and /shoppingCart, a Snapshot for the
    calls that answer with {graph, shoppingCart}, a CutPreview for
    /hypotheticalCut.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Root URL of the cut backend
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------
    async def fetch_graph(self) -> AuthoritativeGraph:
        """GET /graph"""
        return self._adjacency(await self._request("GET", "/graph"))

    async def fetch_shopping_cart(self) -> AuthoritativeGraph:
        """GET /shoppingCart"""
        return self._adjacency(await self._request("GET", "/shoppingCart"))

    async def cut_edge(self, source: str, target: str) -> Snapshot:
        """DELETE /edge: move (source, target) into the shopping cart."""
        return self._snapshot(await self._request("DELETE", "/edge", _edge_body(source, target)))

    async def restore_edge(self, source: str, target: str) -> Snapshot:
        """POST /edge: put (source, target) back into the graph."""
        return self._snapshot(await self._request("POST", "/edge", _edge_body(source, target)))

    async def hypothetical_cut(self, source: str, target: str) -> CutPreview:
        """POST /hypotheticalCut: what would fall away if (source, target) were cut."""
        raw = await self._request("POST", "/hypotheticalCut", _edge_body(source, target))
        try:
            return CutPreview.from_json(raw)
        except PayloadError as e:
            raise BackendPayloadError(f"/hypotheticalCut: {e}") from e

    async def reset(self) -> Snapshot:
        """GET /reset: restore the original graph and empty the cart."""
        return self._snapshot(await self._request("GET", "/reset"))

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------
    async def _request(self, method: str, path: str, body: Optional[Dict[str, str]] = None) -> Any:
        logger.debug("%s %s %s", method, path, body or "")
        try:
            response = await self._client.request(method, path, json=body)
        except httpx.TimeoutException as e:
            raise BackendTransportError(f"Timeout on {method} {path}: {e}") from e
        except httpx.HTTPError as e:
            raise BackendTransportError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise BackendStatusError(response.status_code, f"{method} {path}: {response.text.strip()}")

        try:
            return response.json()
        except ValueError as e:
            raise BackendPayloadError(f"{method} {path}: response is not JSON") from e

    @staticmethod
    def _adjacency(raw: Any) -> AuthoritativeGraph:
        try:
            return parse_adjacency(raw)
        except PayloadError as e:
            raise BackendPayloadError(str(e)) from e

    @staticmethod
    def _snapshot(raw: Any) -> Snapshot:
        try:
            return Snapshot.from_json(raw)
        except PayloadError as e:
            raise BackendPayloadError(str(e)) from e


def _edge_body(source: str, target: str) -> Dict[str, str]:
    return {"from": source, "to": target}
