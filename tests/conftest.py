"""
Pytest configuration and shared fixtures.

The cut backend is faked in-process: FakeBackend keeps a graph and a
shopping cart the way the real server does and answers through
httpx.MockTransport, so BackendClient runs unmodified.
"""
import asyncio
import copy
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import httpx
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cutclient import BackendClient
from cutengine import Orchestrator


def meta(from_size: Optional[int] = None, to_size: Optional[int] = None, usages: Optional[int] = None) -> dict:
    """EdgeMeta as the backend encodes it."""
    out: Dict[str, Any] = {"From": {"SizeBytes": from_size}, "To": {"SizeBytes": to_size}}
    if usages is not None:
        out["NumUsages"] = usages
    return out


# A → B, the single-edge scenario
SCENARIO_GRAPH = {"A": {"B": meta(500000, 2000000)}}

# A → B → C, A → D
CHAIN_GRAPH = {
    "A": {"B": meta(500000, 2000000, usages=3), "D": meta(500000, 7000000)},
    "B": {"C": meta(2000000, -1)},
}


class FakeBackend:
    """
    Attributes:
        graph        : Current graph ({from: {to: meta}}).
        cart         : Current shopping cart ({from: {to: {}}}).
        previews     : {(from, to): /hypotheticalCut response}.
        preview_gate : If set, /hypotheticalCut waits for this event.
        failing      : Paths that answer 500.
        requests     : (method, path, body) of every request seen.
    """

    def __init__(self, graph: Optional[dict] = None):
        self.original = copy.deepcopy(graph if graph is not None else SCENARIO_GRAPH)
        self.graph = copy.deepcopy(self.original)
        self.cart: Dict[str, Dict[str, dict]] = {}
        self.previews: Dict[Tuple[str, str], dict] = {}
        self.preview_gate: Optional[asyncio.Event] = None
        self.failing: Set[str] = set()
        self.requests: List[Tuple[str, str, Any]] = []

    def snapshot(self) -> dict:
        return {"graph": copy.deepcopy(self.graph), "shoppingCart": copy.deepcopy(self.cart)}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if path in self.failing:
            return httpx.Response(500, text="boom")

        if request.method == "GET" and path == "/graph":
            return httpx.Response(200, json=self.graph)
        if request.method == "GET" and path == "/shoppingCart":
            return httpx.Response(200, json=self.cart)
        if request.method == "GET" and path == "/reset":
            self.graph = copy.deepcopy(self.original)
            self.cart = {}
            return httpx.Response(200, json=self.snapshot())
        if path == "/edge" and request.method == "DELETE":
            source, target = body["from"], body["to"]
            self.graph.get(source, {}).pop(target, None)
            self.cart.setdefault(source, {})[target] = {}
            return httpx.Response(200, json=self.snapshot())
        if path == "/edge" and request.method == "POST":
            source, target = body["from"], body["to"]
            self.cart.get(source, {}).pop(target, None)
            self.graph.setdefault(source, {})[target] = copy.deepcopy(self.original[source][target])
            return httpx.Response(200, json=self.snapshot())
        if path == "/hypotheticalCut" and request.method == "POST":
            if self.preview_gate is not None:
                await self.preview_gate.wait()
            preview = self.previews.get((body["from"], body["to"]), {"edges": {}, "vertices": []})
            return httpx.Response(200, json=preview)
        return httpx.Response(404, text="not found")


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def chain_backend():
    fake = FakeBackend(CHAIN_GRAPH)
    fake.previews[("A", "B")] = {
        "edges": {"A": {"B": meta(500000, 2000000)}, "B": {"C": meta(2000000, -1)}},
        "vertices": ["B", "C"],
    }
    return fake


def make_client(fake: FakeBackend) -> BackendClient:
    return BackendClient("http://backend.test", transport=httpx.MockTransport(fake.handler))


@pytest.fixture
def client(backend):
    return make_client(backend)


@pytest.fixture
def orchestrator(backend):
    return Orchestrator(make_client(backend))


@pytest.fixture
def chain_orchestrator(chain_backend):
    return Orchestrator(make_client(chain_backend))
