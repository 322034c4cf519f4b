"""Tests for the cut backend client."""
import httpx
import pytest

from conftest import SCENARIO_GRAPH
from cutclient import (
    BackendClient,
    BackendPayloadError,
    BackendStatusError,
    BackendTransportError,
)
from depgraph import has_pair


@pytest.mark.asyncio
async def test_fetch_graph_and_cart(backend, client):
    graph = await client.fetch_graph()
    cart = await client.fetch_shopping_cart()
    assert graph["A"]["B"].target.size_bytes == 2000000
    assert cart == {}
    assert [(m, p) for m, p, _ in backend.requests] == [("GET", "/graph"), ("GET", "/shoppingCart")]
    await client.aclose()


@pytest.mark.asyncio
async def test_cut_and_restore_send_edge_body(backend, client):
    snapshot = await client.cut_edge("A", "B")
    assert not has_pair(snapshot.graph, "A", "B")
    assert has_pair(snapshot.shopping_cart, "A", "B")

    snapshot = await client.restore_edge("A", "B")
    assert has_pair(snapshot.graph, "A", "B")
    assert not has_pair(snapshot.shopping_cart, "A", "B")

    assert backend.requests == [
        ("DELETE", "/edge", {"from": "A", "to": "B"}),
        ("POST", "/edge", {"from": "A", "to": "B"}),
    ]
    await client.aclose()


@pytest.mark.asyncio
async def test_hypothetical_cut(chain_backend):
    client = BackendClient("http://backend.test", transport=httpx.MockTransport(chain_backend.handler))
    preview = await client.hypothetical_cut("A", "B")
    assert sorted(preview.edge_keys()) == [("A", "B"), ("B", "C")]
    assert preview.vertices == ["B", "C"]
    assert chain_backend.requests == [("POST", "/hypotheticalCut", {"from": "A", "to": "B"})]
    await client.aclose()


@pytest.mark.asyncio
async def test_reset_is_one_request(backend, client):
    await client.cut_edge("A", "B")
    snapshot = await client.reset()
    assert snapshot.graph.keys() == SCENARIO_GRAPH.keys()
    assert snapshot.shopping_cart == {}
    assert [(m, p) for m, p, _ in backend.requests][-1] == ("GET", "/reset")
    await client.aclose()


@pytest.mark.asyncio
async def test_status_error(backend, client):
    backend.failing.add("/edge")
    with pytest.raises(BackendStatusError) as info:
        await client.cut_edge("A", "B")
    assert info.value.status_code == 500
    assert "boom" in str(info.value)
    await client.aclose()


@pytest.mark.asyncio
async def test_non_json_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    client = BackendClient("http://backend.test", transport=transport)
    with pytest.raises(BackendPayloadError):
        await client.fetch_graph()
    await client.aclose()


@pytest.mark.asyncio
async def test_wrong_shape():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"graph": {}}))
    client = BackendClient("http://backend.test", transport=transport)
    with pytest.raises(BackendPayloadError):
        await client.reset()
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = BackendClient("http://backend.test", transport=httpx.MockTransport(refuse))
    with pytest.raises(BackendTransportError):
        await client.fetch_shopping_cart()
    await client.aclose()


@pytest.mark.asyncio
async def test_timeout_is_a_transport_error():
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = BackendClient("http://backend.test", transport=httpx.MockTransport(slow))
    with pytest.raises(BackendTransportError):
        await client.hypothetical_cut("A", "B")
    await client.aclose()
