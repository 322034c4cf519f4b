"""
payload.py — Backend Payload Model
==================================
Typed view of the JSON the cut backend sends.

    AuthoritativeGraph  {from_id: {to_id: EdgeMeta}}
    ShoppingCart        same shape, the edges the user has cut
    Snapshot            {graph, shoppingCart} returned by every mutation
    CutPreview          {edges, vertices} returned by /hypotheticalCut

Parsing is deliberately forgiving below the top level: the backend
emits Go-style keys (`From`, `SizeBytes`, …), the shopping cart carries
no metadata at all (`{from: {to: {}}}`) and sizes are `-1` when a module
is not on disk.  Only a top-level shape that cannot be an adjacency map
raises PayloadError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple


logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """Raised when a backend payload does not have the expected shape."""


# ---------------------------------------------------------------------------
# Edge metadata
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class VertexInfo:
    size_bytes: Optional[int] = None


@dataclass(frozen=True)
class EdgeMeta:
    """
    Attributes:
        source     : VertexInfo of the depending module ("From").
        target     : VertexInfo of the dependency ("To").
        num_usages : How often `source` uses `target`, when the backend knows.
    """

    source:     VertexInfo    = field(default_factory=VertexInfo)
    target:     VertexInfo    = field(default_factory=VertexInfo)
    num_usages: Optional[int] = None


AuthoritativeGraph = Dict[str, Dict[str, EdgeMeta]]


def _pick(raw: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if name in raw:
            return raw[name]
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def _parse_vertex_info(raw: Any) -> VertexInfo:
    if not isinstance(raw, dict):
        return VertexInfo()
    return VertexInfo(size_bytes=_as_int(_pick(raw, "SizeBytes", "sizeBytes", "size_bytes")))


def parse_edge_meta(raw: Any) -> EdgeMeta:
    if not isinstance(raw, dict):
        return EdgeMeta()
    return EdgeMeta(
        source=_parse_vertex_info(_pick(raw, "From", "from")),
        target=_parse_vertex_info(_pick(raw, "To", "to")),
        num_usages=_as_int(_pick(raw, "NumUsages", "numUsages", "num_usages")),
    )


def parse_adjacency(raw: Any) -> AuthoritativeGraph:
    """
    Decode an adjacency map.  `null` decodes as an empty graph; a
    non-object row is skipped and logged rather than failing the whole
    payload.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise PayloadError(f"adjacency must be a JSON object, got {type(raw).__name__}")

    graph: AuthoritativeGraph = {}
    for source, tos in raw.items():
        if tos is None:
            graph[str(source)] = {}
            continue
        if not isinstance(tos, dict):
            logger.warning("Skipping adjacency row %r: expected object, got %s",
                           source, type(tos).__name__)
            continue
        graph[str(source)] = {str(target): parse_edge_meta(meta) for target, meta in tos.items()}
    return graph


# ---------------------------------------------------------------------------
# Adjacency queries
# ---------------------------------------------------------------------------
def iter_pairs(graph: AuthoritativeGraph) -> Iterator[Tuple[str, str, EdgeMeta]]:
    for source, tos in graph.items():
        for target, meta in tos.items():
            yield source, target, meta


def has_pair(graph: AuthoritativeGraph, source: str, target: str) -> bool:
    """True if (source, target) is an edge.  Absent rows are not an error."""
    tos = graph.get(source)
    return tos is not None and target in tos


def vertex_ids(graph: AuthoritativeGraph) -> Set[str]:
    """Every id that is an endpoint of at least one pair."""
    ids: Set[str] = set()
    for source, target, _ in iter_pairs(graph):
        ids.add(source)
        ids.add(target)
    return ids


def pair_count(graph: AuthoritativeGraph) -> int:
    return sum(len(tos) for tos in graph.values())


def exclude_pairs(graph: AuthoritativeGraph, other: AuthoritativeGraph) -> AuthoritativeGraph:
    """Pairs of `graph` that are not pairs of `other`."""
    out: AuthoritativeGraph = {}
    for source, target, meta in iter_pairs(graph):
        if has_pair(other, source, target):
            continue
        out.setdefault(source, {})[target] = meta
    return out


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Snapshot:
    """Graph and shopping cart read atomically from one response."""

    graph:         AuthoritativeGraph
    shopping_cart: AuthoritativeGraph

    @classmethod
    def from_json(cls, raw: Any) -> "Snapshot":
        if not isinstance(raw, dict):
            raise PayloadError("snapshot must be a JSON object")
        if "graph" not in raw or "shoppingCart" not in raw:
            raise PayloadError("snapshot must carry both 'graph' and 'shoppingCart'")
        return cls(
            graph=parse_adjacency(raw["graph"]),
            shopping_cart=parse_adjacency(raw["shoppingCart"]),
        )


@dataclass(frozen=True)
class CutPreview:
    """Edges and vertices that would fall away if one edge were cut."""

    edges:    AuthoritativeGraph = field(default_factory=dict)
    vertices: List[str]          = field(default_factory=list)

    @classmethod
    def from_json(cls, raw: Any) -> "CutPreview":
        if not isinstance(raw, dict):
            raise PayloadError("hypothetical cut must be a JSON object")
        vertices = raw.get("vertices")
        if vertices is None:
            vertices = []
        elif isinstance(vertices, dict):
            vertices = list(vertices.values())
        elif not isinstance(vertices, list):
            raise PayloadError("hypothetical cut 'vertices' must be a list or object")
        return cls(
            edges=parse_adjacency(raw.get("edges")),
            vertices=[str(v) for v in vertices],
        )

    def edge_keys(self) -> List[Tuple[str, str]]:
        return [(source, target) for source, target, _ in iter_pairs(self.edges)]
