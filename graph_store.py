# graph_store.py
"""
In-memory undirected weighted graph.

Representation (uniform across the analysis code):
    - Nodes are hashable ids (normally strings) with an opaque attribute dict.
    - Adjacency is dict[str, dict[str, float]] mapping each node to its
      neighbors and the weight of the connecting edge.

The graph is simple: no self-loops, at most one edge per unordered pair.
Re-adding an existing pair SUMS the weights (co-occurrence counts add up).
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

import networkx as nx


logger = logging.getLogger(__name__)

Adjacency = Dict[str, Dict[str, float]]


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------

class GraphError(Exception):
    """Base class for graph construction / validation errors."""


class DuplicateNodeError(GraphError, ValueError):
    pass


class UnknownNodeError(GraphError, KeyError):
    def __str__(self) -> str:
        # KeyError repr()s its message; keep it readable
        return str(self.args[0]) if self.args else ""


class InvalidWeightError(GraphError, ValueError):
    pass


class SelfLoopError(GraphError, ValueError):
    pass


class EmptyGraphError(GraphError, ValueError):
    pass


# ---------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------

# Plain (mutable, unhashable) records: they carry attribute dicts.
@dataclass
class Node:
    node_id: str
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Edge:
    source: str
    target: str
    weight: float
    attributes: Dict[str, Any] = field(default_factory=dict)

    def key(self) -> FrozenSet[str]:
        return frozenset((self.source, self.target))


def _check_weight(weight: Any) -> float:
    # bool is an int subclass; True is not a weight
    if isinstance(weight, bool) or not isinstance(weight, (numbers.Real, Decimal)):
        raise InvalidWeightError(f"Edge weight must be a number, got {weight!r}")
    w = float(weight)
    if math.isnan(w) or math.isinf(w) or w <= 0.0:
        raise InvalidWeightError(f"Edge weight must be positive and finite, got {weight!r}")
    return w


# ---------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------

class WeightedGraph:
    """
    Undirected, simple, positively weighted graph.

    Every mutating call validates its arguments before touching any state,
    so a call either fully succeeds or raises and leaves the graph as it was.
    """

    def __init__(self):
        self._nodes: Dict[str, Dict[str, Any]] = {}
        self._adj: Adjacency = {}
        # unordered pair -> (u, v, attributes), u and v as first added
        self._edges: Dict[FrozenSet[str], Tuple[str, str, Dict[str, Any]]] = {}

    # -- nodes ---------------------------------------------------------

    def add_node(self, node_id: str, attributes: Optional[Dict[str, Any]] = None) -> None:
        if node_id in self._nodes:
            raise DuplicateNodeError(f"Node '{node_id}' already exists.")
        self._nodes[node_id] = dict(attributes or {})
        self._adj[node_id] = {}

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def node(self, node_id: str) -> Node:
        self._require(node_id)
        return Node(node_id, dict(self._nodes[node_id]))

    def nodes(self) -> List[Node]:
        return [Node(n, dict(attrs)) for n, attrs in self._nodes.items()]

    def node_ids(self) -> List[str]:
        return list(self._nodes)

    def node_count(self) -> int:
        return len(self._nodes)

    # -- edges ---------------------------------------------------------

    def add_edge(
        self,
        u: str,
        v: str,
        weight: float = 1.0,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Add the undirected edge {u, v}.

        If the pair is already connected the new weight is ADDED to the
        existing one and the attribute dicts are merged (new keys win);
        no second edge is created.

        Raises:
            UnknownNodeError: u or v is not in the graph.
            SelfLoopError: u == v.
            InvalidWeightError: weight is not a positive finite number.
        """
        self._require(u)
        self._require(v)
        if u == v:
            raise SelfLoopError(f"Self-loop on '{u}' is not allowed.")
        w = _check_weight(weight)

        key = frozenset((u, v))
        if key in self._edges:
            total = self._adj[u][v] + w
            logger.debug("merging repeated edge %s-%s: %s -> %s", u, v, self._adj[u][v], total)
            self._edges[key][2].update(attributes or {})
        else:
            total = w
            self._edges[key] = (u, v, dict(attributes or {}))

        self._adj[u][v] = total
        self._adj[v][u] = total

    def has_edge(self, u: str, v: str) -> bool:
        return u in self._adj and v in self._adj[u]

    def weight(self, u: str, v: str) -> float:
        self._require(u)
        self._require(v)
        if v not in self._adj[u]:
            raise KeyError(f"No edge between '{u}' and '{v}'.")
        return self._adj[u][v]

    def edges(self) -> List[Edge]:
        return [
            Edge(a, b, self._adj[a][b], dict(attrs))
            for a, b, attrs in self._edges.values()
        ]

    def edge_count(self) -> int:
        return len(self._edges)

    def total_weight(self) -> float:
        return sum(self._adj[a][b] for a, b, _ in self._edges.values())

    # -- adjacency -----------------------------------------------------

    def neighbors(self, node_id: str) -> Set[Tuple[str, float]]:
        self._require(node_id)
        return {(nbr, w) for nbr, w in self._adj[node_id].items()}

    def adjacency(self) -> Adjacency:
        """Copy of the adjacency: node -> {neighbor: weight}."""
        return {u: dict(nbrs) for u, nbrs in self._adj.items()}

    # -- container protocol --------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"WeightedGraph(nodes={self.node_count()}, edges={self.edge_count()})"

    def _require(self, node_id: str) -> None:
        if node_id not in self._nodes:
            raise UnknownNodeError(f"Node '{node_id}' does not exist.")


# ---------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------

def from_records(
    nodes: Iterable[Tuple[str, Optional[Dict[str, Any]]]],
    edges: Iterable[tuple],
) -> WeightedGraph:
    """
    Build a graph from loader output.

    Args:
        nodes: (node_id, attributes) tuples; attributes may be None.
        edges: (source, target, weight) or (source, target, weight, attributes).

    Any malformed record raises the same error add_node / add_edge would.
    """
    graph = WeightedGraph()
    for node_id, attrs in nodes:
        graph.add_node(node_id, attrs)

    for record in edges:
        if len(record) == 3:
            source, target, weight = record
            attrs = None
        elif len(record) == 4:
            source, target, weight, attrs = record
        else:
            raise ValueError(f"Edge record must have 3 or 4 fields, got {record!r}")
        graph.add_edge(source, target, weight, attrs)

    logger.debug("built %r from records", graph)
    return graph


def to_networkx(graph: WeightedGraph) -> nx.Graph:
    """Copy into a networkx.Graph; edge weight is stored under 'weight'."""
    G = nx.Graph()
    for node in graph.nodes():
        G.add_node(node.node_id, **node.attributes)
    for edge in graph.edges():
        G.add_edge(edge.source, edge.target, **{**edge.attributes, "weight": edge.weight})
    return G


def from_networkx(G: nx.Graph, weight: str = "weight") -> WeightedGraph:
    """
    Copy an undirected networkx graph. Missing weights default to 1.0.
    Node ids are converted to str.
    """
    if G.is_directed():
        raise ValueError("Only undirected graphs are supported")

    graph = WeightedGraph()
    for n, data in G.nodes(data=True):
        graph.add_node(str(n), dict(data))

    for u, v, data in G.edges(data=True):
        attrs = {k: val for k, val in data.items() if k != weight}
        graph.add_edge(str(u), str(v), data.get(weight, 1.0), attrs)

    return graph
