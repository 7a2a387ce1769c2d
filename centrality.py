"""
Centrality measures for weighted undirected graphs.

All algorithms are implemented from scratch and operate on the adjacency
snapshot of a WeightedGraph:

    adjacency: dict[str, dict[str, float]]   (node -> {neighbor: weight})

Edge weights are treated as DISTANCES for every shortest-path based
measure (betweenness, closeness). Nothing here mutates the graph.
"""

import logging
import time
from heapq import heappop, heappush
from itertools import count
from typing import Dict, List, Tuple

from graph_store import Adjacency, EmptyGraphError, UnknownNodeError, WeightedGraph


logger = logging.getLogger(__name__)


def _snapshot(graph: WeightedGraph) -> Adjacency:
    if graph.node_count() == 0:
        raise EmptyGraphError("Centrality is undefined on an empty graph.")
    return graph.adjacency()


# ---------------------------------------------------------------------
# Shortest paths (Dijkstra)
# ---------------------------------------------------------------------

def _dijkstra(adj: Adjacency, src: str) -> Dict[str, float]:
    dist: Dict[str, float] = {}
    seen = {src: 0.0}
    c = count()
    heap = [(0.0, next(c), src)]

    while heap:
        d, _, u = heappop(heap)
        if u in dist:
            continue
        dist[u] = d
        for v, w in adj[u].items():
            nd = d + w
            if v not in dist and (v not in seen or nd < seen[v]):
                seen[v] = nd
                heappush(heap, (nd, next(c), v))

    return dist


def dijkstra_distances(graph: WeightedGraph, source: str) -> Dict[str, float]:
    """
    Weighted shortest-path distance from `source` to every node it can
    reach (source itself included at distance 0.0).
    """
    if not graph.has_node(source):
        raise UnknownNodeError(f"Node '{source}' does not exist.")
    return _dijkstra(graph.adjacency(), source)


# ---------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------

def connected_components(graph: WeightedGraph) -> List[List[str]]:
    """
    Connected components, found by growing a shortest-path tree from each
    node not yet assigned. Components come in node insertion order; within a
    component, nodes are ordered by distance from its first node.

    Returns:
        List of components, each = list of node ids.
    """
    adj = graph.adjacency()
    assigned = set()
    components: List[List[str]] = []

    for start in adj:
        if start in assigned:
            continue
        comp = list(_dijkstra(adj, start))
        assigned.update(comp)
        components.append(comp)

    return components


def compute_connectivity(graph: WeightedGraph) -> Dict[str, object]:
    """
    Compute connected components and basic connectivity stats.

    Returns:
        {
            "num_components": int,
            "component_sizes": List[int] (sorted desc),
            "giant_component_size": int,
            "isolated_nodes": int,
        }
    """
    components = connected_components(graph)
    sizes = sorted((len(c) for c in components), reverse=True)

    return {
        "num_components": len(components),
        "component_sizes": sizes,
        "giant_component_size": sizes[0] if sizes else 0,
        "isolated_nodes": sum(1 for c in components if len(c) == 1),
    }


# ---------------------------------------------------------------------
# Centrality measures
# ---------------------------------------------------------------------

def degree_centrality(graph: WeightedGraph) -> Dict[str, float]:
    """Weighted degree ("strength"): sum of incident edge weights."""
    adj = _snapshot(graph)
    return {u: float(sum(nbrs.values())) for u, nbrs in adj.items()}


def _brandes_sssp(
    adj: Adjacency, s: str
) -> Tuple[List[str], Dict[str, List[str]], Dict[str, float]]:
    """
    Dijkstra pass from s recording, for every reached node, its shortest-path
    predecessors and the number of shortest paths (sigma).

    Returns nodes in non-decreasing distance order (the Brandes stack).
    """
    order: List[str] = []
    pred: Dict[str, List[str]] = {s: []}
    sigma: Dict[str, float] = {s: 1.0}
    dist: Dict[str, float] = {s: 0.0}
    done = set()

    c = count()
    heap = [(0.0, next(c), s)]

    while heap:
        d, _, v = heappop(heap)
        if v in done:
            continue
        done.add(v)
        order.append(v)

        for w, weight in adj[v].items():
            nd = d + weight
            if w not in dist or nd < dist[w]:
                # strictly shorter: restart path counting for w
                dist[w] = nd
                sigma[w] = sigma[v]
                pred[w] = [v]
                heappush(heap, (nd, next(c), w))
            elif nd == dist[w] and w not in done:
                sigma[w] += sigma[v]
                pred[w].append(v)

    return order, pred, sigma


def betweenness_centrality(graph: WeightedGraph) -> Dict[str, float]:
    """
    Brandes' algorithm for weighted betweenness on an undirected graph.

    One Dijkstra pass per source, then dependencies are accumulated in
    reverse distance order. Pairs with no path contribute nothing.

    Every unordered pair {s, t} is counted once from s and once from t,
    so the raw sums are halved at the end. No other normalization.
    """
    adj = _snapshot(graph)
    started = time.perf_counter()
    bc = {v: 0.0 for v in adj}

    for s in adj:
        order, pred, sigma = _brandes_sssp(adj, s)

        # Accumulation
        delta = {v: 0.0 for v in order}
        while order:
            w = order.pop()
            coeff = (1.0 + delta[w]) / sigma[w]
            for v in pred[w]:
                delta[v] += sigma[v] * coeff
            if w != s:
                bc[w] += delta[w]

    # Undirected: each pair was seen from both endpoints
    for v in bc:
        bc[v] *= 0.5

    logger.debug(
        "betweenness over %d nodes took %.4fs", len(adj), time.perf_counter() - started
    )
    return bc


def closeness_centrality(graph: WeightedGraph) -> Dict[str, float]:
    """
    Normalized closeness for possibly disconnected graphs:

        C(v) = (r / sum(dist)) * (r / (N - 1))

    where r is the number of nodes reachable from v (excluding v) and N the
    total node count. Nodes that reach nothing get 0.0.

    Distances are edge weights, so the score is only bounded by 1 when every
    weight is at least 1: a lone edge of weight w scores 1/w at both ends.
    """
    adj = _snapshot(graph)
    n = len(adj)
    closeness: Dict[str, float] = {}

    for u in adj:
        dist = _dijkstra(adj, u)
        reachable = len(dist) - 1
        total = sum(dist.values())
        if reachable == 0 or total <= 0.0:
            closeness[u] = 0.0
            continue
        closeness[u] = (reachable / total) * (reachable / (n - 1))

    return closeness


def compute_all(graph: WeightedGraph) -> Dict[str, Dict[str, float]]:
    return {
        "degree": degree_centrality(graph),
        "betweenness": betweenness_centrality(graph),
        "closeness": closeness_centrality(graph),
    }
