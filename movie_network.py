# movie_network.py
"""
Bundled movie character co-occurrence network + enrichment steps.

NODES: (character, {"group": ...})
EDGES: (character, character, number of scenes they share)

The counts are a small hand-made sample for demos and tests, not an
authoritative dataset.

Enrichment steps never modify their input: each one returns a NEW graph,
so a pipeline is plain function composition:

    g = load_movie_network()
    g = with_node_sizes(g, degree_centrality(g))
"""

import logging
from typing import Any, Dict, List, Tuple

from graph_store import UnknownNodeError, WeightedGraph, from_records


logger = logging.getLogger(__name__)


NODES: List[Tuple[str, Dict[str, Any]]] = [
    ("Luke", {"group": "rebels"}),
    ("Leia", {"group": "rebels"}),
    ("Han", {"group": "rebels"}),
    ("Chewbacca", {"group": "rebels"}),
    ("Obi-Wan", {"group": "rebels"}),
    ("R2-D2", {"group": "droids"}),
    ("C-3PO", {"group": "droids"}),
    ("Biggs", {"group": "pilots"}),
    ("Wedge", {"group": "pilots"}),
    ("Red Leader", {"group": "pilots"}),
    ("Dodonna", {"group": "pilots"}),
    ("Owen", {"group": "civilians"}),
    ("Beru", {"group": "civilians"}),
    ("Greedo", {"group": "civilians"}),
    ("Jabba", {"group": "civilians"}),
    ("Darth Vader", {"group": "empire"}),
    ("Tarkin", {"group": "empire"}),
    ("Motti", {"group": "empire"}),
]

EDGES: List[Tuple[str, str, int]] = [
    ("Luke", "Leia", 17),
    ("Luke", "Han", 19),
    ("Luke", "Chewbacca", 14),
    ("Luke", "Obi-Wan", 18),
    ("Luke", "R2-D2", 22),
    ("Luke", "C-3PO", 26),
    ("Luke", "Biggs", 7),
    ("Luke", "Wedge", 4),
    ("Luke", "Red Leader", 6),
    ("Luke", "Owen", 6),
    ("Luke", "Beru", 5),
    ("Leia", "Han", 13),
    ("Leia", "Chewbacca", 9),
    ("Leia", "Obi-Wan", 2),
    ("Leia", "R2-D2", 5),
    ("Leia", "C-3PO", 6),
    ("Leia", "Darth Vader", 2),
    ("Leia", "Tarkin", 3),
    ("Leia", "Dodonna", 1),
    ("Han", "Chewbacca", 19),
    ("Han", "Obi-Wan", 9),
    ("Han", "R2-D2", 6),
    ("Han", "C-3PO", 8),
    ("Han", "Greedo", 1),
    ("Han", "Jabba", 1),
    ("Chewbacca", "Obi-Wan", 7),
    ("Chewbacca", "R2-D2", 6),
    ("Chewbacca", "C-3PO", 6),
    ("Obi-Wan", "R2-D2", 6),
    ("Obi-Wan", "C-3PO", 6),
    ("Obi-Wan", "Darth Vader", 1),
    ("R2-D2", "C-3PO", 21),
    ("R2-D2", "Owen", 2),
    ("C-3PO", "Owen", 3),
    ("C-3PO", "Beru", 2),
    ("Owen", "Beru", 3),
    ("Biggs", "Wedge", 3),
    ("Biggs", "Red Leader", 3),
    ("Wedge", "Red Leader", 3),
    ("Red Leader", "Dodonna", 1),
    ("Darth Vader", "Tarkin", 7),
    ("Darth Vader", "Motti", 1),
    ("Tarkin", "Motti", 2),
]


def load_movie_network() -> WeightedGraph:
    """Return a fresh graph built from NODES / EDGES."""
    return from_records(NODES, EDGES)


# ---------------------------------------------------------------------
# Enrichment (pure: graph in, new graph out)
# ---------------------------------------------------------------------

def _rebuild(
    graph: WeightedGraph, node_updates: Dict[str, Dict[str, Any]]
) -> WeightedGraph:
    nodes = []
    for node in graph.nodes():
        attrs = dict(node.attributes)
        attrs.update(node_updates.get(node.node_id, {}))
        nodes.append((node.node_id, attrs))
    edges = [(e.source, e.target, e.weight, e.attributes) for e in graph.edges()]
    return from_records(nodes, edges)


def with_node_attributes(
    graph: WeightedGraph, values: Dict[str, Any], key: str
) -> WeightedGraph:
    """
    Copy of `graph` where each node in `values` carries values[node] under
    `key`. Nodes absent from `values` are copied unchanged.
    """
    for node_id in values:
        if not graph.has_node(node_id):
            raise UnknownNodeError(f"Node '{node_id}' does not exist.")
    return _rebuild(graph, {n: {key: v} for n, v in values.items()})


def with_group_labels(graph: WeightedGraph, groups: Dict[str, Any]) -> WeightedGraph:
    return with_node_attributes(graph, groups, "group")


def _minmax_scale(
    values: Dict[str, float], lo: float, hi: float
) -> Dict[str, float]:
    """
    Min–max scale a dict of node -> value into [lo, hi].
    If all values are equal, everyone gets the midpoint.
    """
    if not values:
        return {}

    vs = list(values.values())
    vmin, vmax = min(vs), max(vs)
    if vmax == vmin:
        mid = (lo + hi) / 2.0
        return {u: mid for u in values}

    return {u: lo + (v - vmin) / (vmax - vmin) * (hi - lo) for u, v in values.items()}


def with_node_sizes(
    graph: WeightedGraph,
    scores: Dict[str, float],
    min_size: float = 10.0,
    max_size: float = 40.0,
    key: str = "size",
) -> WeightedGraph:
    """Scale `scores` into [min_size, max_size] and attach them under `key`."""
    if min_size > max_size:
        raise ValueError("min_size must not exceed max_size")
    sizes = _minmax_scale(scores, min_size, max_size)
    logger.debug("attaching %d node sizes under %r", len(sizes), key)
    return with_node_attributes(graph, sizes, key)
