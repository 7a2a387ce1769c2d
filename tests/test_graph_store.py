from decimal import Decimal
from fractions import Fraction

import networkx as nx
import numpy as np
import pytest

from graph_store import (
    DuplicateNodeError,
    GraphError,
    InvalidWeightError,
    SelfLoopError,
    UnknownNodeError,
    WeightedGraph,
    from_networkx,
    from_records,
    to_networkx,
)


def _pair() -> WeightedGraph:
    g = WeightedGraph()
    g.add_node("A")
    g.add_node("B")
    return g


def test_add_node_rejects_duplicates():
    g = _pair()
    with pytest.raises(DuplicateNodeError):
        g.add_node("A")
    assert g.node_count() == 2


def test_add_edge_unknown_endpoint():
    g = _pair()
    with pytest.raises(UnknownNodeError):
        g.add_edge("A", "Z", 1.0)
    with pytest.raises(UnknownNodeError):
        g.add_edge("Z", "A", 1.0)
    assert g.edge_count() == 0


def test_add_edge_rejects_self_loop():
    g = _pair()
    with pytest.raises(SelfLoopError):
        g.add_edge("A", "A", 1)


@pytest.mark.parametrize("weight", [0, -1, -0.5, float("nan"), float("inf"), "3", None, True])
def test_add_edge_rejects_bad_weight(weight):
    g = _pair()
    with pytest.raises(InvalidWeightError):
        g.add_edge("A", "B", weight)
    assert g.edge_count() == 0
    assert g.neighbors("A") == set()


def test_repeated_edge_sums_weights():
    g = _pair()
    g.add_edge("A", "B", 1)
    g.add_edge("B", "A", 2)
    assert g.edge_count() == 1
    assert g.neighbors("A") == {("B", 3.0)}
    assert g.neighbors("B") == {("A", 3.0)}
    assert g.weight("A", "B") == 3.0


def test_failed_merge_leaves_weight_untouched():
    g = _pair()
    g.add_edge("A", "B", 2)
    with pytest.raises(InvalidWeightError):
        g.add_edge("A", "B", -5)
    assert g.weight("A", "B") == 2.0


def test_repeated_edge_merges_attributes():
    g = _pair()
    g.add_edge("A", "B", 1, {"scene": 1, "kind": "talk"})
    g.add_edge("A", "B", 1, {"scene": 2})
    (edge,) = g.edges()
    assert edge.attributes == {"scene": 2, "kind": "talk"}
    assert edge.weight == 2.0


def test_neighbors_unknown_node():
    g = _pair()
    with pytest.raises(UnknownNodeError):
        g.neighbors("Z")


def test_errors_share_base_class():
    for exc in (DuplicateNodeError, UnknownNodeError, InvalidWeightError, SelfLoopError):
        assert issubclass(exc, GraphError)
    assert issubclass(UnknownNodeError, KeyError)
    assert str(UnknownNodeError("Node 'Z' does not exist.")) == "Node 'Z' does not exist."


def test_enumeration_is_read_only():
    g = _pair()
    g.add_node("C", {"group": "x"})
    g.add_edge("A", "B", 1.5)

    nodes = g.nodes()
    nodes[2].attributes["group"] = "changed"
    assert g.node("C").attributes == {"group": "x"}

    adj = g.adjacency()
    adj["A"]["B"] = 100.0
    assert g.weight("A", "B") == 1.5

    assert [n.node_id for n in g.nodes()] == ["A", "B", "C"]
    assert list(g) == ["A", "B", "C"]
    assert "C" in g and "Z" not in g
    assert len(g) == 3


def test_edges_are_undirected():
    g = _pair()
    g.add_edge("B", "A", 4)
    assert g.has_edge("A", "B")
    assert g.has_edge("B", "A")
    (edge,) = g.edges()
    assert edge.key() == frozenset({"A", "B"})
    assert (edge.source, edge.target) == ("B", "A")
    assert g.total_weight() == 4.0


def test_from_records_builds_graph():
    g = from_records(
        [("A", {"group": "g1"}), ("B", None), ("C", {})],
        [("A", "B", 2), ("B", "C", 1.5, {"kind": "fight"}), ("A", "B", 1)],
    )
    assert g.node_count() == 3
    assert g.edge_count() == 2
    assert g.weight("A", "B") == 3.0
    assert g.node("A").attributes == {"group": "g1"}
    assert g.node("B").attributes == {}


def test_from_records_rejects_malformed_input():
    with pytest.raises(UnknownNodeError):
        from_records([("A", None)], [("A", "B", 1)])
    with pytest.raises(DuplicateNodeError):
        from_records([("A", None), ("A", None)], [])
    with pytest.raises(ValueError):
        from_records([("A", None), ("B", None)], [("A", "B")])


def test_networkx_round_trip_keeps_weights_and_attributes():
    g = from_records(
        [("A", {"group": "g1"}), ("B", None), ("C", None)],
        [("A", "B", 2, {"kind": "talk"}), ("B", "C", 5)],
    )
    G = to_networkx(g)
    assert G["A"]["B"] == {"kind": "talk", "weight": 2.0}
    assert G.nodes["A"]["group"] == "g1"

    back = from_networkx(G)
    assert back.weight("B", "C") == 5.0
    assert back.edges()[0].attributes == {"kind": "talk"}


def test_from_networkx_defaults_weight_and_rejects_directed():
    G = nx.path_graph(3)
    g = from_networkx(G)
    assert g.neighbors("1") == {("0", 1.0), ("2", 1.0)}

    with pytest.raises(ValueError):
        from_networkx(nx.DiGraph([(0, 1)]))


@pytest.mark.parametrize("weight", [np.int64(3), np.float32(3.0), Fraction(3, 1), Decimal("3")])
def test_add_edge_accepts_numeric_weight_types(weight):
    g = _pair()
    g.add_edge("A", "B", weight)
    assert g.neighbors("A") == {("B", 3.0)}
    assert isinstance(g.weight("A", "B"), float)


def test_from_records_accepts_numpy_weights():
    weights = np.array([3, 2], dtype=np.int64)
    g = from_records([("A", None), ("B", None), ("C", None)], [("A", "B", weights[0]), ("B", "C", weights[1])])
    assert g.weight("A", "B") == 3.0
    assert g.total_weight() == 5.0

    with pytest.raises(InvalidWeightError):
        from_records([("A", None), ("B", None)], [("A", "B", np.int64(0))])


def test_records_compare_by_value_but_are_not_hashable():
    g = _pair()
    g.add_edge("A", "B", 1, {"kind": "talk"})
    assert g.node("A") == g.node("A")
    assert g.edges() == g.edges()
    with pytest.raises(TypeError):
        hash(g.node("A"))
    with pytest.raises(TypeError):
        hash(g.edges()[0])


def test_mixed_id_types_do_not_need_ordering():
    g = WeightedGraph()
    g.add_node(1)
    g.add_node("a")
    g.add_edge(1, "a", 1)
    g.add_edge("a", 1, 2)
    assert g.edge_count() == 1
    assert g.neighbors(1) == {("a", 3.0)}
    assert g.edges()[0].key() == frozenset({1, "a"})
