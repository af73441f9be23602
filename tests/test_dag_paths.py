import math

import numpy as np
import pytest

from conftest import random_dag
from sccdag.dag_paths import longest_path, shortest_paths
from sccdag.graph import Graph, VertexOutOfRangeError
from sccdag.metrics import AlgorithmMetrics
from sccdag.topo import CycleDetectedError, topo_order_kahn


def _brute_force_longest(g: Graph) -> float:
    """Max weight over all source-to-sink paths, by explicit enumeration."""
    indeg = g.in_degrees()
    out_adj = g.out_adj()
    best = -math.inf

    def walk(u, acc):
        nonlocal best
        if not out_adj[u]:
            best = max(best, acc)
        for v, w in out_adj[u]:
            walk(v, acc + w)

    for s in range(g.n):
        if indeg[s] == 0:
            walk(s, 0.0)
    return best


def test_chain_scenario(chain_dag):
    sp = shortest_paths(chain_dag, 0)
    assert sp.distance(2) == 5.0
    assert sp.path_to(2) == [0, 1, 2]
    lp = longest_path(chain_dag)
    assert lp.length == 5.0
    assert lp.path == [0, 1, 2]
    assert (lp.start, lp.end) == (0, 2)


def test_diamond_scenario(diamond_dag):
    sp = shortest_paths(diamond_dag, 0)
    assert sp.distance(3) == 6.0
    # tie: 0-1-3 and 0-2-3 both weigh 6; Kahn reaches 1 first and strict < keeps it
    assert sp.path_to(3) == [0, 1, 3]
    lp = longest_path(diamond_dag)
    assert lp.length == 6.0
    assert lp.path == [0, 1, 3]


def test_unreachable_is_infinite_with_empty_path(diamond_dag):
    sp = shortest_paths(diamond_dag, 2)
    assert sp.distance(0) == math.inf
    assert sp.distance(1) == math.inf
    assert sp.path_to(0) == []
    assert sp.path_to(2) == [2]
    np.testing.assert_array_equal(sp.reachable(), [False, False, True, True])
    np.testing.assert_array_equal(sp.parent, [-1, -1, -1, 2])


def test_negative_weights():
    g = Graph.from_edges(3, [(0, 1, -2.0), (0, 2, 1.0), (2, 1, -5.0)])
    sp = shortest_paths(g, 0)
    assert sp.distance(1) == -4.0
    assert sp.path_to(1) == [0, 2, 1]


def test_shortest_refuses_cyclic_input(triangle):
    with pytest.raises(CycleDetectedError):
        shortest_paths(triangle, 0)


def test_longest_on_cyclic_input_reports_minus_infinity(triangle):
    lp = longest_path(triangle)
    assert lp.length == -math.inf
    assert lp.path == []
    assert lp.acyclic is False
    assert (lp.start, lp.end) == (-1, -1)


def test_supplied_order_on_cyclic_input_keeps_cycle_signal(triangle):
    with pytest.raises(CycleDetectedError):
        shortest_paths(triangle, 0, order=[0, 1, 2])
    lp = longest_path(triangle, order=[0, 1, 2])
    assert lp.length == -math.inf
    assert lp.path == []
    assert lp.acyclic is False


def test_bad_source_and_target(chain_dag):
    with pytest.raises(VertexOutOfRangeError):
        shortest_paths(chain_dag, 3)
    sp = shortest_paths(chain_dag, 0)
    with pytest.raises(VertexOutOfRangeError):
        sp.path_to(-1)


def test_supplied_order_is_checked(diamond_dag):
    order = topo_order_kahn(diamond_dag)
    assert shortest_paths(diamond_dag, 0, order=order).distance(3) == 6.0
    assert longest_path(diamond_dag, order=order).length == 6.0
    with pytest.raises(ValueError) as exc:
        shortest_paths(diamond_dag, 0, order=[3, 2, 1, 0])
    assert not isinstance(exc.value, CycleDetectedError)
    with pytest.raises(ValueError):
        longest_path(diamond_dag, order=[3, 2, 1, 0])


def test_longest_ties_go_to_lowest_index():
    g = Graph.from_edges(3, [(0, 2, 2.0), (0, 1, 2.0)])
    lp = longest_path(g)
    assert lp.length == 2.0
    assert lp.path == [0, 1]


def test_longest_on_edgeless_and_empty_graphs():
    lp = longest_path(Graph(3))
    assert lp.length == 0.0
    assert lp.path == [0]

    lp = longest_path(Graph(0))
    assert lp.length == -math.inf
    assert lp.path == []


def test_every_true_source_starts_at_zero():
    # two independent chains; the heavier one wins
    g = Graph.from_edges(4, [(0, 1, 1.0), (2, 3, 4.0)])
    lp = longest_path(g)
    np.testing.assert_array_equal(lp.dist, [0.0, 1.0, 0.0, 4.0])
    assert lp.path == [2, 3]


def test_shortest_distances_grow_along_parent_links(rng):
    for _ in range(30):
        g = random_dag(rng, int(rng.integers(2, 15)), 0.3)
        src = int(rng.integers(0, g.n))
        sp = shortest_paths(g, src)
        assert sp.distance(src) == 0.0
        for v in range(g.n):
            p = int(sp.parent[v])
            if p != -1:
                assert sp.dist[p] <= sp.dist[v]
        for e in g.edges:
            if np.isfinite(sp.dist[e.u]):
                assert sp.dist[e.v] <= sp.dist[e.u] + e.weight + 1e-9


def test_path_weights_match_distances(rng):
    for _ in range(20):
        g = random_dag(rng, 10, 0.35)
        sp = shortest_paths(g, 0)
        for t in range(g.n):
            path = sp.path_to(t)
            if not path:
                continue
            assert path[0] == 0 and path[-1] == t
            total = 0.0
            for a, b in zip(path, path[1:]):
                total += min(e.weight for e in g.neighbors(a) if e.v == b)
            assert total == pytest.approx(sp.distance(t))


def test_longest_matches_brute_force(rng):
    for _ in range(40):
        g = random_dag(rng, int(rng.integers(1, 9)), 0.4)
        lp = longest_path(g)
        assert lp.length == pytest.approx(_brute_force_longest(g))
        assert g.in_degrees()[lp.start] == 0
        total = sum(
            max(e.weight for e in g.neighbors(a) if e.v == b)
            for a, b in zip(lp.path, lp.path[1:])
        )
        assert total == pytest.approx(lp.length)


def test_calls_are_idempotent_and_metrics_filled(diamond_dag):
    m = AlgorithmMetrics()
    a = shortest_paths(diamond_dag, 0, metrics=m)
    assert m.relaxations == 3
    assert m.edge_traversals == 4
    b = shortest_paths(diamond_dag, 0, metrics=m)
    np.testing.assert_array_equal(a.dist, b.dist)
    np.testing.assert_array_equal(a.parent, b.parent)
    assert m.relaxations == 3

    longest_path(diamond_dag, metrics=m)
    assert m.relaxations == 3
    assert m.edge_traversals == 8
