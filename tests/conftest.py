from __future__ import annotations
import sys, pathlib

import numpy as np
import pytest

# Make 'sccdag' importable from a plain checkout (src/ layout) as well as an installed copy.
try:
    import sccdag  # noqa: F401
except ImportError:
    here = pathlib.Path(__file__).resolve()
    src = here.parents[1] / "src"
    if (src / "sccdag" / "__init__.py").exists():
        sys.path.insert(0, str(src))

from sccdag.graph import Graph


def random_digraph(rng: np.random.Generator, n: int, p: float, *, wmin=1.0, wmax=10.0) -> Graph:
    """Erdos-Renyi style digraph, self-loops and a few parallel edges allowed."""
    g = Graph(n)
    for u in range(n):
        for v in range(n):
            if rng.random() < p:
                g.add_edge(u, v, float(rng.uniform(wmin, wmax)))
                if rng.random() < 0.1:
                    g.add_edge(u, v, float(rng.uniform(wmin, wmax)))
    return g


def random_dag(rng: np.random.Generator, n: int, p: float, *, wmin=0.0, wmax=10.0) -> Graph:
    """Random DAG with shuffled labels, so index order is not a topological order."""
    perm = rng.permutation(n)
    g = Graph(n)
    for i in range(n):
        for j in range(i + 1, n):
            if rng.random() < p:
                g.add_edge(int(perm[i]), int(perm[j]), float(rng.uniform(wmin, wmax)))
    return g


def reachability(g: Graph) -> np.ndarray:
    """reach[u, v] is True iff v is reachable from u (every vertex reaches itself)."""
    n = g.n
    out_adj = g.out_adj()
    reach = np.zeros((n, n), dtype=bool)
    for s in range(n):
        reach[s, s] = True
        stack = [s]
        while stack:
            u = stack.pop()
            for v, _ in out_adj[u]:
                if not reach[s, v]:
                    reach[s, v] = True
                    stack.append(v)
    return reach


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def chain_dag():
    # 0 -> 1 (2), 1 -> 2 (3)
    return Graph.from_edges(3, [(0, 1, 2.0), (1, 2, 3.0)])


@pytest.fixture
def diamond_dag():
    # 0 -> 1 (5), 0 -> 2 (2), 1 -> 3 (1), 2 -> 3 (4)
    return Graph.from_edges(4, [(0, 1, 5.0), (0, 2, 2.0), (1, 3, 1.0), (2, 3, 4.0)])


@pytest.fixture
def triangle():
    return Graph.from_edges(3, [(0, 1, 1.0), (1, 2, 1.0), (2, 0, 1.0)])
