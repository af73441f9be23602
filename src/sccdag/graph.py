from __future__ import annotations

from typing import Iterable, List, NamedTuple, Tuple
import numpy as np
from scipy import sparse


class VertexOutOfRangeError(IndexError):
    """Edge endpoint (or query vertex) outside [0, n)."""


class Edge(NamedTuple):
    u: int
    v: int
    weight: float

    def __str__(self) -> str:
        return f"({self.u} -> {self.v}, w={self.weight:.1f})"


class Graph:
    """Directed weighted graph over dense vertex indices [0, n).

    Outgoing edges of each vertex keep insertion order; traversal order of every
    algorithm in this package follows it. Edges are append-only.
    """

    def __init__(self, n: int):
        n = int(n)
        if n < 0:
            raise ValueError(f"Vertex count must be non-negative, got {n}.")
        self._n = n
        self._adj: List[List[Edge]] = [[] for _ in range(n)]
        self._edges: List[Edge] = []

    @classmethod
    def from_edges(cls, n: int, triples: Iterable[Tuple[int, int, float]]) -> "Graph":
        """Build a graph from (u, v, w) triples. Raises before returning anything on a bad endpoint."""
        g = cls(n)
        for u, v, w in triples:
            g.add_edge(u, v, w)
        return g

    @property
    def n(self) -> int:
        return self._n

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        return f"Graph(n={self._n}, m={len(self._edges)})"

    def _check(self, x: int, what: str) -> int:
        x = int(x)
        if not 0 <= x < self._n:
            raise VertexOutOfRangeError(f"{what} {x} out of range [0, {self._n}).")
        return x

    def add_edge(self, u: int, v: int, weight: float = 1.0) -> Edge:
        u = self._check(u, "source vertex")
        v = self._check(v, "destination vertex")
        e = Edge(u, v, float(weight))
        self._adj[u].append(e)
        self._edges.append(e)
        return e

    def neighbors(self, u: int) -> Tuple[Edge, ...]:
        return tuple(self._adj[self._check(u, "vertex")])

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def edge_count(self) -> int:
        return len(self._edges)

    def reverse(self) -> "Graph":
        """New graph with every edge flipped, weights unchanged."""
        rev = Graph(self._n)
        for e in self._edges:
            rev.add_edge(e.v, e.u, e.weight)
        return rev

    def out_adj(self) -> List[List[Tuple[int, float]]]:
        """Adjacency list: out_adj[u] is the list of (v, w) in insertion order."""
        return [[(e.v, e.weight) for e in nbrs] for nbrs in self._adj]

    def in_degrees(self) -> np.ndarray:
        deg = np.zeros(self._n, dtype=np.int64)
        for e in self._edges:
            deg[e.v] += 1
        return deg

    def to_csr(self) -> sparse.csr_matrix:
        """Sparse adjacency matrix; parallel edges are summed."""
        if not self._edges:
            return sparse.csr_matrix((self._n, self._n), dtype=np.float64)
        src = np.fromiter((e.u for e in self._edges), dtype=np.int32, count=len(self._edges))
        dst = np.fromiter((e.v for e in self._edges), dtype=np.int32, count=len(self._edges))
        w = np.fromiter((e.weight for e in self._edges), dtype=np.float64, count=len(self._edges))
        return sparse.csr_matrix((w, (src, dst)), shape=(self._n, self._n), dtype=np.float64)
