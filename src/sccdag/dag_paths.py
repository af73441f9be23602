from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import numpy as np

from .graph import Graph, VertexOutOfRangeError
from .metrics import AlgorithmMetrics
from .topo import CycleDetectedError, require_topo_order


def _trace(parent: np.ndarray, target: int) -> List[int]:
    path: List[int] = []
    cur = int(target)
    while cur != -1:
        path.append(cur)
        cur = int(parent[cur])
    path.reverse()
    return path


@dataclass
class PathResult:
    """Single-source shortest distances over a DAG.

    dist[v] is +inf for vertices the source cannot reach; parent[v] is -1 for the
    source and for unreached vertices.
    """

    source: int
    dist: np.ndarray
    parent: np.ndarray
    order: List[int] = field(default_factory=list)

    def distance(self, target: int) -> float:
        return float(self.dist[self._check(target)])

    def reachable(self) -> np.ndarray:
        return np.isfinite(self.dist)

    def path_to(self, target: int) -> List[int]:
        """Vertices source..target on a shortest path; [] if target is unreachable."""
        t = self._check(target)
        if not np.isfinite(self.dist[t]):
            return []
        return _trace(self.parent, t)

    def _check(self, target: int) -> int:
        t = int(target)
        if not 0 <= t < len(self.dist):
            raise VertexOutOfRangeError(f"target vertex {t} out of range [0, {len(self.dist)}).")
        return t


@dataclass
class LongestPathResult:
    """Critical path of a DAG.

    On a cyclic input nothing is relaxed: length is -inf, path is empty and
    `acyclic` is False.
    """

    length: float
    path: List[int]
    dist: np.ndarray
    parent: np.ndarray
    acyclic: bool = True

    @property
    def start(self) -> int:
        return self.path[0] if self.path else -1

    @property
    def end(self) -> int:
        return self.path[-1] if self.path else -1


def shortest_paths(
    dag: Graph,
    source: int,
    *,
    order: Optional[Sequence[int]] = None,
    metrics: Optional[AlgorithmMetrics] = None,
) -> PathResult:
    """Single-source shortest paths by relaxation in topological order.

    Negative weights are fine. Raises CycleDetectedError if `dag` has a cycle,
    VertexOutOfRangeError for a bad source.
    """
    n = dag.n
    source = int(source)
    if not 0 <= source < n:
        raise VertexOutOfRangeError(f"source vertex {source} out of range [0, {n}).")

    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        topo = require_topo_order(dag, order)
        out_adj = dag.out_adj()

        dist = np.full(n, np.inf, dtype=np.float64)
        parent = np.full(n, -1, dtype=np.int64)
        dist[source] = 0.0

        for u in topo:
            du = dist[u]
            if not np.isfinite(du):
                continue
            for v, w in out_adj[u]:
                m.edge_traversals += 1
                cand = du + w
                if cand < dist[v]:
                    m.relaxations += 1
                    dist[v] = cand
                    parent[v] = u

    return PathResult(source=source, dist=dist, parent=parent, order=topo)


def longest_path(
    dag: Graph,
    *,
    order: Optional[Sequence[int]] = None,
    metrics: Optional[AlgorithmMetrics] = None,
) -> LongestPathResult:
    """Global longest (critical) path of a DAG.

    Every vertex without incoming edges starts at 0, all others at -inf; edges
    are relaxed in topological order maximising dist[u] + w. The endpoint is the
    vertex with the largest distance (lowest index on ties) and the path runs
    back along parent pointers to a true source.
    """
    n = dag.n
    dist = np.full(n, -np.inf, dtype=np.float64)
    parent = np.full(n, -1, dtype=np.int64)

    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        try:
            topo = require_topo_order(dag, order)
        except CycleDetectedError:
            return LongestPathResult(-np.inf, [], dist, parent, acyclic=False)

        out_adj = dag.out_adj()
        has_incoming = np.zeros(n, dtype=bool)
        for nbrs in out_adj:
            for v, _ in nbrs:
                m.edge_traversals += 1
                has_incoming[v] = True
        dist[~has_incoming] = 0.0

        for u in topo:
            du = dist[u]
            if not np.isfinite(du):
                continue
            for v, w in out_adj[u]:
                m.edge_traversals += 1
                cand = du + w
                if cand > dist[v]:
                    m.relaxations += 1
                    dist[v] = cand
                    parent[v] = u

        if n == 0:
            return LongestPathResult(-np.inf, [], dist, parent)
        end = int(np.argmax(dist))
        length = float(dist[end])

    return LongestPathResult(length, _trace(parent, end), dist, parent)
