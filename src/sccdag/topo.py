from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence
import numpy as np

from .graph import Graph
from .metrics import AlgorithmMetrics


class CycleDetectedError(ValueError):
    """A topological order was required but the graph has a cycle."""


def topo_order_kahn(
    graph: Graph,
    *,
    metrics: Optional[AlgorithmMetrics] = None,
) -> Optional[List[int]]:
    """Topological order via Kahn's algorithm.

    Zero in-degree vertices are seeded in index order and processed FIFO, so the
    result is deterministic. Returns None if the graph has a cycle (fewer than n
    vertices could be emitted); a partial order is never returned.
    """
    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        n = graph.n
        out_adj = graph.out_adj()
        indeg = np.zeros(n, dtype=np.int64)
        for nbrs in out_adj:
            for v, _ in nbrs:
                m.edge_traversals += 1
                indeg[v] += 1

        queue = deque()
        for u in range(n):
            if indeg[u] == 0:
                queue.append(u)
                m.queue_ops += 1

        order: List[int] = []
        while queue:
            u = queue.popleft()
            m.queue_ops += 1
            order.append(u)
            for v, _ in out_adj[u]:
                m.edge_traversals += 1
                indeg[v] -= 1
                if indeg[v] == 0:
                    queue.append(v)
                    m.queue_ops += 1

    if len(order) != n:
        return None
    return order


def topo_order_dfs(
    graph: Graph,
    *,
    metrics: Optional[AlgorithmMetrics] = None,
) -> Optional[List[int]]:
    """Topological order as reversed DFS finish order.

    An edge into a vertex that is still open (on the DFS path) is a cycle; the
    function then returns None. The order is valid but need not equal Kahn's.
    """
    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        n = graph.n
        out_adj = graph.out_adj()
        visited = np.zeros(n, dtype=bool)
        open_ = np.zeros(n, dtype=bool)
        finished: List[int] = []

        for start in range(n):
            if visited[start]:
                continue
            visited[start] = True
            open_[start] = True
            m.dfs_visits += 1
            stack = [(start, 0)]
            while stack:
                u, idx = stack[-1]
                nbrs = out_adj[u]
                if idx < len(nbrs):
                    v = nbrs[idx][0]
                    stack[-1] = (u, idx + 1)
                    m.edge_traversals += 1
                    if open_[v]:
                        return None
                    if not visited[v]:
                        visited[v] = True
                        open_[v] = True
                        m.dfs_visits += 1
                        stack.append((v, 0))
                else:
                    stack.pop()
                    open_[u] = False
                    finished.append(u)

    finished.reverse()
    return finished


def is_topological_order(graph: Graph, order: Sequence[int]) -> bool:
    """True iff `order` is a permutation of [0, n) with every edge pointing forward."""
    n = graph.n
    if len(order) != n:
        return False
    pos = np.full(n, -1, dtype=np.int64)
    for i, v in enumerate(order):
        v = int(v)
        if not 0 <= v < n or pos[v] != -1:
            return False
        pos[v] = i
    return all(pos[e.u] < pos[e.v] for e in graph.edges)


def require_topo_order(
    graph: Graph,
    order: Optional[Sequence[int]] = None,
    *,
    metrics: Optional[AlgorithmMetrics] = None,
) -> List[int]:
    """Kahn order of `graph`, or the caller's `order` after checking it.

    Raises CycleDetectedError when no order exists, whether or not one was
    supplied; ValueError when a supplied order is wrong for an acyclic graph.
    """
    if order is None:
        found = topo_order_kahn(graph, metrics=metrics)
        if found is None:
            raise CycleDetectedError(f"{graph!r} contains a cycle; no topological order exists.")
        return found
    if not is_topological_order(graph, order):
        if topo_order_kahn(graph) is None:
            raise CycleDetectedError(f"{graph!r} contains a cycle; no topological order exists.")
        raise ValueError("Supplied order is not a topological order of the graph.")
    return [int(v) for v in order]
