from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import numpy as np

from .graph import Graph
from .metrics import AlgorithmMetrics


class _TarjanContext:
    """Scratch state for one low-link run; discarded when the run ends."""

    def __init__(self, n: int):
        self.counter = 0
        self.index = np.full(n, -1, dtype=np.int64)
        self.low = np.zeros(n, dtype=np.int64)
        self.on_stack = np.zeros(n, dtype=bool)
        self.stack: List[int] = []

    def discover(self, v: int) -> None:
        self.index[v] = self.counter
        self.low[v] = self.counter
        self.counter += 1
        self.stack.append(v)
        self.on_stack[v] = True

    def pop_component(self, root: int) -> List[int]:
        comp: List[int] = []
        while True:
            w = self.stack.pop()
            self.on_stack[w] = False
            comp.append(w)
            if w == root:
                return comp


def scc_tarjan(
    graph: Graph,
    *,
    metrics: Optional[AlgorithmMetrics] = None,
) -> Tuple[List[List[int]], np.ndarray]:
    """Strongly connected components via Tarjan's low-link algorithm (iterative).

    The call stack is simulated with frames (vertex, next edge position), so the
    visiting order is the one of the recursive formulation: start vertices in
    index order, neighbours in insertion order.

    Parameters
    ----------
    graph:
        input digraph (weights ignored).
    metrics:
        optional counters; reset and filled in by this call.

    Returns
    -------
    comps:
        list of components in discovery order; comps[c] lists the popped
        vertices, root last.
    comp_id:
        np.ndarray of length n mapping node -> component index in [0, k-1].
    """
    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        n = graph.n
        out_adj = graph.out_adj()
        ctx = _TarjanContext(n)
        comp_id = np.full(n, -1, dtype=np.int32)
        comps: List[List[int]] = []

        for start in range(n):
            if ctx.index[start] != -1:
                continue
            ctx.discover(start)
            m.dfs_visits += 1
            frames = [(start, 0)]
            while frames:
                v, i = frames[-1]
                nbrs = out_adj[v]
                if i < len(nbrs):
                    frames[-1] = (v, i + 1)
                    w = nbrs[i][0]
                    m.edge_traversals += 1
                    if ctx.index[w] == -1:
                        ctx.discover(w)
                        m.dfs_visits += 1
                        frames.append((w, 0))
                    elif ctx.on_stack[w]:
                        # back/cross edge into the open part of the stack
                        ctx.low[v] = min(ctx.low[v], ctx.index[w])
                    continue

                # v finished
                frames.pop()
                if ctx.low[v] == ctx.index[v]:
                    comp = ctx.pop_component(v)
                    comp_id[comp] = len(comps)
                    comps.append(comp)
                if frames:
                    p = frames[-1][0]
                    ctx.low[p] = min(ctx.low[p], ctx.low[v])

    return comps, comp_id


def scc_kosaraju(
    graph: Graph,
    *,
    metrics: Optional[AlgorithmMetrics] = None,
) -> Tuple[List[List[int]], np.ndarray]:
    """Strongly connected components via Kosaraju (iterative).

    Same output contract as `scc_tarjan`; membership agrees, component order
    and order within a component generally do not.
    """
    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        n = graph.n
        out_adj = graph.out_adj()
        rev: List[List[int]] = [[] for _ in range(n)]
        for e in graph.edges:
            rev[e.v].append(e.u)

        visited = np.zeros(n, dtype=bool)
        order: List[int] = []

        # first pass: compute finishing order
        for start in range(n):
            if visited[start]:
                continue
            stack = [(start, 0)]
            visited[start] = True
            m.dfs_visits += 1
            while stack:
                u, idx = stack[-1]
                nbrs = out_adj[u]
                if idx < len(nbrs):
                    v = nbrs[idx][0]
                    stack[-1] = (u, idx + 1)
                    m.edge_traversals += 1
                    if not visited[v]:
                        visited[v] = True
                        m.dfs_visits += 1
                        stack.append((v, 0))
                else:
                    stack.pop()
                    order.append(u)

        # second pass on reversed graph
        comp_id = np.full(n, -1, dtype=np.int32)
        comps: List[List[int]] = []

        for start in reversed(order):
            if comp_id[start] != -1:
                continue
            cid = len(comps)
            comps.append([])
            stack = [start]
            comp_id[start] = cid
            while stack:
                u = stack.pop()
                comps[cid].append(u)
                for v in rev[u]:
                    m.edge_traversals += 1
                    if comp_id[v] == -1:
                        comp_id[v] = cid
                        stack.append(v)

    return comps, comp_id


def comp_id_from_components(comps: Sequence[Sequence[int]], n: int) -> np.ndarray:
    """Total vertex -> component map. Raises ValueError unless comps partitions [0, n)."""
    comp_id = np.full(int(n), -1, dtype=np.int32)
    for c, members in enumerate(comps):
        for v in members:
            v = int(v)
            if not 0 <= v < n:
                raise ValueError(f"Component {c} contains vertex {v} outside [0, {n}).")
            if comp_id[v] != -1:
                raise ValueError(f"Vertex {v} appears in components {comp_id[v]} and {c}.")
            comp_id[v] = c
    missing = np.flatnonzero(comp_id == -1)
    if missing.size:
        raise ValueError(f"Vertices not covered by any component: {missing.tolist()}")
    return comp_id
