from __future__ import annotations

from typing import Dict, List, Optional, Sequence
import numpy as np

from .graph import Graph
from .metrics import AlgorithmMetrics
from .scc import comp_id_from_components

AGGREGATES = ("first", "min", "max")


def build_condensation(
    graph: Graph,
    comps: Sequence[Sequence[int]],
    comp_id: np.ndarray,
    *,
    aggregate: str = "first",
    metrics: Optional[AlgorithmMetrics] = None,
) -> Graph:
    """Contract every SCC to one vertex.

    Each original edge (u, v, w) is projected to (comp_id[u], comp_id[v], w).
    Intra-component edges are dropped. Between an ordered pair of components
    exactly one edge is kept, placed where the first such edge appeared:

    - "first": the first-seen weight (default);
    - "min" / "max": the smallest / largest weight over all parallel edges.

    The result is a new Graph over len(comps) vertices and is acyclic whenever
    `comps` is the SCC decomposition of `graph`.
    """
    if aggregate not in AGGREGATES:
        raise ValueError(f"aggregate must be one of {AGGREGATES}, got {aggregate!r}.")
    comp_id = np.asarray(comp_id)
    if comp_id.shape != (graph.n,):
        raise ValueError(f"comp_id has shape {comp_id.shape}, expected ({graph.n},).")
    k = len(comps)
    if not np.array_equal(comp_id_from_components(comps, graph.n), comp_id):
        raise ValueError("comp_id disagrees with the component list.")

    m = metrics if metrics is not None else AlgorithmMetrics()
    with m.timing():
        # key cu * k + cv -> position in `kept`
        slot: Dict[int, int] = {}
        kept: List[List] = []
        for e in graph.edges:
            m.edge_traversals += 1
            cu = int(comp_id[e.u])
            cv = int(comp_id[e.v])
            if cu == cv:
                continue
            key = cu * k + cv
            pos = slot.get(key)
            if pos is None:
                slot[key] = len(kept)
                kept.append([cu, cv, e.weight])
            elif aggregate == "min":
                kept[pos][2] = min(kept[pos][2], e.weight)
            elif aggregate == "max":
                kept[pos][2] = max(kept[pos][2], e.weight)

        dag = Graph(k)
        for cu, cv, w in kept:
            dag.add_edge(cu, cv, w)

    return dag


def expand_components(
    comp_sequence: Sequence[int],
    comps: Sequence[Sequence[int]],
) -> List[List[int]]:
    """Member vertices of each component in `comp_sequence`."""
    return [list(comps[int(c)]) for c in comp_sequence]


def derived_vertex_order(
    comp_order: Sequence[int],
    comps: Sequence[Sequence[int]],
) -> List[int]:
    """Original vertices listed component by component, following `comp_order`."""
    return [int(v) for c in comp_order for v in comps[int(c)]]
