"""SCC condensation and DAG path analysis for directed weighted graphs.

This package provides a minimal implementation of:
- strongly connected components (Tarjan low-link, Kosaraju cross-check),
- condensation of SCCs into an acyclic quotient graph,
- topological ordering (Kahn, DFS) with cycle detection,
- single-source shortest paths and the critical (longest) path over a DAG.
"""

from .graph import Edge, Graph, VertexOutOfRangeError
from .metrics import AlgorithmMetrics
from .scc import scc_tarjan, scc_kosaraju, comp_id_from_components
from .condensation import build_condensation, expand_components, derived_vertex_order
from .topo import CycleDetectedError, topo_order_kahn, topo_order_dfs, is_topological_order
from .dag_paths import PathResult, LongestPathResult, shortest_paths, longest_path
from .graph_io import GraphData, load_graph_data, save_graph_data
from .pipeline import PipelineResult, run_pipeline, run_file, metrics_frame, summary_frame

__all__ = [
    "Edge",
    "Graph",
    "VertexOutOfRangeError",
    "AlgorithmMetrics",
    "scc_tarjan",
    "scc_kosaraju",
    "comp_id_from_components",
    "build_condensation",
    "expand_components",
    "derived_vertex_order",
    "CycleDetectedError",
    "topo_order_kahn",
    "topo_order_dfs",
    "is_topological_order",
    "PathResult",
    "LongestPathResult",
    "shortest_paths",
    "longest_path",
    "GraphData",
    "load_graph_data",
    "save_graph_data",
    "PipelineResult",
    "run_pipeline",
    "run_file",
    "metrics_frame",
    "summary_frame",
]
