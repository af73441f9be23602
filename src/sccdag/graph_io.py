from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .graph import Graph

PathLike = Union[str, Path]


@dataclass
class GraphData:
    """Graph as described by an input JSON document.

    {"directed": true, "n": 4, "edges": [{"u": 0, "v": 1, "w": 2.5}, ...],
     "source": 0, "weight_model": "edge"}
    """

    n: int
    edges: List[Tuple[int, int, float]] = field(default_factory=list)
    directed: bool = True
    source: Optional[int] = None
    weight_model: str = "edge"

    @classmethod
    def from_dict(cls, doc: dict) -> "GraphData":
        if not isinstance(doc, dict):
            raise ValueError("Graph document must be a JSON object.")
        if "n" not in doc:
            raise ValueError("Graph document is missing the vertex count 'n'.")
        n = _as_int(doc["n"], "n")
        edges = []
        for i, e in enumerate(doc.get("edges") or []):
            try:
                u, v = e["u"], e["v"]
            except (KeyError, TypeError) as exc:
                raise ValueError(f"Edge #{i} must be an object with 'u' and 'v'.") from exc
            edges.append((
                _as_int(u, f"edges[{i}].u"),
                _as_int(v, f"edges[{i}].v"),
                _as_float(e.get("w", 1.0), f"edges[{i}].w"),
            ))
        source = doc.get("source")
        directed = doc.get("directed", True)
        if not isinstance(directed, bool):
            raise ValueError(f"'directed' must be true or false, got {directed!r}.")
        return cls(
            n=n,
            edges=edges,
            directed=directed,
            source=None if source is None else _as_int(source, "source"),
            weight_model=doc.get("weight_model") or "edge",
        )

    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "n": self.n,
            "edges": [{"u": u, "v": v, "w": w} for u, v, w in self.edges],
            "source": self.source,
            "weight_model": self.weight_model,
        }

    def to_graph(self) -> Graph:
        """Build the Graph. Undirected input is rejected; endpoints are range-checked."""
        if not self.directed:
            raise ValueError("Only directed graphs are supported (got 'directed': false).")
        return Graph.from_edges(self.n, self.edges)

    @classmethod
    def from_graph(cls, graph: Graph, source: Optional[int] = None, weight_model: str = "edge") -> "GraphData":
        return cls(
            n=graph.n,
            edges=[(e.u, e.v, e.weight) for e in graph.edges],
            source=source,
            weight_model=weight_model,
        )


def _as_float(x, what: str) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise ValueError(f"'{what}' must be a number, got {x!r}.")
    try:
        w = float(x)
    except OverflowError as exc:
        raise ValueError(f"'{what}' is too large: {x!r}.") from exc
    if not math.isfinite(w):
        raise ValueError(f"'{what}' must be finite, got {x!r}.")
    return w


def _as_int(x, what: str) -> int:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise ValueError(f"'{what}' must be an integer, got {x!r}.")
    if isinstance(x, float) and not (math.isfinite(x) and x.is_integer()):
        raise ValueError(f"'{what}' must be an integer, got {x!r}.")
    return int(x)


def load_graph_data(path: PathLike) -> GraphData:
    with open(path, "r", encoding="utf-8") as f:
        return GraphData.from_dict(json.load(f))


def save_graph_data(data: GraphData, path: PathLike) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data.to_dict(), f, indent=2)
    return path
