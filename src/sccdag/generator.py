from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Set, Tuple
import numpy as np
from tqdm.auto import tqdm

from .graph_io import GraphData, save_graph_data

DEFAULT_SEED = 42
DATA_DIR = Path("data")

# name, n, density, has_cycles, multiple_sccs, source
DATASET_SPECS = [
    ("small_cyclic", 8, 0.30, True, False, 0),
    ("small_dag", 10, 0.20, False, False, 0),
    ("small_multiple_scc", 7, 0.40, True, True, 3),
    ("medium_cyclic", 15, 0.25, True, False, 0),
    ("medium_dag", 18, 0.20, False, False, 2),
    ("medium_multiple_scc", 16, 0.35, True, True, 5),
    ("large_cyclic", 30, 0.20, True, False, 0),
    ("large_dag", 35, 0.15, False, False, 3),
    ("large_multiple_scc", 28, 0.30, True, True, 7),
]


class _EdgeSet:
    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.edges: List[Tuple[int, int, float]] = []
        self.seen: Set[Tuple[int, int]] = set()

    def add(self, u: int, v: int) -> bool:
        if (u, v) in self.seen:
            return False
        self.seen.add((u, v))
        self.edges.append((int(u), int(v), float(self.rng.uniform(1.0, 11.0))))
        return True

    def __len__(self) -> int:
        return len(self.edges)


def generate_graph(
    n: int,
    density: float,
    *,
    has_cycles: bool,
    multiple_sccs: bool,
    source: Optional[int] = 0,
    rng: Optional[np.random.Generator] = None,
) -> GraphData:
    """Random weighted digraph in one of three shapes.

    - has_cycles and multiple_sccs: about n/4 directed rings with a few chords
      each, consecutive rings joined by one forward edge (condensation is a chain);
    - has_cycles only: one Hamiltonian ring plus random chords up to the density;
    - otherwise a DAG: the chain 0 -> 1 -> ... -> n-1 plus forward branches.

    Weights are uniform in [1, 11). No parallel edges, no self-loops.
    """
    if rng is None:
        rng = np.random.default_rng(DEFAULT_SEED)
    n = int(n)
    es = _EdgeSet(rng)

    if n >= 2:
        min_edges = n - 1
        max_edges = int(density * n * (n - 1))
        target = min(max(min_edges, max_edges), n * (n - 1))

        if has_cycles and multiple_sccs:
            num_sccs = max(2, n // 4)
            per = n // num_sccs

            def bounds(c: int) -> Tuple[int, int]:
                return c * per, (n if c == num_sccs - 1 else (c + 1) * per)

            for c in range(num_sccs):
                start, end = bounds(c)
                for i in range(start, end - 1):
                    es.add(i, i + 1)
                if end - start > 1:
                    es.add(end - 1, start)
                for _ in range(max(0, (end - start) // 2)):
                    u = int(rng.integers(start, end))
                    v = int(rng.integers(start, end))
                    if u != v:
                        es.add(u, v)

            for c in range(num_sccs - 1):
                a0, a1 = bounds(c)
                b0, b1 = bounds(c + 1)
                es.add(int(rng.integers(a0, a1)), int(rng.integers(b0, b1)))

        elif has_cycles:
            for i in range(n - 1):
                es.add(i, i + 1)
            es.add(n - 1, 0)
            while len(es) < target:
                u = int(rng.integers(0, n))
                v = int(rng.integers(0, n))
                if u != v:
                    es.add(u, v)

        else:
            for i in range(n - 1):
                es.add(i, i + 1)
            branches = min(n // 3, target - (n - 1))
            for _ in range(branches):
                u = int(rng.integers(0, n - 1))
                v = int(rng.integers(u + 1, n))
                es.add(u, v)

    return GraphData(n=n, edges=es.edges, directed=True, source=source, weight_model="edge")


def generate_all_datasets(
    out_dir: Path = DATA_DIR,
    *,
    seed: int = DEFAULT_SEED,
    progress: bool = True,
) -> List[Path]:
    """Write the standard fixture set (DATASET_SPECS) as JSON files under `out_dir`."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(seed)

    written = []
    for name, n, density, cyc, multi, src in tqdm(DATASET_SPECS, desc="Generating datasets", disable=not progress):
        data = generate_graph(n, density, has_cycles=cyc, multiple_sccs=multi, source=src, rng=rng)
        written.append(save_graph_data(data, out_dir / f"{name}.json"))
    return written
