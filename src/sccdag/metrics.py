from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, asdict
import time


@dataclass
class AlgorithmMetrics:
    """Operation counters and wall time for one run of one stage.

    Stages reset the object on entry, so one instance can be reused across calls;
    it always describes the most recent run.
    """

    dfs_visits: int = 0
    edge_traversals: int = 0
    queue_ops: int = 0          # pushes and pops
    relaxations: int = 0
    elapsed: float = 0.0        # seconds

    def __post_init__(self) -> None:
        self._t0: float | None = None

    def reset(self) -> None:
        self.dfs_visits = 0
        self.edge_traversals = 0
        self.queue_ops = 0
        self.relaxations = 0
        self.elapsed = 0.0
        self._t0 = None

    def start(self) -> None:
        self._t0 = time.perf_counter()

    def stop(self) -> None:
        if self._t0 is not None:
            self.elapsed = time.perf_counter() - self._t0
            self._t0 = None

    @contextmanager
    def timing(self):
        """Reset, then time the enclosed block."""
        self.reset()
        self.start()
        try:
            yield self
        finally:
            self.stop()

    @property
    def elapsed_ms(self) -> float:
        return 1e3 * self.elapsed

    def snapshot(self) -> dict:
        out = asdict(self)
        out["elapsed_ms"] = self.elapsed_ms
        return out

    def __str__(self) -> str:
        return (
            f"Time: {self.elapsed_ms:.3f} ms | DFS Visits: {self.dfs_visits} | "
            f"Edge Traversals: {self.edge_traversals} | Queue Ops: {self.queue_ops} | "
            f"Relaxations: {self.relaxations}"
        )
