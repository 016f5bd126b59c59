"""Package exposing search strategy implementations."""

# Expose names for convenience (optional)
from .common import (
    StateGraph,
    Frontier,
    FrontierEmpty,
    SearchError,
    EmptySourcesError,
    NegativeCostError,
    reconstruct_path,
)
from .bfs import run_bfs
from .dijkstra import DijkstraSearch, run_dijkstra
from .layers import TimeLayerCache

__all__ = [
    "StateGraph", "Frontier", "FrontierEmpty", "SearchError", "EmptySourcesError",
    "NegativeCostError", "reconstruct_path", "run_bfs", "DijkstraSearch",
    "run_dijkstra", "TimeLayerCache",
]
