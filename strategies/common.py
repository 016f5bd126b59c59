import heapq
import itertools
import math


class SearchError(ValueError):
    """Base class for contract violations detected before or during a search."""


class EmptySourcesError(SearchError):
    """Raised when a search is started without any source node."""


class NegativeCostError(SearchError):
    """Raised when a graph reports a negative or non-finite step cost."""


class FrontierEmpty(Exception):
    """Raised by Frontier.pop_min() when no entries are left."""


class StateGraph:
    """Produces successors and step costs for a node.

    Static graphs implement ``successors(node)``. Graphs whose edges change
    every turn set ``timed = True`` and implement ``successors(node, turn)``,
    where ``turn`` is the absolute turn at which ``node`` is expanded.
    Neighbours outside the domain are left out of the result.
    """
    timed = False

    def successors(self, node, turn=None):
        raise NotImplementedError


class Frontier:
    """Min-priority queue of (cost, insertion order, node) entries.

    Duplicate entries for a node are allowed; callers discard stale ones
    when they are popped.
    """

    def __init__(self):
        self._heap = []
        self._counter = itertools.count()

    def push(self, node, cost):
        heapq.heappush(self._heap, (cost, next(self._counter), node))

    def pop_min(self):
        """Remove and return (node, cost) of the cheapest, earliest entry."""
        if not self._heap:
            raise FrontierEmpty()
        cost, _cnt, node = heapq.heappop(self._heap)
        return node, cost

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)


def check_step_cost(node, next_node, cost):
    """Reject step costs the search cannot handle."""
    if cost < 0 or not math.isfinite(cost):
        raise NegativeCostError(f"Invalid step cost {cost!r} on edge {node!r} -> {next_node!r}")
    return cost


def reconstruct_path(came_from, current, reached=None):
    """Reconstructs path (list of nodes, source first) from came_from map.

    When ``reached`` (the best-cost map of the search) is given, returns None
    for a node the search never reached.
    """
    if reached is not None and current not in reached:
        return None
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path
