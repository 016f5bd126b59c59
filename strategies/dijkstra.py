from strategies.common import (
    EmptySourcesError,
    Frontier,
    FrontierEmpty,
    SearchError,
    check_step_cost,
    reconstruct_path,
)

READY = "ready"
RUNNING = "running"
FOUND = "found"
EXHAUSTED = "exhausted"
FAILED = "failed"


class DijkstraSearch:
    """One uniform-cost search over a StateGraph.

    Owns the best-cost map, the parent map and the frontier for a single run.
    For timed graphs the turn of a node is ``start_turn + cost``, so every
    unit of step cost is one turn.
    """

    def __init__(self, graph, sources, is_goal, start_turn=None):
        sources = list(dict.fromkeys(sources))
        if not sources:
            raise EmptySourcesError("Search needs at least one source node")
        if graph.timed:
            if start_turn is None:
                raise ValueError("Time-varying graph needs a start_turn")
            if start_turn < 0:
                raise ValueError(f"start_turn must be non-negative, got {start_turn}")
        self.graph = graph
        self.sources = sources
        self.is_goal = is_goal
        self.start_turn = start_turn
        self.best_cost = {}
        self.came_from = {}
        self.frontier = Frontier()
        self.nodes_expanded = 0
        self.state = READY
        self.result = None
        self.error = None

    def _successors(self, node, cost):
        if self.graph.timed:
            return self.graph.successors(node, self.start_turn + cost)
        return self.graph.successors(node)

    def run(self):
        """Run to completion.

        Returns (goal_node, nodes_expanded, path, cost) or None when the
        frontier runs dry. A SearchError raised by the graph leaves the search
        failed, and later calls raise the same error again.
        """
        if self.state == FAILED:
            raise self.error
        if self.state != READY:
            return self.result
        self.state = RUNNING
        try:
            self.result = self._search()
        except SearchError as e:
            self.state = FAILED
            self.error = e
            raise
        self.state = FOUND if self.result is not None else EXHAUSTED
        return self.result

    def _search(self):
        for source in self.sources:
            self.best_cost[source] = 0
            self.frontier.push(source, 0)

        while True:
            try:
                node, cost = self.frontier.pop_min()
            except FrontierEmpty:
                return None

            # Stale duplicate, a cheaper entry for this node was pushed later
            if cost > self.best_cost[node]:
                continue
            self.nodes_expanded += 1

            if self.is_goal(node):
                path = reconstruct_path(self.came_from, node, self.best_cost)
                return node, self.nodes_expanded, path, cost

            for neighbor, step_cost in self._successors(node, cost):
                new_cost = cost + check_step_cost(node, neighbor, step_cost)
                if new_cost < self.best_cost.get(neighbor, float('inf')):
                    self.best_cost[neighbor] = new_cost
                    self.came_from[neighbor] = node
                    self.frontier.push(neighbor, new_cost)


def run_dijkstra(graph, sources, is_goal, start_turn=None):
    """
    Dijkstra's algorithm - uninformed shortest path search over an implicit graph.
    Args:
        graph: StateGraph supplying successors(node) or successors(node, turn)
        sources: one or more start nodes, all seeded at cost 0
        is_goal: predicate called on each expanded node
        start_turn: absolute turn of the sources (time-varying graphs only)
    Returns:
        (goal_node, nodes_expanded, path, cost) or None
    """
    return DijkstraSearch(graph, sources, is_goal, start_turn=start_turn).run()
