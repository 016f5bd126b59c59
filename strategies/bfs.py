from collections import deque

from strategies.common import EmptySourcesError, reconstruct_path


def run_bfs(graph, sources, is_goal, start_turn=None):
    """Breadth-First Search over a StateGraph, every step counted as 1.

    Returns (goal_node, nodes_expanded, path, cost) or None, like run_dijkstra.
    """
    sources = list(sources)
    if not sources:
        raise EmptySourcesError("Search needs at least one source node")
    if graph.timed and (start_turn is None or start_turn < 0):
        raise ValueError(f"Time-varying graph needs a non-negative start_turn, got {start_turn}")

    q = deque()
    depth = {}
    came_from = {}
    for source in sources:
        if source not in depth:
            depth[source] = 0
            q.append(source)
    nodes_expanded = 0

    while q:
        node = q.popleft()
        nodes_expanded += 1
        cost = depth[node]

        if is_goal(node):
            path = reconstruct_path(came_from, node, depth)
            return node, nodes_expanded, path, cost

        # BFS ignores cost, so every edge is one step (one turn on timed graphs)
        if graph.timed:
            neighbors = graph.successors(node, start_turn + cost)
        else:
            neighbors = graph.successors(node)
        for to_id, _ in neighbors:
            if to_id not in depth:
                depth[to_id] = cost + 1
                came_from[to_id] = node
                q.append(to_id)

    return None
