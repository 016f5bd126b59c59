from concurrent.futures import ThreadPoolExecutor

from strategies.dijkstra import run_dijkstra


def run_itinerary(valley, waypoints, start_turn=0, run_fn=run_dijkstra):
    """Travel through the waypoints in order over one time-varying valley.

    Each leg starts on the turn the previous leg arrived, and every leg reads
    blizzard layers from the same cache (valley.layers), so turns derived for
    an earlier leg are never recomputed.

    Returns a list with one {'path', 'cost', 'turn', 'nodes'} entry per leg,
    'turn' being the absolute arrival turn, or None if some leg is impossible.
    """
    waypoints = list(waypoints)
    if len(waypoints) < 2:
        raise ValueError("An itinerary needs at least two waypoints")

    legs = []
    turn = start_turn
    for origin, target in zip(waypoints, waypoints[1:]):
        result = run_fn(valley, [valley.node_at(origin, turn)], valley.reaches(target), start_turn=turn)
        if result is None:
            return None
        _goal, nodes, path, cost = result
        turn += cost
        legs.append({"path": path, "cost": cost, "turn": turn, "nodes": nodes})
    return legs


def search_each_source(graph, sources, is_goal, start_turn=None, run_fn=run_dijkstra, workers=None):
    """Run one independent single-source search per source.

    Every search owns its own best-cost/parent/frontier state, so they can run
    in a thread pool. Returns {source: result}.
    """
    sources = list(dict.fromkeys(sources))

    def _one(source):
        return run_fn(graph, [source], is_goal, start_turn=start_turn)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(_one, sources))
    return dict(zip(sources, results))


def best_result(results):
    """Cheapest found result among {source: result}, or None when none was found."""
    best = None
    for result in results.values():
        if result is not None and (best is None or result[3] < best[3]):
            best = result
    return best
