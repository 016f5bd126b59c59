import random

import pytest

from strategies.bfs import run_bfs
from strategies.common import EmptySourcesError, NegativeCostError, StateGraph
from strategies.dijkstra import EXHAUSTED, FAILED, FOUND, READY, DijkstraSearch, run_dijkstra
from util import Graph


def make_graph(edges):
    graph = Graph()
    for a, b, cost in edges:
        graph.add_edge(a, b, cost)
    return graph


def random_graph(seed, n=7, density=0.35, max_cost=9):
    rng = random.Random(seed)
    graph = Graph()
    for a in range(n):
        for b in range(n):
            if a != b and rng.random() < density:
                graph.add_edge(a, b, rng.randint(0, max_cost))
    return graph


def brute_force_cost(graph, sources, goal):
    """Cheapest simple path from any source to goal, by exhaustive enumeration."""
    best = None

    def walk(node, cost, seen):
        nonlocal best
        if node == goal:
            if best is None or cost < best:
                best = cost
            return
        for neighbor, step in graph.successors(node):
            if neighbor not in seen:
                walk(neighbor, cost + step, seen | {neighbor})

    for source in sources:
        walk(source, 0, {source})
    return best


class RecordingDict(dict):
    def __init__(self):
        super().__init__()
        self.history = {}

    def __setitem__(self, key, value):
        self.history.setdefault(key, []).append(value)
        super().__setitem__(key, value)


class NegativeEdges(StateGraph):
    def successors(self, node, turn=None):
        return [(node + 1, -1)]


class Ticking(StateGraph):
    timed = True

    def successors(self, node, turn):
        return [(node + 1, 1)]


def test_finds_cheapest_path():
    graph = make_graph([("a", "b", 1), ("b", "c", 1), ("a", "c", 5), ("c", "d", 2)])
    goal, nodes, path, cost = run_dijkstra(graph, ["a"], lambda n: n == "d")
    assert goal == "d"
    assert path == ["a", "b", "c", "d"]
    assert cost == 4
    assert graph.path_cost(path) == cost
    assert nodes == 4


def test_zero_cost_edges():
    graph = make_graph([("a", "b", 0), ("b", "c", 0), ("a", "c", 1)])
    assert run_dijkstra(graph, ["a"], lambda n: n == "c")[3] == 0


def test_source_is_goal():
    graph = make_graph([("a", "b", 3)])
    assert run_dijkstra(graph, ["a"], lambda n: n == "a") == ("a", 1, ["a"], 0)


def test_source_without_successors_is_exhausted():
    graph = Graph()
    search = DijkstraSearch(graph, ["lonely"], lambda n: n == "elsewhere")
    assert search.state == READY
    assert search.run() is None
    assert search.state == EXHAUSTED


def test_unreachable_goal_is_exhausted():
    graph = make_graph([("a", "b", 1), ("b", "a", 1), ("c", "d", 1)])
    assert run_dijkstra(graph, ["a"], lambda n: n == "d") is None


def test_empty_sources_rejected():
    with pytest.raises(EmptySourcesError):
        run_dijkstra(make_graph([("a", "b", 1)]), [], lambda n: n == "b")


def test_negative_cost_rejected_by_graph():
    with pytest.raises(NegativeCostError):
        make_graph([("a", "b", -2)])


@pytest.mark.parametrize("cost", [float('inf'), float('nan')])
def test_non_finite_cost_rejected_by_graph(cost):
    with pytest.raises(NegativeCostError):
        make_graph([("a", "b", cost)])


def test_negative_cost_from_implicit_graph():
    with pytest.raises(NegativeCostError):
        run_dijkstra(NegativeEdges(), [0], lambda n: n == 5)


def test_rerun_after_negative_cost_raises_again():
    search = DijkstraSearch(NegativeEdges(), [0], lambda n: n == 5)
    with pytest.raises(NegativeCostError):
        search.run()
    assert search.state == FAILED
    with pytest.raises(NegativeCostError):
        search.run()
    assert search.result is None


def test_timed_graph_requires_start_turn():
    with pytest.raises(ValueError):
        run_dijkstra(Ticking(), [0], lambda n: n == 3)
    with pytest.raises(ValueError):
        run_dijkstra(Ticking(), [0], lambda n: n == 3, start_turn=-1)


def test_timed_graph_counts_turns_from_start_turn():
    seen_turns = []

    class Recorder(Ticking):
        def successors(self, node, turn):
            seen_turns.append(turn)
            return super().successors(node, turn)

    assert run_dijkstra(Recorder(), [0], lambda n: n == 3, start_turn=10)[3] == 3
    assert seen_turns == [10, 11, 12]


def test_stale_entries_are_not_expanded():
    graph = make_graph([("a", "c", 10), ("a", "b", 1), ("b", "c", 1)])
    search = DijkstraSearch(graph, ["a"], lambda n: n == "z")
    assert search.run() is None
    assert search.nodes_expanded == 3
    assert search.best_cost == {"a": 0, "b": 1, "c": 2}
    assert search.came_from == {"b": "a", "c": "b"}


def test_best_cost_never_increases():
    graph = make_graph([("a", "c", 10), ("a", "b", 1), ("b", "c", 1), ("c", "d", 1), ("a", "d", 20)])
    search = DijkstraSearch(graph, ["a"], lambda n: n == "d")
    search.best_cost = RecordingDict()
    assert search.run()[3] == 3
    assert search.best_cost.history["c"] == [10, 2]
    for values in search.best_cost.history.values():
        assert values == sorted(values, reverse=True)


@pytest.mark.parametrize("seed", range(20))
def test_best_cost_never_increases_on_random_graphs(seed):
    graph = random_graph(seed)
    search = DijkstraSearch(graph, [0], lambda n: False)
    search.best_cost = RecordingDict()
    search.run()
    for values in search.best_cost.history.values():
        assert values == sorted(values, reverse=True)


def test_parent_only_for_relaxed_nodes():
    graph = make_graph([(1, 2, 1), (3, 2, 5), (2, 4, 1)])
    search = DijkstraSearch(graph, [1, 3], lambda n: n == 4)
    search.run()
    assert 1 not in search.came_from
    assert 3 not in search.came_from
    assert search.came_from[2] == 1


@pytest.mark.parametrize("seed", range(30))
def test_matches_brute_force(seed):
    graph = random_graph(seed)
    for goal in range(1, 7):
        result = run_dijkstra(graph, [0], lambda n, goal=goal: n == goal)
        expected = brute_force_cost(graph, [0], goal)
        if expected is None:
            assert result is None
        else:
            assert result[3] == expected
            assert graph.path_cost(result[2]) == expected
            assert result[2][0] == 0 and result[2][-1] == goal


@pytest.mark.parametrize("seed", range(15))
def test_multi_source_equals_best_single_source(seed):
    graph = random_graph(seed, n=8)
    sources = [0, 3, 5]
    for goal in (1, 2, 7):
        is_goal = lambda n, goal=goal: n == goal
        merged = run_dijkstra(graph, sources, is_goal)
        singles = [run_dijkstra(graph, [s], is_goal) for s in sources]
        found = [r[3] for r in singles if r is not None]
        if not found:
            assert merged is None
            continue
        assert merged[3] == min(found)
        assert merged[2][0] in sources
        assert merged[3] == brute_force_cost(graph, sources, goal)


@pytest.mark.parametrize("seed", range(15))
def test_unit_costs_match_bfs(seed):
    graph = random_graph(seed, max_cost=0)
    unit = Graph()
    for a, edges in graph.adjacency.items():
        for b, _ in edges:
            unit.add_edge(a, b, 1)
    for goal in range(7):
        by_dijkstra = run_dijkstra(unit, [0], lambda n, goal=goal: n == goal)
        by_bfs = run_bfs(unit, [0], lambda n, goal=goal: n == goal)
        if by_bfs is None:
            assert by_dijkstra is None
        else:
            assert by_dijkstra[3] == by_bfs[3]
            assert len(by_dijkstra[2]) == len(by_bfs[2])


def test_deterministic():
    graph = random_graph(4, n=9, density=0.5, max_cost=3)
    first = run_dijkstra(graph, [0, 1], lambda n: n == 8)
    second = run_dijkstra(graph, [0, 1], lambda n: n == 8)
    assert first == second


def test_run_twice_returns_same_result():
    graph = make_graph([("a", "b", 2)])
    search = DijkstraSearch(graph, ["a"], lambda n: n == "b")
    first = search.run()
    assert search.state == FOUND
    assert search.run() == first
