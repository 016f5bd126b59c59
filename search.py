import sys
import time
import tracemalloc

import pandas as pd
import psutil

from file_reader import is_content_line, parse_config_file
from grids import parse_hill_grid, parse_valley
from multi_search import run_itinerary
from strategies.bfs import run_bfs
from strategies.dijkstra import run_dijkstra
from util import FormatBytes, Graph, GraphReader

GRAPH_METHODS = {"DIJKSTRA": run_dijkstra, "BFS": run_bfs}
GRID_METHODS = ("HILL", "HILL_ANY", "VALLEY", "VALLEY_TRIP")


def _read_text(filename):
    try:
        with open(filename, 'r') as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {filename}", file=sys.stderr)
        sys.exit(1)


def load_graph(filename):
    """Load an explicit graph, either the Nodes:/Edges: problem format or a [NODES]/[WAYS] road file."""
    first = next((line.strip() for line in _read_text(filename).splitlines() if is_content_line(line)), "")
    if first.startswith("["):
        ways_df, start, goals = parse_config_file(filename)
        return Graph.from_ways(ways_df, start=start, goals=goals)
    return GraphReader(filename).read_problem()


def _graph_query(graph):
    sources = [graph.origin] if graph.origin is not None else []
    return sources, graph.is_destination


def build_grid_run(filename, method):
    """Returns a zero-argument callable solving the grid problem in filename."""
    text = _read_text(filename)
    if method in ("HILL", "HILL_ANY"):
        grid = parse_hill_grid(text)
        sources = grid.starting_cells('a') if method == "HILL_ANY" else [grid.start]
        return lambda: run_dijkstra(grid, sources, grid.is_end)

    valley = parse_valley(text)
    if method == "VALLEY":
        return lambda: run_dijkstra(valley, [valley.node_at(valley.start, 0)], valley.reaches(valley.end), start_turn=0)

    def _trip():
        legs = run_itinerary(valley, [valley.start, valley.end, valley.start, valley.end])
        if legs is None:
            return None
        for i, leg in enumerate(legs, 1):
            print(f"Leg {i}: {leg['cost']} turns, arrived on turn {leg['turn']}")
        path = legs[0]["path"]
        for leg in legs[1:]:
            path = path + leg["path"][1:]
        return path[-1], sum(leg["nodes"] for leg in legs), path, legs[-1]["turn"]
    return _trip


def compare_methods(graph, sources, is_goal):
    """Run every explicit-graph strategy on one query and tabulate the outcome."""
    rows = []
    for name, run_fn in GRAPH_METHODS.items():
        t0 = time.perf_counter()
        result = run_fn(graph, sources, is_goal)
        runtime_ms = (time.perf_counter() - t0) * 1000
        if result is None:
            rows.append({"method": name, "goal": None, "nodes": 0, "cost": None, "runtime_ms": runtime_ms})
            continue
        goal, nodes, path, _steps = result
        rows.append({
            "method": name,
            "goal": goal,
            "nodes": nodes,
            "cost": graph.path_cost(path),
            "runtime_ms": runtime_ms,
        })
    return pd.DataFrame(rows, columns=["method", "goal", "nodes", "cost", "runtime_ms"])


def _execute_with_metrics(run_fn):
    """Run a search function and collect runtime and memory metrics.

    Returns: (result, runtime_seconds, peak_tracemalloc_bytes, rss_after_bytes)
    - peak_tracemalloc_bytes: peak Python allocations measured by tracemalloc
    - rss_after_bytes: process RSS at end (approx OS memory usage)
    """
    tracemalloc.start()
    proc = psutil.Process()
    t0 = time.perf_counter()
    try:
        result = run_fn()
    finally:
        dt = time.perf_counter() - t0
        _cur, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    return result, dt, peak, proc.memory_info().rss


def _emit_metrics(metrics_mode, method, nodes, cost, runtime_s, peak_bytes, rss_after):
    if metrics_mode not in ("stderr", "stdout"):
        return
    metrics_line = (
        f"Metrics: method={method} nodes_expanded={nodes} "
        f"path_cost={cost if cost is not None else 'N/A'} "
        f"runtime_ms={(runtime_s*1000):.3f} peak_py_mem={FormatBytes(peak_bytes)} "
        f"rss_now={FormatBytes(rss_after)}"
    )
    if metrics_mode == "stdout":
        print(metrics_line)
    else:
        print(metrics_line, file=sys.stderr)


def main(filename, method, metrics_mode="none"):
    """Main function to run the search algorithm.

    metrics_mode: "none" | "stderr" | "stdout"
    - When not "none", prints a single metrics line in addition to the result
    """
    method = method.upper()
    print(f"Problem File: {filename}, Method: {method}")

    try:
        if method in GRAPH_METHODS or method == "ALL":
            graph = load_graph(filename)
            print(f"Origin: {graph.origin}")
            print(f"Destinations: {graph.destinations}")
            sources, is_goal = _graph_query(graph)
            if method == "ALL":
                print(compare_methods(graph, sources, is_goal).to_string(index=False))
                return
            search_fn = GRAPH_METHODS[method]
            run_fn = lambda: search_fn(graph, sources, is_goal)
        elif method in GRID_METHODS:
            graph = None
            run_fn = build_grid_run(filename, method)
        else:
            print(f"Unknown method: {method}")
            return

        result, runtime_s, peak_bytes, rss_after = _execute_with_metrics(run_fn)
    except ValueError as e:  # SearchError and malformed grids
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Expected output:
    # <filename> <method>
    # <goal_node> <nodes_created> <path>
    print(f"{filename} {method}")
    if result is None:
        print("None 0 ")
        _emit_metrics(metrics_mode, method, 0, None, runtime_s, peak_bytes, rss_after)
        return

    goal_node, nodes_created, path_list, total_cost = result
    # BFS counts steps; report the weighted cost on explicit graphs
    if graph is not None:
        total_cost = graph.path_cost(path_list)

    print(f"Goal node reached:{goal_node}")
    print(f"Number of Nodes visited:{nodes_created}")
    print(" -> ".join(str(n) for n in path_list))
    if total_cost is not None:
        print(f"Total path cost:{total_cost}")

    _emit_metrics(metrics_mode, method, nodes_created, total_cost, runtime_s, peak_bytes, rss_after)


if __name__ == "__main__":
    # e.g., python search.py problems/hill_example.txt HILL --metrics
    if len(sys.argv) not in (3, 4):
        print("Usage: python search.py <filename> <method> [--metrics | --metrics-stdout]")
        print("Methods: DIJKSTRA, BFS, ALL, HILL, HILL_ANY, VALLEY, VALLEY_TRIP")
        sys.exit(1)

    filename, method = sys.argv[1], sys.argv[2]
    metrics_mode = "none"
    if len(sys.argv) == 4:
        flag = sys.argv[3].lower()
        if flag in ("--metrics", "-m"):
            metrics_mode = "stderr"
        elif flag == "--metrics-stdout":
            metrics_mode = "stdout"
        else:
            print(f"Warning: unknown flag '{sys.argv[3]}'. Metrics disabled.", file=sys.stderr)

    main(filename, method, metrics_mode)
