import bisect
import sys

from strategies.common import NegativeCostError, StateGraph, check_step_cost


class Graph(StateGraph):
    """Explicit weighted digraph with an origin and a set of destinations."""
    def __init__(self):
        self.adjacency = {}       # {from_node_id: [(to_node_id, cost), ...]} sorted by id
        self.origin = None
        self.destinations = set()

    @classmethod
    def from_ways(cls, ways_df, start=None, goals=()):
        """Build a graph from a ways DataFrame (columns: from, to, base_time)."""
        graph = cls()
        for from_id, to_id, cost in ways_df[['from', 'to', 'base_time']].itertuples(index=False, name=None):
            graph.add_edge(int(from_id), int(to_id), float(cost))
        if start is not None:
            graph.origin = int(start)
        graph.destinations.update(int(g) for g in goals)
        return graph

    def add_edge(self, from_id, to_id, cost):
        """Adds a directed edge. Negative or non-finite costs are rejected here."""
        check_step_cost(from_id, to_id, cost)
        # Neighbours stay in ascending id order so ties expand deterministically
        bisect.insort(self.adjacency.setdefault(from_id, []), (to_id, cost))

    def successors(self, node, turn=None):
        return self.adjacency.get(node, [])

    def is_destination(self, node):
        return node in self.destinations

    def path_cost(self, path):
        """Total cost of the cheapest edges along path, or None if a hop has no edge."""
        total = 0
        for from_node, to_node in zip(path, path[1:]):
            costs = [cost for neighbor, cost in self.adjacency.get(from_node, []) if neighbor == to_node]
            if not costs:
                return None
            total += min(costs)
        return total


class GraphReader:
    """Reads the Nodes:/Edges:/Origin:/Destinations: problem format.

    Node coordinates are not needed by the search, so the Nodes section is
    skipped. Malformed lines are reported on stderr and ignored, except for
    edges with invalid costs, which raise NegativeCostError.
    """

    SECTIONS = {"Nodes:": "NODES", "Edges:": "EDGES", "Origin:": "ORIGIN", "Destinations:": "DESTINATIONS"}

    def __init__(self, filename):
        self.filename = filename
        self.graph = Graph()

    def read_problem(self):
        try:
            with open(self.filename, 'r') as f:
                lines = [line.strip() for line in f if line.strip()]
        except FileNotFoundError:
            print(f"Error: File not found: {self.filename}", file=sys.stderr)
            sys.exit(1)

        parsers = {
            "EDGES": self._parse_edge,
            "ORIGIN": self._parse_origin,
            "DESTINATIONS": self._parse_destinations,
        }
        section = None
        for line in lines:
            header = next((h for h in self.SECTIONS if line.startswith(h)), None)
            if header is not None:
                section = self.SECTIONS[header]
                continue
            parse = parsers.get(section)
            if parse is None:
                continue
            try:
                parse(line)
            except NegativeCostError:
                raise
            except (ValueError, IndexError) as e:
                print(f"Error parsing {section.lower()} line '{line}': {e}", file=sys.stderr)
        return self.graph

    def _parse_edge(self, line):
        # (2,1): 4
        pair, cost = line.split(':')
        from_id, to_id = map(int, pair.strip().strip('()').split(','))
        self.graph.add_edge(from_id, to_id, int(cost))

    def _parse_origin(self, line):
        self.graph.origin = int(line)

    def _parse_destinations(self, line):
        # 5; 4
        self.graph.destinations.update(int(d) for d in line.split(';') if d.strip())


def FormatBytes(n_bytes: int) -> str:
    """Convert number of bytes to human-readable in KB/MB with 2 decimals.

    Args:
        n_bytes (int): Number of bytes.

    Returns:
        str: Human-readable string representation.
    """
    if n_bytes < 1024:
        return f"{n_bytes} B"
    kb = n_bytes / 1024.0
    if kb < 1024:
        return f"{kb:.2f} KB"
    mb = kb / 1024.0
    if mb < 1024:
        return f"{mb:.2f} MB"
    gb = mb / 1024.0
    return f"{gb:.2f} GB"
