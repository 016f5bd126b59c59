import math

from strategies.common import StateGraph
from strategies.layers import TimeLayerCache

# --- Hill climbing grid (static) ---

OFFSETS = [(0, 1), (0, -1), (1, 0), (-1, 0)]


class HillGrid(StateGraph):
    """Height map where a step may climb at most one level.

    Letters a..z have elevation 1..26, the start S is 0 and the end E is 27.
    Nodes are (x, y) tuples.
    """

    def __init__(self, rows):
        if not rows or not rows[0]:
            raise ValueError("Hill grid is empty")
        self.rows = rows
        self.num_rows = len(rows)
        self.num_cols = len(rows[0])
        self.start = None
        self.end = None
        for y, row in enumerate(rows):
            if len(row) != self.num_cols:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {self.num_cols}")
            for x, cell in enumerate(row):
                if cell == 'S':
                    self.start = (x, y)
                elif cell == 'E':
                    self.end = (x, y)
                elif not 'a' <= cell <= 'z':
                    raise ValueError(f"Unexpected cell {cell!r} at ({x}, {y})")
        if self.start is None or self.end is None:
            raise ValueError("Hill grid needs both an S and an E cell")

    def elevation(self, node):
        x, y = node
        cell = self.rows[y][x]
        if cell == 'S':
            return 0
        if cell == 'E':
            return 27
        return ord(cell) - 96

    def successors(self, node, turn=None):
        x, y = node
        current = self.elevation(node)
        result = []
        for dx, dy in OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.num_cols and 0 <= ny < self.num_rows:
                if self.elevation((nx, ny)) - current <= 1:
                    result.append(((nx, ny), 1))
        return result

    def starting_cells(self, letter='a'):
        """Every cell holding ``letter``, in reading order."""
        return [(x, y) for y, row in enumerate(self.rows) for x, cell in enumerate(row) if cell == letter]

    def is_end(self, node):
        return node == self.end

    def __str__(self):
        return "\n".join(self.rows)


def parse_hill_grid(text):
    return HillGrid([line.strip() for line in text.strip().splitlines() if line.strip()])


# --- Blizzard valley (time-varying) ---

DIRECTIONS = {'^': (0, -1), 'v': (0, 1), '<': (-1, 0), '>': (1, 0)}
MOVES = [(0, -1), (1, 0), (0, 1), (-1, 0), (0, 0)]   # up, right, down, left, wait


class Blizzards:
    """Blizzard positions for one turn. Treat as immutable."""

    def __init__(self, storms, bounds):
        self.storms = frozenset(storms)   # {(x, y, symbol)}
        self.bounds = bounds
        self.occupied = frozenset((x, y) for x, y, _ in self.storms)

    def evolve(self):
        """Move every blizzard one cell, wrapping around inside the walls."""
        max_x, max_y = self.bounds
        moved = []
        for x, y, symbol in self.storms:
            dx, dy = DIRECTIONS[symbol]
            nx, ny = x + dx, y + dy
            if nx < 1:
                nx = max_x - 1
            elif nx > max_x - 1:
                nx = 1
            if ny < 1:
                ny = max_y - 1
            elif ny > max_y - 1:
                ny = 1
            moved.append((nx, ny, symbol))
        return Blizzards(moved, self.bounds)

    def __contains__(self, pos):
        return pos in self.occupied

    def __eq__(self, other):
        return isinstance(other, Blizzards) and self.storms == other.storms and self.bounds == other.bounds

    def __hash__(self):
        return hash((self.storms, self.bounds))

    def __repr__(self):
        return f"Blizzards({len(self.storms)} storms)"


class BlizzardValley(StateGraph):
    """Walled valley crossed while blizzards move every turn.

    Nodes are (x, y, phase) with phase = turn % period, so the state space
    stays finite. Blizzard layers come from a TimeLayerCache which callers
    may share between consecutive searches of the same valley.
    """
    timed = True

    def __init__(self, walls, blizzards, bounds, layers=None):
        max_x, max_y = bounds
        if max_x < 2 or max_y < 2:
            raise ValueError(f"Valley too small: bounds {bounds}")
        self.walls = frozenset(walls)
        self.bounds = bounds
        self.start = (1, 0)
        self.end = (max_x - 1, max_y)
        self.period = math.lcm(max_x - 1, max_y - 1)
        if layers is None:
            layers = TimeLayerCache(Blizzards(blizzards, bounds), Blizzards.evolve)
        self.layers = layers

    def node_at(self, pos, turn):
        return (pos[0], pos[1], turn % self.period)

    def successors(self, node, turn):
        x, y, _phase = node
        _max_x, max_y = self.bounds
        arrival = turn + 1
        storms = self.layers.layer(arrival)
        phase = arrival % self.period
        result = []
        for dx, dy in MOVES:
            pos = (x + dx, y + dy)
            if not 0 <= pos[1] <= max_y:
                continue
            if pos in self.walls or pos in storms:
                continue
            result.append(((pos[0], pos[1], phase), 1))
        return result

    def reaches(self, target):
        """Goal predicate matching any node standing on ``target``."""
        tx, ty = target
        return lambda node: node[0] == tx and node[1] == ty


def parse_valley(text, layers=None):
    walls = set()
    storms = []
    rows = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not rows:
        raise ValueError("Valley map is empty")
    for y, row in enumerate(rows):
        for x, c in enumerate(row):
            if c == '#':
                walls.add((x, y))
            elif c in DIRECTIONS:
                storms.append((x, y, c))
            elif c != '.':
                raise ValueError(f"Unexpected cell {c!r} at ({x}, {y})")
    bounds = (len(rows[0]) - 1, len(rows) - 1)
    return BlizzardValley(walls, storms, bounds, layers=layers)
