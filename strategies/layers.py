import threading


class TimeLayerCache:
    """Turn-indexed snapshots of a graph that changes every turn.

    ``layer(t)`` is ``evolve`` applied t times to the initial layer. Each layer
    is derived from the one before it and kept, so a cache handed from one
    search to the next never recomputes a turn. Layers must not be mutated.
    """

    def __init__(self, initial, evolve):
        self._evolve = evolve
        self._layers = [initial]
        self._lock = threading.Lock()
        self.evolutions = 0   # number of evolve() calls made so far

    def layer(self, turn):
        """Return the snapshot for ``turn``, deriving missing turns from the last cached one."""
        if turn < 0:
            raise ValueError(f"turn must be non-negative, got {turn}")
        if turn < len(self._layers):
            return self._layers[turn]
        with self._lock:
            while len(self._layers) <= turn:
                self._layers.append(self._evolve(self._layers[-1]))
                self.evolutions += 1
            return self._layers[turn]

    def __len__(self):
        return len(self._layers)

    def __contains__(self, turn):
        return 0 <= turn < len(self._layers)
