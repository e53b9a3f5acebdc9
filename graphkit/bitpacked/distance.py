"""Compact 16-bit BFS distance storage with an unvisited sentinel."""

import numpy as np

from graphkit.graph.errors import DistanceOverflowError

# Distinguished "unvisited" value; storable distances are 0..UNVISITED-1.
UNVISITED = 65535


class CompactDistanceArray:
    """Fixed-size array of uint16 distances, half the memory of int32.

    Every slot starts at the UNVISITED sentinel. Storing a value at or above
    the sentinel (or a negative value) raises DistanceOverflowError.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        self._data = np.full(size, UNVISITED, dtype=np.uint16)

    def set(self, index: int, distance: int) -> None:
        if distance < 0 or distance >= UNVISITED:
            raise DistanceOverflowError(
                f"Distance {distance} outside storable range [0, {UNVISITED - 1}]"
            )
        self._data[index] = distance

    def set_many(self, indices: np.ndarray, distance: int) -> None:
        """Assign one distance to many indices (one BFS level)."""
        if distance < 0 or distance >= UNVISITED:
            raise DistanceOverflowError(
                f"Distance {distance} outside storable range [0, {UNVISITED - 1}]"
            )
        self._data[indices] = distance

    def get(self, index: int) -> int:
        return int(self._data[index])

    def is_visited(self, index: int) -> bool:
        return bool(self._data[index] != UNVISITED)

    def clear(self) -> None:
        self._data.fill(UNVISITED)

    def size(self) -> int:
        return int(self._data.shape[0])

    def __len__(self) -> int:
        return int(self._data.shape[0])

    def to_array(self) -> np.ndarray:
        """Read-only view of the raw uint16 storage."""
        view = self._data.view()
        view.flags.writeable = False
        return view
