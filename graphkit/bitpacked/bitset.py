"""Bit-packed integer sets for BFS frontiers and visited tracking.

Both structures store one bit per element in a numpy ``uint8`` word array
(little-endian bit order within each byte), an 8x reduction over a boolean
array and far smaller than a Python set of ints.
"""

from collections.abc import Iterable, Iterator

import numpy as np


def _word_count(bits: int) -> int:
    return (bits + 7) >> 3


def _popcount(words: np.ndarray) -> int:
    return int(np.unpackbits(words).sum(dtype=np.int64))


def _set_indices(words: np.ndarray, limit: int | None = None) -> np.ndarray:
    bits = np.unpackbits(words, bitorder="little")
    if limit is not None:
        bits = bits[:limit]
    return np.flatnonzero(bits)


class GraphBitSet:
    """Growable set of non-negative integers with exact cardinality tracking.

    Set algebra (union, intersection, difference) updates this set in place;
    ``swap`` exchanges contents with another set in O(1), which is how BFS
    rotates current and next frontiers.

    Args:
        capacity: Number of elements to pre-allocate room for.
    """

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._words = np.zeros(_word_count(capacity), dtype=np.uint8)
        self._cardinality = 0

    @classmethod
    def from_indices(cls, indices: Iterable[int], capacity: int = 0) -> "GraphBitSet":
        bitset = cls(capacity)
        for index in indices:
            bitset.add(int(index))
        return bitset

    def _ensure(self, index: int) -> None:
        needed = _word_count(index + 1)
        if needed > self._words.shape[0]:
            grown = np.zeros(max(needed, 2 * self._words.shape[0]), dtype=np.uint8)
            grown[: self._words.shape[0]] = self._words
            self._words = grown

    def add(self, index: int) -> None:
        if index < 0:
            raise ValueError(f"GraphBitSet holds non-negative ints, got {index}")
        self._ensure(index)
        byte, mask = index >> 3, 1 << (index & 7)
        if not self._words[byte] & mask:
            self._words[byte] |= mask
            self._cardinality += 1

    def add_range(self, start: int, end: int) -> None:
        """Add every integer in [start, end)."""
        if start < 0:
            raise ValueError(f"GraphBitSet holds non-negative ints, got {start}")
        if end <= start:
            return
        self._ensure(end - 1)
        bits = np.unpackbits(self._words, bitorder="little")
        bits[start:end] = 1
        self._words = np.packbits(bits, bitorder="little")
        self._cardinality = _popcount(self._words)

    def remove(self, index: int) -> None:
        """Remove an element; removing an absent element is a no-op."""
        if not self.contains(index):
            return
        byte, mask = index >> 3, 1 << (index & 7)
        self._words[byte] &= ~mask & 0xFF
        self._cardinality -= 1

    def contains(self, index: int) -> bool:
        if index < 0 or (index >> 3) >= self._words.shape[0]:
            return False
        return bool(self._words[index >> 3] & (1 << (index & 7)))

    def __contains__(self, index: object) -> bool:
        return isinstance(index, (int, np.integer)) and self.contains(int(index))

    def clear(self) -> None:
        self._words[:] = 0
        self._cardinality = 0

    def is_empty(self) -> bool:
        return self._cardinality == 0

    def size(self) -> int:
        return self._cardinality

    def __len__(self) -> int:
        return self._cardinality

    def capacity(self) -> int:
        """Number of elements representable without growing."""
        return self._words.shape[0] * 8

    def swap(self, other: "GraphBitSet") -> None:
        self._words, other._words = other._words, self._words
        self._cardinality, other._cardinality = other._cardinality, self._cardinality

    def _aligned(self, other: "GraphBitSet") -> np.ndarray:
        """Other's words padded or truncated to this set's length."""
        ours = self._words.shape[0]
        theirs = other._words[:ours]
        if theirs.shape[0] < ours:
            theirs = np.concatenate(
                [theirs, np.zeros(ours - theirs.shape[0], dtype=np.uint8)]
            )
        return theirs

    def union(self, other: "GraphBitSet") -> None:
        if other._words.shape[0] > self._words.shape[0]:
            self._ensure(other._words.shape[0] * 8 - 1)
        self._words |= self._aligned(other)
        self._cardinality = _popcount(self._words)

    def intersection(self, other: "GraphBitSet") -> None:
        self._words &= self._aligned(other)
        self._cardinality = _popcount(self._words)

    def difference(self, other: "GraphBitSet") -> None:
        self._words &= ~self._aligned(other)
        self._cardinality = _popcount(self._words)

    def clone(self) -> "GraphBitSet":
        cloned = GraphBitSet()
        cloned._words = self._words.copy()
        cloned._cardinality = self._cardinality
        return cloned

    def to_array(self) -> np.ndarray:
        """Members as an ascending int64 array."""
        return _set_indices(self._words)

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_array().tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphBitSet):
            return NotImplemented
        return np.array_equal(self.to_array(), other.to_array())

    def __repr__(self) -> str:
        return f"GraphBitSet(size={self._cardinality})"


class VisitedBitArray:
    """Fixed-size bit vector over [0, size) for visited tracking.

    Cheaper than GraphBitSet when no set algebra is needed: no cardinality
    bookkeeping, no growth.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        self._size = size
        self._words = np.zeros(_word_count(size), dtype=np.uint8)

    def _check(self, index: int) -> None:
        if index < 0 or index >= self._size:
            raise IndexError(f"Index {index} out of bounds [0, {self._size})")

    def set(self, index: int) -> None:
        self._check(index)
        self._words[index >> 3] |= 1 << (index & 7)

    def get(self, index: int) -> bool:
        """Bit value; out-of-range indices read as unset."""
        if index < 0 or index >= self._size:
            return False
        return bool(self._words[index >> 3] & (1 << (index & 7)))

    def toggle(self, index: int) -> None:
        self._check(index)
        self._words[index >> 3] ^= 1 << (index & 7)

    def set_multiple(self, indices: Iterable[int] | np.ndarray) -> None:
        """Set many bits at once (vectorized for numpy input)."""
        idx = np.asarray(indices, dtype=np.int64)
        if idx.size == 0:
            return
        if idx.min() < 0 or idx.max() >= self._size:
            bad = idx[(idx < 0) | (idx >= self._size)][0]
            raise IndexError(f"Index {bad} out of bounds [0, {self._size})")
        np.bitwise_or.at(
            self._words, idx >> 3, np.left_shift(1, idx & 7).astype(np.uint8)
        )

    def clear(self) -> None:
        self._words[:] = 0

    def popcount(self) -> int:
        """Number of set bits."""
        return _popcount(self._words)

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return not self._words.any()

    def set_indices(self) -> np.ndarray:
        """Indices of all set bits, ascending."""
        return _set_indices(self._words, self._size)

    def to_mask(self) -> np.ndarray:
        """Unpacked boolean view of length ``size`` (a copy)."""
        return np.unpackbits(self._words, bitorder="little")[: self._size].astype(bool)

    def __repr__(self) -> str:
        return f"VisitedBitArray(size={self._size}, set={self.popcount()})"
