"""Disjoint-set forest with path compression and union by rank."""

from collections.abc import Hashable, Iterable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class UnionFind(Generic[T]):
    """Disjoint sets over hashable elements.

    ``find`` and ``union`` run in amortized near-constant time. Elements are
    remembered in insertion order so ``components`` is deterministic.
    """

    def __init__(self, elements: Iterable[T] = ()) -> None:
        self._parent: dict[T, T] = {}
        self._rank: dict[T, int] = {}
        self._count = 0
        for element in elements:
            self.add(element)

    def add(self, element: T) -> None:
        if element in self._parent:
            return
        self._parent[element] = element
        self._rank[element] = 0
        self._count += 1

    def __contains__(self, element: object) -> bool:
        return element in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    @property
    def set_count(self) -> int:
        """Number of disjoint sets."""
        return self._count

    def find(self, element: T) -> T:
        """Representative of element's set; raises KeyError if unknown."""
        root = element
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[element] != root:
            self._parent[element], element = root, self._parent[element]
        return root

    def union(self, a: T, b: T) -> bool:
        """Merge the sets of a and b. Returns False if already joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self._rank[root_a] < self._rank[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if self._rank[root_a] == self._rank[root_b]:
            self._rank[root_a] += 1
        self._count -= 1
        return True

    def connected(self, a: T, b: T) -> bool:
        return self.find(a) == self.find(b)

    def components(self) -> list[list[T]]:
        """All sets, each in element insertion order, ordered by first member."""
        groups: dict[T, list[T]] = {}
        for element in self._parent:
            groups.setdefault(self.find(element), []).append(element)
        return list(groups.values())
