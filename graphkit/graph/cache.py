"""CSR snapshot caching keyed by graph identity and mutation version.

Building a CompactRowGraph is O(n + m log d), so repeated traversals over an
unchanged graph reuse one snapshot. The key is ``(graph.uid, graph.version)``:
any mutation bumps the version, so a stale snapshot is never served. The
cache owns its entries and can be evicted explicitly.
"""

import logging
from collections import OrderedDict

from graphkit.graph.csr import CompactRowGraph
from graphkit.graph.graph import Graph

log = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 32


def snapshot_cache_key(graph: Graph) -> tuple[int, int]:
    """Cache key for a graph: (uid, version)."""
    return graph.uid, graph.version


class SnapshotCache:
    """Bounded LRU cache of CSR snapshots.

    At most one snapshot per graph uid is retained; requesting a newer
    version replaces the older one.

    Args:
        max_entries: Maximum number of snapshots held before the least
            recently used one is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self._entries: OrderedDict[int, CompactRowGraph] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, graph: object) -> bool:
        if not isinstance(graph, Graph):
            return False
        snapshot = self._entries.get(graph.uid)
        return snapshot is not None and snapshot.source_version == graph.version

    def get(self, graph: Graph) -> CompactRowGraph:
        """Return the snapshot for the graph's current version, building it on miss."""
        uid, version = snapshot_cache_key(graph)
        cached = self._entries.get(uid)
        if cached is not None and cached.source_version == version:
            self._entries.move_to_end(uid)
            log.debug("Snapshot cache hit for graph %d (version %d)", uid, version)
            return cached

        if cached is not None:
            log.debug(
                "Snapshot for graph %d is stale (version %d != %d), rebuilding",
                uid,
                cached.source_version,
                version,
            )
        else:
            log.debug("Snapshot cache miss for graph %d, building...", uid)

        snapshot = CompactRowGraph.from_graph(graph)
        self._entries[uid] = snapshot
        self._entries.move_to_end(uid)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("Evicted snapshot for graph %d", evicted)
        return snapshot

    def evict(self, graph: Graph) -> bool:
        """Drop any snapshot of this graph. Returns True if one was held."""
        return self._entries.pop(graph.uid, None) is not None

    def clear(self) -> None:
        self._entries.clear()


DEFAULT_SNAPSHOT_CACHE = SnapshotCache()


def get_snapshot(
    graph: Graph, cache: SnapshotCache | None = None
) -> CompactRowGraph:
    """Snapshot lookup through the given cache (module default if None)."""
    if cache is None:
        cache = DEFAULT_SNAPSHOT_CACHE
    return cache.get(graph)
