"""Bit-packed primitives: growable bit sets, visited bit vectors, 16-bit distances."""

from graphkit.bitpacked.bitset import GraphBitSet, VisitedBitArray
from graphkit.bitpacked.distance import UNVISITED, CompactDistanceArray

__all__ = [
    "CompactDistanceArray",
    "GraphBitSet",
    "UNVISITED",
    "VisitedBitArray",
]
