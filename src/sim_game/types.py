"""Core data structures for Sim.

Rule reminders:
- The board is the complete graph K6: vertices 0..5, edges 0..14.
- Players alternately color one uncolored edge with their own color.
- Whoever completes a triangle of their own color loses. Draws are impossible.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from itertools import combinations
from typing import Dict, Iterator, Tuple

NUM_VERTICES = 6
NUM_EDGES = 15

# Edge ids follow the lexicographic order of vertex pairs: 0=(0,1), 1=(0,2), ... 14=(4,5).
EDGE_ENDPOINTS: Tuple[Tuple[int, int], ...] = tuple(combinations(range(NUM_VERTICES), 2))
_EDGE_INDEX: Dict[Tuple[int, int], int] = {}
for _edge, (_a, _b) in enumerate(EDGE_ENDPOINTS):
    _EDGE_INDEX[(_a, _b)] = _edge
    _EDGE_INDEX[(_b, _a)] = _edge

# For every edge, the pairs of edges joining each of its endpoints to a third vertex.
TRIANGLE_SIDES: Tuple[Tuple[Tuple[int, int], ...], ...] = tuple(
    tuple(
        (_EDGE_INDEX[(a, third)], _EDGE_INDEX[(b, third)])
        for third in range(NUM_VERTICES)
        if third not in (a, b)
    )
    for a, b in EDGE_ENDPOINTS
)


class EdgeColor(IntEnum):
    """State of a single edge. The numeric values are part of the bit encoding."""

    NONE = 0
    RED = 1
    BLUE = 2

    def opponent(self) -> "EdgeColor":
        """Return the opposing player's color."""

        if self is EdgeColor.NONE:
            raise ValueError("uncolored edges have no opponent")
        return EdgeColor.RED if self is EdgeColor.BLUE else EdgeColor.BLUE

    def is_none(self) -> bool:
        return self is EdgeColor.NONE

    @property
    def letter(self) -> str:
        return {EdgeColor.NONE: ".", EdgeColor.RED: "R", EdgeColor.BLUE: "B"}[self]


def _check_edge(edge: int) -> None:
    if not 0 <= edge < NUM_EDGES:
        raise ValueError(f"edge id must be between 0 and {NUM_EDGES - 1}, got {edge}")


def _check_vertex(vertex: int) -> None:
    if not 0 <= vertex < NUM_VERTICES:
        raise ValueError(f"vertex id must be between 0 and {NUM_VERTICES - 1}, got {vertex}")


def edge_between(a: int, b: int) -> int:
    """Return the edge id joining vertices ``a`` and ``b`` (order does not matter)."""

    _check_vertex(a)
    _check_vertex(b)
    if a == b:
        raise ValueError(f"no edge joins vertex {a} with itself")
    return _EDGE_INDEX[(a, b)]


def edge_endpoints(edge: int) -> Tuple[int, int]:
    """Return the two endpoints of ``edge`` with the smaller vertex first."""

    _check_edge(edge)
    return EDGE_ENDPOINTS[edge]


def all_edges() -> Iterator[int]:
    return iter(range(NUM_EDGES))


def all_vertices() -> Iterator[int]:
    return iter(range(NUM_VERTICES))


@dataclass
class GameState:
    """Colors of all 15 edges packed into one integer.

    Each edge owns two bits; edge 0 sits in the least significant bits and the
    bits above edge 14 are always zero::

        bit:   31 30 | 29 28 | 27 26 | ... | 3 2 | 1 0
        edge:   -  - |  14   |  13   | ... |  1  |  0
    """

    encoded: int = 0

    def color_of(self, edge: int) -> EdgeColor:
        """Return the color currently held by ``edge``."""

        return EdgeColor((self.encoded >> (edge * 2)) & 0b11)

    def set_edge(self, edge: int, color: EdgeColor) -> None:
        """Overwrite the two bits of ``edge`` without touching any other edge."""

        _check_edge(edge)
        shift = edge * 2
        self.encoded = (self.encoded & ~(0b11 << shift)) | (int(color) << shift)

    def would_complete_triangle(self, edge: int, color: EdgeColor) -> bool:
        """Whether coloring the uncolored ``edge`` with ``color`` closes a triangle of that color."""

        code = int(color)
        encoded = self.encoded
        for side_a, side_b in TRIANGLE_SIDES[edge]:
            if (encoded >> (side_a * 2)) & 0b11 == code and (encoded >> (side_b * 2)) & 0b11 == code:
                return True
        return False

    def colored_count(self) -> int:
        return sum(1 for edge in range(NUM_EDGES) if self.color_of(edge) != EdgeColor.NONE)

    def is_full(self) -> bool:
        return self.colored_count() == NUM_EDGES

    def clone(self) -> "GameState":
        """Return an independent copy of the state."""

        return GameState(encoded=self.encoded)

    def key(self) -> int:
        """Return a hashable key identifying the coloring."""

        return self.encoded
