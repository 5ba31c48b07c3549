"""Game engine for Sim.

Rules:
- Board is K6; each of the 15 edges is uncolored, red, or blue.
- Players alternate, each coloring exactly one uncolored edge per turn.
- A player who completes a triangle of their own color loses immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterator, List, Optional, Tuple

from .types import (
    EDGE_ENDPOINTS,
    NUM_EDGES,
    NUM_VERTICES,
    EdgeColor,
    GameState,
    edge_between,
)

TRIANGLES: Tuple[Tuple[int, int, int], ...] = tuple(combinations(range(NUM_VERTICES), 3))


class ExhaustedBoardError(ValueError):
    """Raised when a move is requested but every edge is already colored."""


def new_game() -> GameState:
    """Return an empty board."""

    return GameState()


def available_mask(state: GameState) -> int:
    """Return a bitmask with bit ``e`` set for every uncolored edge ``e``."""

    mask = 0
    encoded = state.encoded
    for edge in range(NUM_EDGES):
        if (encoded >> (edge * 2)) & 0b11 == 0:
            mask |= 1 << edge
    return mask


def iter_available(mask: int) -> Iterator[int]:
    """Yield the edge ids set in ``mask`` in ascending order."""

    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def legal_moves(state: GameState) -> List[int]:
    """Return all uncolored edges."""

    return list(iter_available(available_mask(state)))


def safe_moves(state: GameState, color: EdgeColor) -> List[int]:
    """Return uncolored edges that do not close a triangle of ``color``."""

    return [edge for edge in legal_moves(state) if not state.would_complete_triangle(edge, color)]


def _check_move(state: GameState, edge: int, color: EdgeColor) -> None:
    if color is EdgeColor.NONE:
        raise ValueError("a move must use a player color")
    if not 0 <= edge < NUM_EDGES:
        raise ValueError(f"edge id must be between 0 and {NUM_EDGES - 1}, got {edge}")
    if state.color_of(edge) is not EdgeColor.NONE:
        raise ValueError(f"edge {edge} is already colored")


def apply_move(state: GameState, edge: int, color: EdgeColor) -> GameState:
    """Color ``edge`` and return the resulting state, leaving ``state`` untouched."""

    _check_move(state, edge, color)
    next_state = state.clone()
    next_state.set_edge(edge, color)
    return next_state


@dataclass
class UndoRecord:
    """Information needed to undo an in-place move."""

    edge: int
    color: EdgeColor


def apply_move_inplace(state: GameState, edge: int, color: EdgeColor) -> UndoRecord:
    """Color ``edge`` by mutating ``state``, returning data required for undo."""

    _check_move(state, edge, color)
    state.set_edge(edge, color)
    return UndoRecord(edge=edge, color=color)


def undo_move_inplace(state: GameState, undo: UndoRecord) -> None:
    """Revert a prior call to :func:`apply_move_inplace`."""

    state.set_edge(undo.edge, EdgeColor.NONE)


def find_triangle(state: GameState, color: Optional[EdgeColor] = None) -> Optional[Tuple[int, int, int]]:
    """Return the first monochromatic triangle of ``color`` (any player color if ``None``)."""

    for a, b, c in TRIANGLES:
        first = state.color_of(edge_between(a, b))
        if first is EdgeColor.NONE or (color is not None and first is not color):
            continue
        if state.color_of(edge_between(a, c)) is first and state.color_of(edge_between(b, c)) is first:
            return a, b, c
    return None


def loser(state: GameState) -> EdgeColor | None:
    """Return the color that owns a monochromatic triangle, if any."""

    triangle = find_triangle(state)
    if triangle is None:
        return None
    a, b, _ = triangle
    return state.color_of(edge_between(a, b))


def winner(state: GameState) -> EdgeColor | None:
    """Return the winner if the game is terminal."""

    lost = loser(state)
    return None if lost is None else lost.opponent()


def is_terminal(state: GameState) -> bool:
    """Whether the state represents a finished game."""

    return loser(state) is not None


def board_string(state: GameState) -> str:
    """Encode the board as 15 digits (0 uncolored, 1 red, 2 blue), edge 0 first."""

    return "".join(str(int(state.color_of(edge))) for edge in range(NUM_EDGES))


def parse_board(text: str) -> GameState:
    """Inverse of :func:`board_string`."""

    digits = text.strip()
    if len(digits) != NUM_EDGES:
        raise ValueError(f"board must contain {NUM_EDGES} digits, got {len(digits)}")
    state = GameState()
    for edge, digit in enumerate(digits):
        if digit not in "012":
            raise ValueError(f"invalid edge color '{digit}' at edge {edge}")
        state.set_edge(edge, EdgeColor(int(digit)))
    return state


def format_board(state: GameState) -> str:
    """Render the board as one line per vertex plus the edge list."""

    header = "   " + " ".join(str(v) for v in range(NUM_VERTICES))
    lines = [header]
    for row in range(NUM_VERTICES):
        cells = []
        for col in range(NUM_VERTICES):
            if row == col:
                cells.append("-")
            else:
                cells.append(state.color_of(edge_between(row, col)).letter)
        lines.append(f"{row}  " + " ".join(cells))
    colored = [
        f"{a}-{b}:{state.color_of(edge).letter}"
        for edge, (a, b) in enumerate(EDGE_ENDPOINTS)
        if state.color_of(edge) is not EdgeColor.NONE
    ]
    lines.append("edges: " + (" ".join(colored) if colored else "(none)"))
    return "\n".join(lines)
