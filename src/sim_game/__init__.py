"""Sim game package."""

from .types import (
    EDGE_ENDPOINTS,
    NUM_EDGES,
    NUM_VERTICES,
    EdgeColor,
    GameState,
    edge_between,
    edge_endpoints,
)
from .engine import (
    ExhaustedBoardError,
    apply_move,
    available_mask,
    find_triangle,
    is_terminal,
    iter_available,
    legal_moves,
    loser,
    new_game,
    winner,
)
from .agents import (
    Agent,
    HumanAgent,
    MinimaxAgent,
    RandomAgent,
    SafeRandomAgent,
    SearchStats,
    any_available_move,
    find_move,
    safe_available_move,
)

__all__ = [
    "Agent",
    "EDGE_ENDPOINTS",
    "EdgeColor",
    "ExhaustedBoardError",
    "GameState",
    "HumanAgent",
    "MinimaxAgent",
    "NUM_EDGES",
    "NUM_VERTICES",
    "RandomAgent",
    "SafeRandomAgent",
    "SearchStats",
    "any_available_move",
    "apply_move",
    "available_mask",
    "edge_between",
    "edge_endpoints",
    "find_move",
    "find_triangle",
    "is_terminal",
    "iter_available",
    "legal_moves",
    "loser",
    "new_game",
    "safe_available_move",
    "winner",
]
