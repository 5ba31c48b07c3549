"""Agents for playing Sim."""

from __future__ import annotations

import random
import sys
import time
from dataclasses import dataclass
from typing import Dict, Optional

from . import engine
from .engine import ExhaustedBoardError
from .move_input import parse_move_text
from .types import NUM_EDGES, EdgeColor, GameState

# Plies (edges already colored) below which the minimax agent plays a random safe edge.
DEFAULT_RANDOM_PLIES = 3


@dataclass
class SearchStats:
    """Aggregated statistics from a single search."""

    nodes: int
    cache_hits: int
    depth_reached: int
    start_ply: int
    forced_win: bool
    decision: str
    move: int
    elapsed_ms: float


def any_available_move(state: GameState, rng: Optional[random.Random] = None) -> int:
    """Return a uniformly random uncolored edge."""

    moves = engine.legal_moves(state)
    if not moves:
        raise ExhaustedBoardError("No uncolored edges available")
    generator = rng or random.Random()
    return generator.choice(moves)


def safe_available_move(state: GameState, color: EdgeColor, rng: Optional[random.Random] = None) -> int:
    """Return a random uncolored edge that does not lose immediately for ``color``.

    Falls back to :func:`any_available_move` when every uncolored edge loses.
    """

    generator = rng or random.Random()
    moves = engine.safe_moves(state, color)
    if moves:
        return generator.choice(moves)
    return any_available_move(state, generator)


class Agent:
    """Base class for agents."""

    def choose_move(self, state: GameState, color: EdgeColor, time_budget_ms: Optional[int] = None) -> int:  # noqa: D401
        """Return the id of the edge to color for ``color``."""

        raise NotImplementedError


class RandomAgent(Agent):
    """Agent that colors a completely random edge, even one that loses on the spot."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def choose_move(self, state: GameState, color: EdgeColor, time_budget_ms: Optional[int] = None) -> int:
        _ = color, time_budget_ms
        return any_available_move(state, self._rng)


class SafeRandomAgent(Agent):
    """Agent that picks a random edge, avoiding immediate losses when it can."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def choose_move(self, state: GameState, color: EdgeColor, time_budget_ms: Optional[int] = None) -> int:
        _ = time_budget_ms
        return safe_available_move(state, color, self._rng)


class HumanAgent(Agent):
    """Agent that asks a person for the endpoints of the edge to color.

    Invalid or already colored input is reported and the prompt repeats.
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def choose_move(self, state: GameState, color: EdgeColor, time_budget_ms: Optional[int] = None) -> int:
        _ = time_budget_ms
        if not engine.legal_moves(state):
            raise ExhaustedBoardError("No uncolored edges available")
        while True:
            print(f"Player {color.name}, enter the edge endpoints: ", end="", file=self.stdout)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                raise EOFError("input closed before a move was entered")
            try:
                parsed = parse_move_text(line)
            except ValueError as exc:
                print(f"Invalid move: {exc}", file=self.stdout)
                continue
            if not state.color_of(parsed.edge).is_none():
                print(f"Edge {parsed.a}-{parsed.b} is already colored", file=self.stdout)
                continue
            return parsed.edge


class MinimaxAgent(Agent):
    """Agent that searches the remaining game exhaustively for a forced win.

    Sim has exactly two outcomes, so every node is solved to a boolean: the
    searching color's nodes OR their children, the opponent's nodes AND them.
    A player never colors an edge that closes their own triangle; a player
    left without such an edge has lost. The first ``random_plies`` plies of a
    game are played randomly without searching, and when no forced win exists
    a random safe edge is returned.
    """

    def __init__(self, random_plies: int = DEFAULT_RANDOM_PLIES, seed: Optional[int] = None):
        if not 0 <= random_plies <= NUM_EDGES:
            raise ValueError(f"random_plies must be between 0 and {NUM_EDGES}")
        self.random_plies = random_plies
        self._rng = random.Random(seed)
        self._solved: Dict[int, bool] = {}
        self.last_stats: Optional[SearchStats] = None
        self._nodes = 0
        self._cache_hits = 0
        self._depth_reached = 0

    def choose_move(self, state: GameState, color: EdgeColor, time_budget_ms: Optional[int] = None) -> int:
        _ = time_budget_ms
        if color is EdgeColor.NONE:
            raise ValueError("search requires a player color")
        self.last_stats = None
        self._nodes = 0
        self._cache_hits = 0
        self._depth_reached = 0
        self._solved = {}
        start_time = time.monotonic()

        scratch = state.clone()
        mask = engine.available_mask(scratch)
        if not mask:
            raise ExhaustedBoardError("No uncolored edges available")
        start_ply = NUM_EDGES - bin(mask).count("1")

        if start_ply < self.random_plies:
            move = safe_available_move(scratch, color, self._rng)
            self._record_stats(start_time, start_ply, False, "opening", move)
            return move

        move = self._search_root(scratch, mask, color, start_ply)
        if move is not None:
            self._record_stats(start_time, start_ply, True, "forced-win", move)
            return move

        move = safe_available_move(scratch, color, self._rng)
        self._record_stats(start_time, start_ply, False, "fallback", move)
        return move

    def _record_stats(self, start_time: float, start_ply: int, forced_win: bool, decision: str, move: int) -> None:
        self.last_stats = SearchStats(
            nodes=self._nodes,
            cache_hits=self._cache_hits,
            depth_reached=self._depth_reached,
            start_ply=start_ply,
            forced_win=forced_win,
            decision=decision,
            move=move,
            elapsed_ms=(time.monotonic() - start_time) * 1000.0,
        )

    def _search_root(self, state: GameState, mask: int, me: EdgeColor, ply: int) -> Optional[int]:
        """Return the first edge (ascending id) that forces a win, or ``None``."""

        self._nodes += 1
        other = me.opponent()
        for edge in engine.iter_available(mask):
            if state.would_complete_triangle(edge, me):
                continue
            undo = engine.apply_move_inplace(state, edge, me)
            try:
                wins = self._solve(state, mask & ~(1 << edge), other, me, ply + 1)
            finally:
                engine.undo_move_inplace(state, undo)
            if wins:
                return edge
        return None

    def _solve(self, state: GameState, mask: int, acting: EdgeColor, me: EdgeColor, ply: int) -> bool:
        """Whether ``me`` can force a win with ``acting`` to color the next edge."""

        self._nodes += 1
        self._depth_reached = max(self._depth_reached, ply)
        # The number of colored edges fixes who acts, so the coloring alone is a sound key.
        key = state.key()
        cached = self._solved.get(key)
        if cached is not None:
            self._cache_hits += 1
            return cached

        maximizing = acting is me
        result = not maximizing
        other = acting.opponent()
        for edge in engine.iter_available(mask):
            if state.would_complete_triangle(edge, acting):
                continue
            state.set_edge(edge, acting)
            try:
                child = self._solve(state, mask & ~(1 << edge), other, me, ply + 1)
            finally:
                state.set_edge(edge, EdgeColor.NONE)
            if maximizing and child:
                result = True
                break
            if not maximizing and not child:
                result = False
                break

        self._solved[key] = result
        return result


def find_move(
    state: GameState,
    color: EdgeColor,
    random_plies: int = DEFAULT_RANDOM_PLIES,
    seed: Optional[int] = None,
) -> int:
    """Return a forcing move for ``color`` if one exists, else a random safe edge.

    ``state`` is never modified.
    """

    return MinimaxAgent(random_plies=random_plies, seed=seed).choose_move(state, color)


AGENT_CHOICES = ["human", "random", "dumb-random", "minimax"]


def build_agent(name: str, seed: Optional[int] = None, random_plies: int = DEFAULT_RANDOM_PLIES) -> Agent:
    """Create an agent from its command-line name; ``human`` yields ``HumanAgent``."""

    if name == "human":
        return HumanAgent()
    if name in {"dumb-random", "dumb_random"}:
        return RandomAgent(seed=seed)
    if name == "random":
        return SafeRandomAgent(seed=seed)
    if name == "minimax":
        return MinimaxAgent(random_plies=random_plies, seed=seed)
    raise ValueError(f"Unknown agent '{name}'")
