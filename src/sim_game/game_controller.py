"""Game controller utilities for UI-driven or scripted play.

This module keeps UI concerns separate from core game logic so the
underlying sequencing and validation can be tested without driving a GUI.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from . import engine
from .agents import SafeRandomAgent
from .move_input import parse_move_text
from .record import GameRecord, dump_record
from .types import EdgeColor, GameState


class GameController:
    """Manage a single Sim game, including whose turn it is, agents, and history.

    ``None`` in place of an agent marks that color as human-controlled.
    """

    def __init__(self, red_agent=None, blue_agent=None, first: EdgeColor = EdgeColor.RED) -> None:
        self.red_agent = red_agent
        self.blue_agent = blue_agent
        self._initial_turn = first
        self.state: GameState
        self.turn: EdgeColor
        self.history: List[Tuple[EdgeColor, int]]
        self.new_game(first=first)

    def new_game(self, first: Optional[EdgeColor] = None) -> None:
        """Start a new game on an empty board."""

        self._initial_turn = self._initial_turn if first is None else first
        if self._initial_turn is EdgeColor.NONE:
            raise ValueError("first player must be RED or BLUE")
        self.state = engine.new_game()
        self.turn = self._initial_turn
        self.history = []

    @property
    def loser(self) -> EdgeColor | None:
        return engine.loser(self.state)

    @property
    def winner(self) -> EdgeColor | None:
        return engine.winner(self.state)

    def is_over(self) -> bool:
        return engine.is_terminal(self.state)

    def legal_moves(self) -> List[int]:
        if self.is_over():
            return []
        return engine.legal_moves(self.state)

    def losing_moves(self) -> List[int]:
        """Uncolored edges that would close a triangle for the player to move."""

        return [edge for edge in self.legal_moves() if self.state.would_complete_triangle(edge, self.turn)]

    def apply_human_move(self, edge: int) -> GameState:
        if self.is_over():
            raise ValueError("game is over")
        if edge not in self.legal_moves():
            raise ValueError("illegal move")
        return self._apply_move(edge)

    def apply_text_move(self, raw: str) -> int:
        """Parse and apply a move string such as ``"1 4"`` or ``"e7"``."""

        parsed = parse_move_text(raw)
        if self.is_over():
            raise ValueError("game is over")
        if not self.state.color_of(parsed.edge).is_none():
            raise ValueError(f"Edge {parsed.a}-{parsed.b} is already colored")
        self._apply_move(parsed.edge)
        return parsed.edge

    def _apply_move(self, edge: int) -> GameState:
        applied = engine.apply_move(self.state, edge, self.turn)
        self.history.append((self.turn, edge))
        self.state = applied
        if not engine.is_terminal(applied):
            self.turn = self.turn.opponent()
        return applied

    def _current_agent(self):
        return self.red_agent if self.turn is EdgeColor.RED else self.blue_agent

    def compute_ai_move(self, time_budget_ms: Optional[int] = None) -> int:
        if self.is_over():
            raise ValueError("game is over")
        agent = self._current_agent()
        if agent is None:
            raise ValueError("No agent configured for current player")
        try:
            move = agent.choose_move(self.state, self.turn, time_budget_ms=time_budget_ms)
        except Exception:
            fallback = SafeRandomAgent()
            move = fallback.choose_move(self.state, self.turn, time_budget_ms=time_budget_ms)
        if move not in self.legal_moves():
            fallback = SafeRandomAgent()
            move = fallback.choose_move(self.state, self.turn, time_budget_ms=time_budget_ms)
        return move

    def step_ai(self, time_budget_ms: Optional[int] = None) -> int:
        move = self.compute_ai_move(time_budget_ms=time_budget_ms)
        self._apply_move(move)
        return move

    def to_record(self) -> str:
        """Serialize the current game to record text."""

        moves = [(idx, color, edge) for idx, (color, edge) in enumerate(self.history, start=1)]
        comments = [
            f"# red_agent={self.red_agent.__class__.__name__ if self.red_agent else 'Human'}",
            f"# blue_agent={self.blue_agent.__class__.__name__ if self.blue_agent else 'Human'}",
        ]
        return dump_record(GameRecord(comments=comments, first=self._initial_turn, moves=moves))
