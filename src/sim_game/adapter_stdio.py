"""Stdio adapter for driving a Sim agent from another process.

This adapter consumes a minimal line-oriented protocol over stdin and emits a
single MOVE line for every GO command::

    INIT <R|B>
    STATE <R|B> <15 digits: 0 uncolored, 1 red, 2 blue; edge 0 first>
    GO
    -> MOVE <edge> <a> <b>

The search has no cancellation of its own, so the adapter enforces a deadline
and falls back to ``SafeRandomAgent`` if the primary agent times out, errors,
or produces an unavailable edge.
"""

from __future__ import annotations

import argparse
import sys
from concurrent.futures import ThreadPoolExecutor, TimeoutError
from dataclasses import dataclass
from typing import Iterable, List, Optional

from . import engine
from .agents import DEFAULT_RANDOM_PLIES, MinimaxAgent, SafeRandomAgent, build_agent
from .types import EdgeColor, GameState, edge_endpoints


class AdapterInputError(Exception):
    """Raised when the adapter receives invalid input."""


def _parse_player(token: str) -> EdgeColor:
    name = token.upper()
    if name in {"R", "RED"}:
        return EdgeColor.RED
    if name in {"B", "BLUE"}:
        return EdgeColor.BLUE
    raise AdapterInputError(f"Unknown player '{token}'")


def _state_from_tokens(turn_token: str, board_token: str) -> tuple[GameState, EdgeColor]:
    turn = _parse_player(turn_token)
    try:
        state = engine.parse_board(board_token)
    except ValueError as exc:
        raise AdapterInputError(str(exc)) from exc
    if engine.is_terminal(state):
        raise AdapterInputError("Board already contains a monochromatic triangle")
    if not engine.legal_moves(state):
        raise AdapterInputError("No uncolored edges available")
    return state, turn


@dataclass
class AdapterContext:
    player: Optional[EdgeColor] = None
    pending_state: Optional[GameState] = None
    pending_turn: Optional[EdgeColor] = None


class StdioAdapter:
    """Line-oriented adapter that plays moves via stdin/stdout."""

    def __init__(
        self,
        *,
        budget_ms: int = 1000,
        agent=None,
        fallback_agent=None,
        stdin=None,
        stdout=None,
        stderr=None,
        quiet: bool = False,
    ) -> None:
        self.budget_ms = budget_ms
        self.agent = agent or MinimaxAgent()
        self.fallback_agent = fallback_agent or SafeRandomAgent()
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.ctx = AdapterContext()
        self.quiet = quiet

    def _log(self, message: str, *, force: bool = False) -> None:
        if self.quiet and not force:
            return
        print(message, file=self.stderr)
        self.stderr.flush()

    def _emit_error_and_exit(self, message: str) -> int:
        self._log(f"ERROR {message}", force=True)
        print(f"ERROR {message}", file=self.stdout)
        self.stdout.flush()
        return 1

    def _choose_with_timeout(self, state: GameState, turn: EdgeColor):
        result: list[Optional[int]] = [None]
        error: list[Optional[BaseException]] = [None]

        def _run():
            try:
                result[0] = self.agent.choose_move(state.clone(), turn, time_budget_ms=self.budget_ms)
            except BaseException as exc:  # noqa: BLE001
                error[0] = exc

        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(_run)
        try:
            future.result(timeout=self.budget_ms / 1000)
        except TimeoutError:
            executor.shutdown(wait=False, cancel_futures=True)
            return None, TimeoutError("primary agent timed out")
        else:
            executor.shutdown(wait=True)
        return result[0], error[0]

    def _select_move(self, state: GameState, turn: EdgeColor) -> int:
        legal_moves = engine.legal_moves(state)
        if not legal_moves:
            raise AdapterInputError("No uncolored edges available")

        move, error = self._choose_with_timeout(state, turn)
        if error or move is None or move not in legal_moves:
            fallback_reason = "exception" if error else "illegal move"
            if isinstance(error, TimeoutError):
                fallback_reason = "timeout"
            self._log(f"Fallback to random due to {fallback_reason}")
            try:
                move = self.fallback_agent.choose_move(state, turn)
            except Exception as exc:  # pragma: no cover - defensive
                raise AdapterInputError(f"Fallback failed: {exc}") from exc
            if move not in legal_moves:
                raise AdapterInputError("Fallback produced illegal move")
        return move

    def _handle_init(self, tokens: List[str]) -> None:
        if len(tokens) < 2:
            raise AdapterInputError("INIT requires a player token")
        self.ctx.player = _parse_player(tokens[1])

    def _handle_state(self, tokens: List[str]) -> None:
        if len(tokens) < 3:
            raise AdapterInputError("STATE requires turn and board")
        state, turn = _state_from_tokens(tokens[1], tokens[2])
        if self.ctx.player is not None and turn is not self.ctx.player:
            raise AdapterInputError(f"STATE turn {turn.name} does not match INIT player {self.ctx.player.name}")
        self.ctx.pending_state = state
        self.ctx.pending_turn = turn

    def _handle_go(self) -> int:
        if self.ctx.pending_state is None or self.ctx.pending_turn is None:
            raise AdapterInputError("GO received before STATE")
        move = self._select_move(self.ctx.pending_state, self.ctx.pending_turn)
        a, b = edge_endpoints(move)
        stats = getattr(self.agent, "last_stats", None)
        decision = f" decision={stats.decision}" if stats is not None else ""
        self._log(f"turn={self.ctx.pending_turn.name} move={move} ({a}-{b}){decision}")
        print(f"MOVE {move} {a} {b}", file=self.stdout)
        self.stdout.flush()
        return move

    def run(self) -> int:
        try:
            for raw_line in self.stdin:
                line = raw_line.strip()
                if not line:
                    continue
                tokens = line.split()
                cmd = tokens[0].upper()
                if cmd == "INIT":
                    self._handle_init(tokens)
                elif cmd == "STATE":
                    self._handle_state(tokens)
                elif cmd == "GO":
                    self._handle_go()
                else:
                    raise AdapterInputError(f"Unknown command '{cmd}'")
            return 0
        except AdapterInputError as exc:
            return self._emit_error_and_exit(str(exc))


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Stdio adapter for Sim")
    parser.add_argument(
        "--budget-ms",
        type=int,
        default=1000,
        help="Deadline in milliseconds for primary agent search",
    )
    parser.add_argument(
        "--agent",
        choices=["random", "dumb-random", "minimax"],
        default="minimax",
        help="Primary agent to use for move selection",
    )
    parser.add_argument("--random-plies", type=int, default=DEFAULT_RANDOM_PLIES)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress verbose stderr logs (protocol still goes to stdout)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    adapter = StdioAdapter(
        budget_ms=args.budget_ms,
        agent=build_agent(args.agent, seed=args.seed, random_plies=args.random_plies),
        quiet=args.quiet,
    )
    sys.exit(adapter.run())


if __name__ == "__main__":
    main()
