"""Replay Sim game records and validate moves."""
from __future__ import annotations

import argparse
from typing import List, Tuple

from . import engine
from .record import GameRecord, parse_record
from .types import EdgeColor, GameState, edge_endpoints


def replay_game(record: GameRecord, verbose: bool = False) -> Tuple[GameState, EdgeColor | None]:
    """Replay a parsed record and return the final state and loser (if any)."""

    state = engine.new_game()
    turn = record.first

    for idx, (ply, color, edge) in enumerate(record.moves):
        if ply != idx + 1:
            raise ValueError(f"Ply numbering mismatch at move {idx + 1}: expected {idx + 1}, got {ply}")
        if engine.is_terminal(state):
            raise ValueError(f"Move at ply {ply} played after the game ended")
        if color is not turn:
            raise ValueError(f"Turn {ply} color mismatch: expected {turn.letter}, got {color.letter}")
        if not state.color_of(edge).is_none():
            a, b = edge_endpoints(edge)
            raise ValueError(f"Illegal move at ply {ply}: edge {a}-{b} is already colored")
        state = engine.apply_move(state, edge, color)
        if verbose:
            a, b = edge_endpoints(edge)
            print(f"Ply {ply}: {color.name} colors {a}-{b}")
            print(engine.format_board(state))
            print()
        turn = turn.opponent()

    return state, engine.loser(state)


def replay_file(path: str, verbose: bool = False) -> Tuple[GameState, EdgeColor | None]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    record = parse_record(text)
    return replay_game(record, verbose=verbose)


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Replay a Sim game record")
    parser.add_argument("--file", required=True, help="Path to the game record")
    parser.add_argument("--verbose", action="store_true", help="Print each board during replay")
    args = parser.parse_args(argv)

    try:
        state, lost = replay_file(args.file, verbose=args.verbose)
    except ValueError as exc:
        print(f"Invalid record: {exc}")
        raise SystemExit(1)
    if lost is not None:
        print(f"Loser: {lost.name} (winner: {lost.opponent().name})")
    else:
        print("Loser: None (game not terminal)")
    print("Final board:")
    print(engine.format_board(state))


if __name__ == "__main__":
    main()
