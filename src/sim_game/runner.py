"""CLI runner for Sim.

Usage examples:
- Single game: ``python -m sim_game.runner --mode game --red human --blue minimax``
- Match (best of 7): ``python -m sim_game.runner --mode match --red minimax --blue random --seed 42``
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from . import engine
from .agents import AGENT_CHOICES, DEFAULT_RANDOM_PLIES, SearchStats, build_agent
from .record import GameRecord, dump_record
from .types import NUM_EDGES, EdgeColor, edge_endpoints


@dataclass
class GameSummary:
    loser: EdgeColor
    winner: EdgeColor
    turns: int
    move_times: Dict[EdgeColor, List[float]]
    search_stats: Dict[EdgeColor, List[SearchStats]]
    moves: List[Tuple[int, EdgeColor, int]]


def describe_decision(color: EdgeColor, stats: SearchStats) -> str:
    """Return a one-line explanation of how a search agent picked its move."""

    a, b = edge_endpoints(stats.move)
    if stats.decision == "forced-win":
        return f"{color.name} knows the winning move: {a}-{b} (at ply {stats.start_ply})"
    if stats.decision == "opening":
        return f"{color.name} plays opening move {a}-{b} without searching (at ply {stats.start_ply})"
    return f"{color.name} knows no winning move, chooses randomly: {a}-{b} (at ply {stats.start_ply})"


def play_game(
    red_agent,
    blue_agent,
    first: EdgeColor = EdgeColor.RED,
    emit_moves: bool = True,
    show_board: bool = False,
    show_stats: bool = False,
    collect_stats: bool = False,
    save_record_path: Optional[str] = None,
) -> GameSummary:
    move_times: Dict[EdgeColor, List[float]] = {EdgeColor.RED: [], EdgeColor.BLUE: []}
    search_stats: Dict[EdgeColor, List[SearchStats]] = {EdgeColor.RED: [], EdgeColor.BLUE: []}
    moves_log: List[Tuple[int, EdgeColor, int]] = []

    def _maybe_save_record(lost: EdgeColor) -> None:
        if save_record_path is None:
            return
        comments = [
            f"# red_agent={red_agent.__class__.__name__}",
            f"# blue_agent={blue_agent.__class__.__name__}",
            f"# loser={lost.name}",
            f"# turns={len(moves_log)}",
        ]
        record = GameRecord(comments=comments, first=first, moves=list(moves_log))
        with open(save_record_path, "w", encoding="utf-8") as f:
            f.write(dump_record(record))

    state = engine.new_game()
    player = first
    turn_counter = 1
    while True:
        agent = red_agent if player is EdgeColor.RED else blue_agent

        start = time.monotonic()
        move = agent.choose_move(state, player)
        elapsed = time.monotonic() - start
        move_times[player].append(elapsed * 1000.0)

        if not 0 <= move < NUM_EDGES or not state.color_of(move).is_none():
            raise ValueError(f"{player.name} chose an unavailable edge: {move}")

        state = engine.apply_move(state, move, player)
        moves_log.append((turn_counter, player, move))
        if emit_moves:
            a, b = edge_endpoints(move)
            print(f"Turn {turn_counter}: {player.name} colors {a}-{b}")
        if show_board:
            print(engine.format_board(state))
            print()

        stats = getattr(agent, "last_stats", None)
        if collect_stats and stats is not None:
            if show_stats:
                print(
                    f"{describe_decision(player, stats)} nodes={stats.nodes} "
                    f"cache_hits={stats.cache_hits} depth={stats.depth_reached} "
                    f"elapsed_ms={stats.elapsed_ms:.2f}"
                )
            search_stats[player].append(stats)

        lost = engine.loser(state)
        if lost is not None:
            if show_board or emit_moves:
                print(f"{lost.name} completed a triangle. Winner: {lost.opponent().name}")
            _maybe_save_record(lost)
            return GameSummary(
                loser=lost,
                winner=lost.opponent(),
                turns=turn_counter,
                move_times=move_times,
                search_stats=search_stats,
                moves=moves_log,
            )

        player = player.opponent()
        turn_counter += 1


def play_match(
    red_agent,
    blue_agent,
    verbose: bool,
    show_stats: bool,
) -> EdgeColor:
    wins = {EdgeColor.RED: 0, EdgeColor.BLUE: 0}
    first_order = [
        EdgeColor.RED,
        EdgeColor.BLUE,
        EdgeColor.BLUE,
        EdgeColor.RED,
        EdgeColor.RED,
        EdgeColor.BLUE,
        EdgeColor.BLUE,
    ]

    for game_index, first in enumerate(first_order, start=1):
        if wins[EdgeColor.RED] >= 4 or wins[EdgeColor.BLUE] >= 4:
            break
        if verbose:
            print(f"=== Game {game_index} (first: {first.name}) ===")
        summary = play_game(
            red_agent=red_agent,
            blue_agent=blue_agent,
            first=first,
            emit_moves=verbose,
            show_board=verbose,
            show_stats=show_stats,
            collect_stats=show_stats,
        )
        wins[summary.winner] += 1
        print(
            f"Result: {summary.winner.name} wins "
            f"(score {wins[EdgeColor.RED]}-{wins[EdgeColor.BLUE]})"
        )

    overall = EdgeColor.RED if wins[EdgeColor.RED] > wins[EdgeColor.BLUE] else EdgeColor.BLUE
    print(f"Match winner: {overall.name}")
    return overall


def _agent_seed(seed: Optional[int], offset: int) -> Optional[int]:
    return None if seed is None else seed + offset


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sim runner")
    parser.add_argument("--mode", choices=["game", "match"], default="game")
    parser.add_argument("--red", choices=AGENT_CHOICES, default="human", help="Player with color red")
    parser.add_argument("--blue", choices=AGENT_CHOICES, default="random", help="Player with color blue")
    parser.add_argument("--first", choices=["red", "blue"], default="red", help="Color that moves first in game mode")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--random-plies",
        type=int,
        default=DEFAULT_RANDOM_PLIES,
        help="Plies played randomly by minimax players before exhaustive search starts",
    )
    parser.add_argument("--verbose", action="store_true", help="Print the board after every move")
    parser.add_argument("--stats", action="store_true", help="Print search decisions and statistics each move")
    parser.add_argument("--save-record", type=str, default=None, help="Path to save the game record")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    if args.mode == "match" and args.save_record:
        print("--save-record is only supported in game mode")
        raise SystemExit(1)

    try:
        red_agent = build_agent(args.red, seed=_agent_seed(args.seed, 0), random_plies=args.random_plies)
        blue_agent = build_agent(args.blue, seed=_agent_seed(args.seed, 1), random_plies=args.random_plies)

        if args.mode == "game":
            summary = play_game(
                red_agent=red_agent,
                blue_agent=blue_agent,
                first=EdgeColor[args.first.upper()],
                emit_moves=True,
                show_board=args.verbose,
                show_stats=args.stats,
                collect_stats=args.stats,
                save_record_path=args.save_record,
            )
            print(f"Game winner: {summary.winner.name}")
        else:
            play_match(
                red_agent=red_agent,
                blue_agent=blue_agent,
                verbose=args.verbose,
                show_stats=args.stats,
            )
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
