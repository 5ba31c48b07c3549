"""Tournament/benchmark runner for Sim.

Usage example:
- python -m sim_game.tournament --games 200 --red minimax --blue random --seed 1
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Dict, List

from .agents import DEFAULT_RANDOM_PLIES, SearchStats, build_agent
from .runner import play_game
from .types import EdgeColor

COMPUTER_AGENTS = ["random", "dumb-random", "minimax"]


@dataclass
class SideSearchSummary:
    samples: int
    forced_wins: int
    avg_nodes: float
    avg_elapsed_ms: float
    cache_hit_rate: float


@dataclass
class TournamentResult:
    games: int
    red_wins: int
    blue_wins: int
    first_player_wins: int
    avg_turns: float
    avg_move_time_ms: Dict[EdgeColor, float]
    side_stats: Dict[EdgeColor, SideSearchSummary]


def _average(values):
    return 0.0 if not values else sum(values) / len(values)


def _summarize_search(records: List[SearchStats]) -> SideSearchSummary:
    searched = [s for s in records if s.decision != "opening"]
    if not searched:
        return SideSearchSummary(samples=0, forced_wins=0, avg_nodes=0.0, avg_elapsed_ms=0.0, cache_hit_rate=0.0)
    hits = sum(s.cache_hits for s in searched)
    nodes = sum(s.nodes for s in searched)
    return SideSearchSummary(
        samples=len(searched),
        forced_wins=sum(1 for s in searched if s.forced_win),
        avg_nodes=_average([s.nodes for s in searched]),
        avg_elapsed_ms=_average([s.elapsed_ms for s in searched]),
        cache_hit_rate=0.0 if nodes == 0 else hits / nodes,
    )


def run_tournament(
    red_agent,
    blue_agent,
    games: int = 200,
    quiet: bool = True,
    collect_stats: bool = False,
) -> TournamentResult:
    red_wins = 0
    blue_wins = 0
    first_player_wins = 0
    total_turns = 0
    move_times: Dict[EdgeColor, List[float]] = {EdgeColor.RED: [], EdgeColor.BLUE: []}
    search_records: Dict[EdgeColor, List[SearchStats]] = {EdgeColor.RED: [], EdgeColor.BLUE: []}

    for game_index in range(games):
        first = EdgeColor.RED if game_index % 2 == 0 else EdgeColor.BLUE
        summary = play_game(
            red_agent=red_agent,
            blue_agent=blue_agent,
            first=first,
            emit_moves=not quiet,
            show_board=False,
            show_stats=False,
            collect_stats=collect_stats,
        )

        total_turns += summary.turns
        move_times[EdgeColor.RED].extend(summary.move_times[EdgeColor.RED])
        move_times[EdgeColor.BLUE].extend(summary.move_times[EdgeColor.BLUE])
        if summary.winner is EdgeColor.RED:
            red_wins += 1
        else:
            blue_wins += 1
        if summary.winner is first:
            first_player_wins += 1

        if collect_stats:
            search_records[EdgeColor.RED].extend(summary.search_stats[EdgeColor.RED])
            search_records[EdgeColor.BLUE].extend(summary.search_stats[EdgeColor.BLUE])

    return TournamentResult(
        games=games,
        red_wins=red_wins,
        blue_wins=blue_wins,
        first_player_wins=first_player_wins,
        avg_turns=total_turns / games if games else 0.0,
        avg_move_time_ms={
            EdgeColor.RED: _average(move_times[EdgeColor.RED]),
            EdgeColor.BLUE: _average(move_times[EdgeColor.BLUE]),
        },
        side_stats={
            EdgeColor.RED: _summarize_search(search_records[EdgeColor.RED]),
            EdgeColor.BLUE: _summarize_search(search_records[EdgeColor.BLUE]),
        },
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Sim tournament/benchmark runner")
    parser.add_argument("--games", type=int, default=200)
    parser.add_argument("--red", choices=COMPUTER_AGENTS, default="minimax")
    parser.add_argument("--blue", choices=COMPUTER_AGENTS, default="random")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--random-plies", type=int, default=DEFAULT_RANDOM_PLIES)
    parser.add_argument("--stats", action="store_true", help="Collect and print search statistics")
    parser.add_argument("--quiet", dest="quiet", action="store_true", help="Suppress per-move logs", default=True)
    parser.add_argument("--no-quiet", dest="quiet", action="store_false", help="Show per-move logs")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.games <= 0:
        print("--games must be positive")
        raise SystemExit(1)

    try:
        red_agent = build_agent(args.red, seed=args.seed, random_plies=args.random_plies)
        blue_agent = build_agent(args.blue, seed=args.seed + 1, random_plies=args.random_plies)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(1)

    result = run_tournament(
        red_agent=red_agent,
        blue_agent=blue_agent,
        games=args.games,
        quiet=args.quiet,
        collect_stats=args.stats,
    )

    print(f"Red wins: {result.red_wins}, Blue wins: {result.blue_wins}")
    print(f"Win rate (Red): {result.red_wins / result.games:.3f}")
    print(f"First player wins: {result.first_player_wins}")
    print(f"Average turns: {result.avg_turns:.2f}")
    print(
        f"Average move time ms - Red: {result.avg_move_time_ms[EdgeColor.RED]:.2f}, "
        f"Blue: {result.avg_move_time_ms[EdgeColor.BLUE]:.2f}"
    )

    if args.stats:
        for side in (EdgeColor.RED, EdgeColor.BLUE):
            summary = result.side_stats[side]
            if summary.samples == 0:
                print(f"{side.name} search stats: (no data)")
                continue
            print(
                f"{side.name} search stats: samples={summary.samples} forced_wins={summary.forced_wins} "
                f"avg_nodes={summary.avg_nodes:.1f} avg_ms={summary.avg_elapsed_ms:.2f} "
                f"cache_hit_rate={summary.cache_hit_rate:.3f}"
            )


if __name__ == "__main__":
    main()
