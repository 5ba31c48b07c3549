import pytest

from sim_game import engine
from sim_game.agents import MinimaxAgent, find_move
from sim_game.engine import ExhaustedBoardError
from sim_game.types import EdgeColor, edge_between

# Triangle-free 14-edge coloring: red pentagon / blue pentagram on 0..4,
# vertex 5 joined red to 0,3 and blue to 1,2. Only 4-5 (edge 14) is open.
ONE_LEFT = "122111222122110"
# Same board with 2-5 (edge 11) reopened. Blue to move.
TWO_LEFT = "122111222120110"
# Three open edges 2-5, 3-5, 4-5 (11, 13, 14) with red to move:
# 14 loses at once, 11 is safe but loses two plies later, 13 wins.
THREE_LEFT = "122112122110200"


def test_single_remaining_edge_is_returned():
    state = engine.parse_board(ONE_LEFT)
    assert engine.find_triangle(state) is None
    assert engine.legal_moves(state) == [14]
    assert find_move(state, EdgeColor.RED) == 14
    assert find_move(state, EdgeColor.BLUE) == 14


def test_never_returns_an_immediately_losing_edge():
    state = engine.parse_board(TWO_LEFT)
    assert state.would_complete_triangle(14, EdgeColor.BLUE)
    assert not state.would_complete_triangle(11, EdgeColor.BLUE)
    for seed in range(10):
        assert find_move(state, EdgeColor.BLUE, seed=seed) == 11


def test_forced_win_picks_the_only_winning_edge():
    state = engine.parse_board(THREE_LEFT)
    assert engine.safe_moves(state, EdgeColor.RED) == [11, 13]

    agent = MinimaxAgent(seed=0)
    move = agent.choose_move(state, EdgeColor.RED)

    assert move == edge_between(3, 5) == 13
    stats = agent.last_stats
    assert stats is not None
    assert stats.forced_win
    assert stats.decision == "forced-win"
    assert stats.start_ply == 12
    assert stats.nodes > 1


def test_losing_side_falls_back_to_a_safe_edge():
    # Blue's only safe edge is 13, after which red still wins.
    state = engine.parse_board(THREE_LEFT)
    assert engine.safe_moves(state, EdgeColor.BLUE) == [13]

    agent = MinimaxAgent(seed=3)
    move = agent.choose_move(state, EdgeColor.BLUE)

    assert move == 13
    assert agent.last_stats.decision == "fallback"
    assert not agent.last_stats.forced_win


def test_opponent_reply_after_wrong_move_is_a_forced_win():
    state = engine.apply_move(engine.parse_board(THREE_LEFT), 11, EdgeColor.RED)
    agent = MinimaxAgent(seed=0)
    assert agent.choose_move(state, EdgeColor.BLUE) == 13
    assert agent.last_stats.forced_win


def test_search_does_not_mutate_caller_state():
    state = engine.parse_board(THREE_LEFT)
    key = state.key()
    find_move(state, EdgeColor.RED)
    find_move(state, EdgeColor.BLUE)
    assert state.key() == key


def test_opening_plies_are_random_without_search():
    agent = MinimaxAgent(seed=11)
    state = engine.new_game()
    for ply in range(3):
        color = EdgeColor.RED if ply % 2 == 0 else EdgeColor.BLUE
        move = agent.choose_move(state, color)
        assert agent.last_stats.decision == "opening"
        assert agent.last_stats.nodes == 0
        assert agent.last_stats.start_ply == ply
        state = engine.apply_move(state, move, color)


def test_random_plies_zero_searches_immediately():
    state = engine.parse_board(THREE_LEFT)
    agent = MinimaxAgent(random_plies=0)
    assert agent.choose_move(state, EdgeColor.RED) == 13
    agent = MinimaxAgent(random_plies=13)
    agent.choose_move(state, EdgeColor.RED)
    assert agent.last_stats.decision == "opening"


def test_midgame_search_never_loses_immediately():
    # Eight edges colored, no triangle yet.
    state = engine.new_game()
    for pair in [(0, 1), (2, 3), (4, 5), (0, 4)]:
        state.set_edge(edge_between(*pair), EdgeColor.RED)
    for pair in [(0, 2), (1, 3), (2, 4), (3, 5)]:
        state.set_edge(edge_between(*pair), EdgeColor.BLUE)
    assert engine.find_triangle(state) is None

    agent = MinimaxAgent(seed=2)
    move = agent.choose_move(state, EdgeColor.RED)

    assert state.color_of(move) is EdgeColor.NONE
    assert not state.would_complete_triangle(move, EdgeColor.RED)
    assert agent.last_stats.decision in {"forced-win", "fallback"}
    assert agent.last_stats.depth_reached <= 15


def test_full_board_is_a_precondition_violation():
    state = engine.parse_board("122111222122111")
    with pytest.raises(ExhaustedBoardError):
        find_move(state, EdgeColor.RED)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        MinimaxAgent(random_plies=16)
    with pytest.raises(ValueError):
        find_move(engine.new_game(), EdgeColor.NONE)
