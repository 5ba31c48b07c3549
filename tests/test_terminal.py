import random

from sim_game import engine
from sim_game.types import NUM_EDGES, EdgeColor, GameState, edge_between


def build_state(red_pairs=(), blue_pairs=()) -> GameState:
    state = GameState()
    for a, b in red_pairs:
        state.set_edge(edge_between(a, b), EdgeColor.RED)
    for a, b in blue_pairs:
        state.set_edge(edge_between(a, b), EdgeColor.BLUE)
    return state


def test_two_sides_make_the_third_edge_losing():
    state = build_state(red_pairs=[(0, 1), (0, 2)])
    closing = edge_between(1, 2)
    assert state.would_complete_triangle(closing, EdgeColor.RED)
    assert not state.would_complete_triangle(closing, EdgeColor.BLUE)
    assert not state.would_complete_triangle(edge_between(1, 3), EdgeColor.RED)


def test_mixed_sides_never_complete_a_triangle():
    state = build_state(red_pairs=[(0, 1)], blue_pairs=[(0, 2)])
    closing = edge_between(1, 2)
    assert not state.would_complete_triangle(closing, EdgeColor.RED)
    assert not state.would_complete_triangle(closing, EdgeColor.BLUE)


def test_loser_owns_the_triangle():
    state = build_state(red_pairs=[(0, 1), (2, 3)], blue_pairs=[(3, 4), (4, 5), (3, 5)])
    assert engine.find_triangle(state) == (3, 4, 5)
    assert engine.find_triangle(state, EdgeColor.RED) is None
    assert engine.loser(state) is EdgeColor.BLUE
    assert engine.winner(state) is EdgeColor.RED
    assert engine.is_terminal(state)


def test_empty_board_is_not_terminal():
    state = engine.new_game()
    assert engine.loser(state) is None
    assert engine.winner(state) is None
    assert not engine.is_terminal(state)


def _full_coloring(red_bits: int) -> GameState:
    encoded = 0
    for edge in range(NUM_EDGES):
        color = EdgeColor.RED if red_bits & (1 << edge) else EdgeColor.BLUE
        encoded |= int(color) << (edge * 2)
    return GameState(encoded=encoded)


def test_every_full_coloring_has_a_monochromatic_triangle():
    for red_bits in range(1 << NUM_EDGES):
        assert engine.find_triangle(_full_coloring(red_bits)) is not None


def test_random_full_colorings_end_the_game():
    rng = random.Random(7)
    for _ in range(200):
        state = _full_coloring(rng.getrandbits(NUM_EDGES))
        assert state.is_full()
        assert engine.is_terminal(state)
