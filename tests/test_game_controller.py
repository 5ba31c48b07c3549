import pytest

from sim_game import engine
from sim_game.agents import MinimaxAgent, SafeRandomAgent
from sim_game.game_controller import GameController
from sim_game.record import parse_record
from sim_game.types import EdgeColor, edge_between


def test_controller_human_ai_flow():
    controller = GameController(red_agent=None, blue_agent=SafeRandomAgent(seed=2))

    controller.apply_human_move(edge_between(0, 1))
    assert controller.turn is EdgeColor.BLUE

    legal_blue = controller.legal_moves()
    ai_move = controller.step_ai()
    assert ai_move in legal_blue
    assert controller.turn is EdgeColor.RED
    assert controller.state.color_of(ai_move) is EdgeColor.BLUE

    record = parse_record(controller.to_record())
    assert record.first is EdgeColor.RED
    assert [color for _, color, _ in record.moves] == [EdgeColor.RED, EdgeColor.BLUE]
    assert "# red_agent=Human" in record.comments


def test_apply_text_move_and_errors():
    controller = GameController()
    assert controller.apply_text_move("2 5") == edge_between(2, 5)
    with pytest.raises(ValueError):
        controller.apply_text_move("5-2")
    with pytest.raises(ValueError):
        controller.apply_text_move("nonsense")
    with pytest.raises(ValueError):
        controller.apply_human_move(edge_between(2, 5))
    with pytest.raises(ValueError):
        controller.compute_ai_move()


def test_game_over_after_triangle():
    controller = GameController(first=EdgeColor.RED)
    for text in ["0 1", "2 3", "0 2", "3 4"]:
        controller.apply_text_move(text)
    assert controller.losing_moves() == [edge_between(1, 2)]
    controller.apply_text_move("1 2")

    assert controller.is_over()
    assert controller.loser is EdgeColor.RED
    assert controller.winner is EdgeColor.BLUE
    assert controller.legal_moves() == []
    with pytest.raises(ValueError):
        controller.apply_text_move("4 5")


def test_ai_exception_falls_back_to_safe_move():
    class BoomAgent:
        def choose_move(self, *args, **kwargs):
            raise RuntimeError("boom")

    controller = GameController(red_agent=BoomAgent(), blue_agent=None)
    move = controller.step_ai()
    assert controller.state.color_of(move) is EdgeColor.RED


def test_ai_illegal_move_falls_back():
    class StubbornAgent:
        def choose_move(self, *args, **kwargs):
            return 0

    controller = GameController(red_agent=None, blue_agent=StubbornAgent())
    controller.apply_human_move(0)
    move = controller.step_ai()
    assert move != 0
    assert controller.state.color_of(move) is EdgeColor.BLUE


def test_full_game_between_agents_ends_with_a_loser():
    controller = GameController(red_agent=MinimaxAgent(random_plies=9, seed=1), blue_agent=SafeRandomAgent(seed=4))
    while not controller.is_over():
        controller.step_ai()
    last_color, _ = controller.history[-1]
    assert controller.loser is last_color
    assert engine.is_terminal(controller.state)
    controller.new_game(first=EdgeColor.BLUE)
    assert controller.turn is EdgeColor.BLUE
    assert controller.history == []
