import textwrap

import pytest

from sim_game import replay
from sim_game.record import GameRecord, dump_record, parse_record
from sim_game.types import EdgeColor

# Red closes 0-1-2 on its third move.
SAMPLE = textwrap.dedent(
    """
    # Friendly game
    FIRST:R
    1:R;0-1
    2:B;2-3
    3:R;0-2
    4:B;3-4
    5:R;1-2
    """
).strip()


def test_parse_and_dump_roundtrip():
    record = parse_record(SAMPLE)
    assert record.first is EdgeColor.RED
    assert record.comments == ["# Friendly game"]
    assert record.moves[0] == (1, EdgeColor.RED, 0)
    assert record.moves[-1] == (5, EdgeColor.RED, 5)

    reparsed = parse_record(dump_record(record))
    assert reparsed == record


def test_dump_writes_endpoints():
    record = GameRecord(comments=[], first=EdgeColor.BLUE, moves=[(1, EdgeColor.BLUE, 14)])
    assert dump_record(record) == "FIRST:B\n1:B;4-5\n"


def test_parse_errors():
    for text in ["1:R;0-1", "FIRST:G\n", "FIRST:R\n1:R;0-0", "FIRST:R\n1:X;0-1", "FIRST:R\nx:R;0-1", "FIRST:R\n1-R;0-1"]:
        with pytest.raises(ValueError):
            parse_record(text)


def test_replay_reports_loser():
    state, lost = replay.replay_game(parse_record(SAMPLE))
    assert lost is EdgeColor.RED
    assert state.colored_count() == 5


def test_replay_rejects_bad_sequences():
    wrong_turn = "FIRST:R\n1:R;0-1\n2:R;0-2\n"
    reused_edge = "FIRST:R\n1:R;0-1\n2:B;1-0\n"
    bad_ply = "FIRST:R\n1:R;0-1\n3:B;0-2\n"
    after_end = SAMPLE + "\n6:B;4-5\n"
    for text in [wrong_turn, reused_edge, bad_ply, after_end]:
        with pytest.raises(ValueError):
            replay.replay_game(parse_record(text))


def test_replay_file(tmp_path, capsys):
    path = tmp_path / "game.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    replay.main(["--file", str(path)])
    out = capsys.readouterr().out
    assert "Loser: RED" in out
    assert "Final board:" in out
