"""Game record parsing and serialization.

A record is plain text::

    # optional comment lines
    FIRST:R
    1:R;0-1
    2:B;2-4

Each move line holds the ply number, the mover's color letter and the
endpoints of the colored edge.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .types import EdgeColor, edge_between, edge_endpoints

_LETTERS = {"R": EdgeColor.RED, "B": EdgeColor.BLUE}

RecordMove = Tuple[int, EdgeColor, int]


@dataclass
class GameRecord:
    comments: List[str]
    first: EdgeColor
    moves: List[RecordMove]


def _parse_color(letter: str) -> EdgeColor:
    color = _LETTERS.get(letter.strip().upper())
    if color is None:
        raise ValueError(f"Invalid color '{letter}'")
    return color


def _parse_move_line(line: str) -> RecordMove:
    if ":" not in line or ";" not in line:
        raise ValueError(f"Invalid move line '{line}'")
    ply_str, rest = line.split(":", 1)
    color_part, edge_part = rest.split(";", 1)
    try:
        ply = int(ply_str)
    except ValueError as exc:
        raise ValueError(f"Invalid ply number '{ply_str}'") from exc
    color = _parse_color(color_part)
    if "-" not in edge_part:
        raise ValueError(f"Invalid edge '{edge_part}'")
    a_str, b_str = edge_part.split("-", 1)
    try:
        edge = edge_between(int(a_str), int(b_str))
    except ValueError as exc:
        raise ValueError(f"Invalid edge '{edge_part.strip()}': {exc}") from exc
    return ply, color, edge


def parse_record(text: str) -> GameRecord:
    """Parse record text into a structured ``GameRecord``."""

    comments: List[str] = []
    first: EdgeColor | None = None
    moves: List[RecordMove] = []

    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if not stripped:
            continue
        if stripped.startswith("#"):
            comments.append(stripped)
            continue
        if stripped.upper().startswith("FIRST:"):
            first = _parse_color(stripped.split(":", 1)[1])
            continue
        moves.append(_parse_move_line(stripped))

    if first is None:
        raise ValueError("Missing FIRST: line")

    return GameRecord(comments=comments, first=first, moves=moves)


def dump_record(record: GameRecord) -> str:
    """Serialize a ``GameRecord`` to text."""

    lines: List[str] = []
    lines.extend(record.comments)
    lines.append(f"FIRST:{record.first.letter}")
    for ply, color, edge in record.moves:
        a, b = edge_endpoints(edge)
        lines.append(f"{ply}:{color.letter};{a}-{b}")
    return "\n".join(lines) + "\n"
