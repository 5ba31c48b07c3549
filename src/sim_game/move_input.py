"""Utilities for parsing user-entered Sim moves."""
from __future__ import annotations

import re
from dataclasses import dataclass

from .types import NUM_EDGES, edge_between, edge_endpoints


@dataclass
class ParsedMove:
    """Result of parsing a user-supplied move string."""

    edge: int
    a: int
    b: int


def parse_move_text(raw: str) -> ParsedMove:
    """Parse a move given either as two endpoints or as an edge id.

    Accepted examples (case-insensitive):
    - "1 4", "1-4", "1,4" or "(1,4)"  # vertex pair, in either order
    - "e7" or "#7"                     # edge id

    Raises:
        ValueError: if the text cannot be parsed or names an invalid edge.
    """

    text = raw.strip().upper()
    if not text:
        raise ValueError("Move text is empty")

    match = re.match(r"^(?:E|#)\s*(\d+)$", text)
    if match:
        edge = int(match.group(1))
        if edge >= NUM_EDGES:
            raise ValueError(f"Edge id must be between 0 and {NUM_EDGES - 1}")
        a, b = edge_endpoints(edge)
        return ParsedMove(edge=edge, a=a, b=b)

    match = re.match(r"^\(?\s*(\d+)\s*(?:[-,]|\s)\s*(\d+)\s*\)?$", text)
    if not match:
        raise ValueError("Could not parse move; use formats like '1 4', '1-4' or 'e7'")

    a = int(match.group(1))
    b = int(match.group(2))
    if a == b:
        raise ValueError("Endpoints must be two different vertices")
    edge = edge_between(a, b)
    return ParsedMove(edge=edge, a=min(a, b), b=max(a, b))
