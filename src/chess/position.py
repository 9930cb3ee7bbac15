"""
A position (square) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def is_within_bounds(self) -> bool:
        return (1 <= self.x <= BOARD_DIMENSIONS[0]) and (1 <= self.y <= BOARD_DIMENSIONS[1])

    def to_key(self) -> str:
        """'x,y' : used as key when the whole board gets rendered as a JSON object"""
        return f"{self.x},{self.y}"


def all_positions() -> list[Position]:
    """Every square of the board, ordered by x first."""
    return [
        Position(x, y)
        for x in range(1, BOARD_DIMENSIONS[0] + 1)
        for y in range(1, BOARD_DIMENSIONS[1] + 1)
    ]
