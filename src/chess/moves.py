"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the movement rule for each piece type.
Adding a piece type means adding a rule function and an entry in MOVEMENT_RULES.

There is no capturing: a move onto an occupied square is never legal.
"""

from typing import Callable, Collection

from src.chess.position import Position
from src.core.shared_types import PieceType

Vector = tuple[int, int]

# (from, to, occupied squares) -> is the move legal
MoveRuleFn = Callable[[Position, Position, Collection[Position]], bool]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def squares_between(from_position: Position, to_position: Position) -> list[Position]:
    """
    Strictly intermediate squares on the straight or diagonal line from one position to another.
    ---
    Returns an empty list for adjacent squares, and for pairs not on a common line.
    """
    dx = to_position.x - from_position.x
    dy = to_position.y - from_position.y
    on_line = dx == 0 or dy == 0 or abs(dx) == abs(dy)
    if not on_line:
        return []

    step: Vector = (_sign(dx), _sign(dy))
    distance = max(abs(dx), abs(dy))
    return [
        Position(from_position.x + i * step[0], from_position.y + i * step[1])
        for i in range(1, distance)
    ]


def is_path_clear(
    from_position: Position, to_position: Position, occupied: Collection[Position]
) -> bool:
    return all(square not in occupied for square in squares_between(from_position, to_position))


# --- MOVEMENT RULES ---
def rook_move_is_legal(
    from_position: Position, to_position: Position, occupied: Collection[Position]
) -> bool:
    """Rook moves along a file or a rank, as long as nothing is in between."""
    is_straight_move = from_position.x == to_position.x or from_position.y == to_position.y
    return (
        is_straight_move
        and is_path_clear(from_position, to_position, occupied)
        and to_position not in occupied
    )


def bishop_move_is_legal(
    from_position: Position, to_position: Position, occupied: Collection[Position]
) -> bool:
    """Bishop moves along a diagonal, as long as nothing is in between."""
    dx = abs(from_position.x - to_position.x)
    dy = abs(from_position.y - to_position.y)
    is_diagonal_move = dx == dy and dx != 0
    return (
        is_diagonal_move
        and is_path_clear(from_position, to_position, occupied)
        and to_position not in occupied
    )


MOVEMENT_RULES: dict[PieceType, MoveRuleFn] = {
    PieceType.ROOK: rook_move_is_legal,
    PieceType.BISHOP: bishop_move_is_legal,
}


def is_legal_move(
    piece_type: PieceType,
    from_position: Position,
    to_position: Position,
    occupied: Collection[Position],
) -> bool:
    """Dispatch to the movement rule of the piece type. Targets off the board, or staying put, are never legal."""
    if not to_position.is_within_bounds() or from_position == to_position:
        return False
    movement_rule = MOVEMENT_RULES[piece_type]
    return movement_rule(from_position, to_position, occupied)
