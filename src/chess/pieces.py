"""Defines the pieces that can be placed on the board"""

from dataclasses import dataclass
from typing import Self
from uuid import uuid4

from src.core.exceptions import InvalidPieceTypeError
from src.core.shared_types import AVAILABLE_PIECE_TYPES, PieceType


def generate_piece_id() -> str:
    return str(uuid4())


def parse_piece_type(value: str | PieceType) -> PieceType:
    """Accepts the enum itself or its wire name ('Rook', 'Bishop')."""
    if isinstance(value, PieceType):
        return value
    try:
        return PieceType(value)
    except ValueError:
        raise InvalidPieceTypeError(
            str(value),
            f"Invalid piece type: {value!r}. Pick one from {','.join(AVAILABLE_PIECE_TYPES)}",
        ) from None


@dataclass(frozen=True)
class Piece:
    # NOTE: the movement rule is looked up by type (see moves.MOVEMENT_RULES), it is not stored on the piece
    id: str
    type: PieceType

    @classmethod
    def rook(cls, piece_id: str) -> Self:
        return cls(piece_id, PieceType.ROOK)

    @classmethod
    def bishop(cls, piece_id: str) -> Self:
        return cls(piece_id, PieceType.BISHOP)
