"""
Domain events: immutable facts about committed changes to the board.

Every event is keyed by the identifier of the piece it is about, so a transport that keeps per-key order
delivers all events of one piece in the order they happened.
"""

from dataclasses import dataclass

from src.chess.pieces import Piece
from src.chess.position import Position


@dataclass(frozen=True)
class PieceAdded:
    piece: Piece
    position: Position

    @property
    def key(self) -> str:
        return self.piece.id


@dataclass(frozen=True)
class PieceMoved:
    piece: Piece
    from_position: Position
    to_position: Position

    @property
    def key(self) -> str:
        return self.piece.id


@dataclass(frozen=True)
class PieceRemoved:
    piece: Piece
    position: Position

    @property
    def key(self) -> str:
        return self.piece.id


ChessEvent = PieceAdded | PieceMoved | PieceRemoved
