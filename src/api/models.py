"""Requests and Response models"""

from typing import Optional, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.chess.pieces import Piece
from src.chess.position import Position
from src.core.exceptions import (
    GameError,
    InvalidMoveError,
    InvalidPieceTypeError,
    InvalidPositionError,
    InvalidRequestError,
    PieceNotFoundError,
    PositionOccupiedError,
    StandbyError,
)
from src.core.shared_types import PieceType

# Square key on the wire: "x,y"
PositionKey = str


class PositionModel(BaseModel):
    """Coordinates are not range checked here: that is a business rule (InvalidPositionError)"""

    x: int
    y: int

    @classmethod
    def from_position(cls, position: Position) -> Self:
        return cls(x=position.x, y=position.y)

    def to_position(self) -> Position:
        return Position(self.x, self.y)


# --- REQUEST MODELS ---
class AddPieceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    piece_type: PieceType = Field(alias="pieceType")
    position: PositionModel
    piece_id: Optional[str] = Field(default=None, alias="pieceId")

    @field_validator("piece_id")
    @classmethod
    def validate_piece_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip():
            raise InvalidRequestError("pieceId cannot be blank.")
        return value


class MovePieceRequest(BaseModel):
    to: PositionModel


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    piece_type: PieceType = Field(alias="pieceType")

    @classmethod
    def from_piece(cls, piece: Piece) -> Self:
        return cls(id=piece.id, piece_type=piece.type)


class BoardState(BaseModel):
    pieces: dict[PositionKey, PieceResponse]

    @classmethod
    def from_board(cls, board: dict[Position, Piece]) -> Self:
        return cls(
            pieces={
                position.to_key(): PieceResponse.from_piece(piece)
                for position, piece in sorted(board.items(), key=lambda item: (item[0].x, item[0].y))
            }
        )


class ErrorResponse(BaseModel):
    error: str
    message: str

    @classmethod
    def from_error(cls, error: GameError) -> Self:
        return cls(error=error.code, message=error.message)


# Status code per error kind, for the HTTP adapter. Anything else derived from GameError is a bad request.
ERROR_STATUS_CODES: dict[type[GameError], int] = {
    InvalidPositionError: 400,
    InvalidPieceTypeError: 400,
    InvalidMoveError: 400,
    InvalidRequestError: 400,
    PositionOccupiedError: 409,
    PieceNotFoundError: 404,
    StandbyError: 503,
}


def status_code_for(error: GameError) -> int:
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return 400
