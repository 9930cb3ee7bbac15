"""
Wire format of the domain events.

JSON objects, discriminated by "action":
    {"action": "added", "pieceId": "...", "pieceType": "Rook", "position": {"x": 1, "y": 1}}
    {"action": "moved", "pieceId": "...", "pieceType": "Rook", "from": {...}, "to": {...}}
    {"action": "removed", "pieceId": "...", "pieceType": "Rook", "position": {...}}
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.chess.events import ChessEvent, PieceAdded, PieceMoved, PieceRemoved
from src.chess.pieces import Piece
from src.chess.position import BOARD_DIMENSIONS, Position
from src.core.exceptions import EventDecodeError
from src.core.shared_types import PieceType


class PositionPayload(BaseModel):
    x: int = Field(ge=1, le=BOARD_DIMENSIONS[0])
    y: int = Field(ge=1, le=BOARD_DIMENSIONS[1])

    @classmethod
    def from_position(cls, position: Position) -> "PositionPayload":
        return cls(x=position.x, y=position.y)

    def to_position(self) -> Position:
        return Position(self.x, self.y)


class _EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    piece_id: str = Field(alias="pieceId", min_length=1)
    piece_type: PieceType = Field(alias="pieceType")

    def piece(self) -> Piece:
        return Piece(self.piece_id, self.piece_type)


class PieceAddedPayload(_EventPayload):
    action: Literal["added"] = "added"
    position: PositionPayload


class PieceMovedPayload(_EventPayload):
    action: Literal["moved"] = "moved"
    from_: PositionPayload = Field(alias="from")
    to: PositionPayload


class PieceRemovedPayload(_EventPayload):
    action: Literal["removed"] = "removed"
    position: PositionPayload


EventPayload = Annotated[
    Union[PieceAddedPayload, PieceMovedPayload, PieceRemovedPayload],
    Field(discriminator="action"),
]
_event_adapter: TypeAdapter[EventPayload] = TypeAdapter(EventPayload)


def to_payload(event: ChessEvent) -> EventPayload:
    piece_fields = {"piece_id": event.piece.id, "piece_type": event.piece.type}
    match event:
        case PieceAdded(position=position):
            return PieceAddedPayload(**piece_fields, position=PositionPayload.from_position(position))
        case PieceMoved(from_position=from_position, to_position=to_position):
            return PieceMovedPayload(
                **piece_fields,
                from_=PositionPayload.from_position(from_position),
                to=PositionPayload.from_position(to_position),
            )
        case PieceRemoved(position=position):
            return PieceRemovedPayload(**piece_fields, position=PositionPayload.from_position(position))
    raise TypeError(f"Cannot serialize {type(event).__name__} as a chess event")


def from_payload(payload: EventPayload) -> ChessEvent:
    match payload:
        case PieceAddedPayload():
            return PieceAdded(payload.piece(), payload.position.to_position())
        case PieceMovedPayload():
            return PieceMoved(payload.piece(), payload.from_.to_position(), payload.to.to_position())
        case PieceRemovedPayload():
            return PieceRemoved(payload.piece(), payload.position.to_position())
    raise TypeError(f"Unknown event payload {type(payload).__name__}")


def encode_event(event: ChessEvent) -> str:
    return to_payload(event).model_dump_json(by_alias=True)


def decode_event(data: str | bytes) -> ChessEvent:
    try:
        payload = _event_adapter.validate_json(data)
    except ValidationError as exc:
        raise EventDecodeError(f"Cannot decode chess event {data!r}: {exc}") from exc
    return from_payload(payload)
