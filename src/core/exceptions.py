"""
Custom exceptions.

Every error a caller can recover from derives from GameError, so the API layer can catch a single type
and render the (more specific) subclass.
"""

from typing import Any


class GameError(Exception):
    """Top-level exception for all domain errors."""

    code: str = "GAME_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        """Extra information (position, identifier, ...) for rendering a precise error message."""
        return {}


# --- REQUEST ERRORS ---
class InvalidRequestError(GameError):
    code = "INVALID_REQUEST"


# --- BOARD / RULE ERRORS ---
class InvalidPositionError(GameError):
    """Coordinate(s) outside of the board."""

    code = "INVALID_POSITION"

    def __init__(self, position: Any, reason: str = "Position must be within 8x8 board.") -> None:
        super().__init__(f"Invalid position {position}: {reason}")
        self.position = position

    def context(self) -> dict[str, Any]:
        return {"position": self.position}


class PositionOccupiedError(GameError):
    code = "POSITION_OCCUPIED"

    def __init__(self, position: Any) -> None:
        super().__init__(f"Position {position} is already occupied")
        self.position = position

    def context(self) -> dict[str, Any]:
        return {"position": self.position}


class InvalidPieceTypeError(GameError):
    """Unsupported piece type (or, see subclass, an identifier that can no longer be used)"""

    code = "INVALID_PIECE_TYPE"

    def __init__(self, piece_type: str, message: str | None = None) -> None:
        super().__init__(message or f"Invalid piece type: {piece_type}")
        self.piece_type = piece_type

    def context(self) -> dict[str, Any]:
        return {"piece_type": self.piece_type}


class RemovedIdentifierReusedError(InvalidPieceTypeError):
    """Identifiers are single-use: once removed from the board, they cannot be added back."""

    code = "REMOVED_IDENTIFIER_REUSED"

    def __init__(self, piece_id: str, piece_type: str = "") -> None:
        super().__init__(
            piece_type,
            f"Piece with id {piece_id} has been removed and cannot be added back",
        )
        self.piece_id = piece_id

    def context(self) -> dict[str, Any]:
        return {"piece_id": self.piece_id}


class DuplicateIdentifierError(InvalidPieceTypeError):
    """A piece with the same identifier is already on the board."""

    code = "DUPLICATE_IDENTIFIER"

    def __init__(self, piece_id: str, piece_type: str = "") -> None:
        super().__init__(piece_type, f"Piece with id {piece_id} is already on the board")
        self.piece_id = piece_id

    def context(self) -> dict[str, Any]:
        return {"piece_id": self.piece_id}


class PieceNotFoundError(GameError):
    code = "PIECE_NOT_FOUND"

    def __init__(self, piece_id: str | None = None, position: Any = None) -> None:
        if piece_id is not None:
            message = f"Piece with id {piece_id} not found"
        else:
            message = f"No piece at position {position}"
        super().__init__(message)
        self.piece_id = piece_id
        self.position = position

    def context(self) -> dict[str, Any]:
        if self.piece_id is not None:
            return {"piece_id": self.piece_id}
        return {"position": self.position}


class InvalidMoveError(GameError):
    code = "INVALID_MOVE"

    def __init__(self, from_position: Any, to_position: Any, reason: str) -> None:
        super().__init__(f"Invalid move from {from_position} to {to_position}: {reason}")
        self.from_position = from_position
        self.to_position = to_position
        self.reason = reason

    def context(self) -> dict[str, Any]:
        return {"from": self.from_position, "to": self.to_position}


class BoardInconsistencyError(GameError):
    """The board no longer matches what the caller validated against."""

    code = "BOARD_INCONSISTENCY"


class StandbyError(GameError):
    """Writes are refused while the instance is still following the event log of another one."""

    code = "STANDBY"


# --- EVENT LOG ERRORS ---
class EventLogError(GameError):
    code = "EVENT_LOG_ERROR"


class EventDecodeError(EventLogError):
    code = "EVENT_DECODE_ERROR"


class ReplayError(EventLogError):
    """Raised when the event stream cannot be read. Only the replay task is affected."""

    code = "REPLAY_ERROR"
