"""
The Board holds which piece occupies which position, plus the registry of removed pieces.

All operations take the same (re-entrant) lock, so each one is atomic with respect to the others.
Callers that need read -> validate -> mutate as a single step wrap it in `Board.transaction()`.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, assert_never

from src.chess.events import ChessEvent, PieceAdded, PieceMoved, PieceRemoved
from src.chess.pieces import Piece
from src.chess.position import Position
from src.core.exceptions import (
    BoardInconsistencyError,
    DuplicateIdentifierError,
    PieceNotFoundError,
    PositionOccupiedError,
    RemovedIdentifierReusedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of the board at a single point in time (used for validation)"""

    position: Mapping[Position, Piece]
    removed: Mapping[str, Position]

    def piece_at(self, position: Position) -> Piece | None:
        return self.position.get(position)

    def is_occupied(self, position: Position) -> bool:
        return position in self.position

    def locate(self, piece_id: str) -> tuple[Position, Piece] | None:
        """Find the square holding the piece with the given identifier."""
        return next(
            ((square, piece) for square, piece in self.position.items() if piece.id == piece_id),
            None,
        )

    def is_removed(self, piece_id: str) -> bool:
        return piece_id in self.removed

    def last_position_of(self, piece_id: str) -> Position | None:
        return self.removed.get(piece_id)


@dataclass
class Board:
    _position: dict[Position, Piece] = field(default_factory=dict, init=False)
    _removed: dict[str, Position] = field(default_factory=dict, init=False)
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the board lock for a compound read-validate-mutate step."""
        with self._lock:
            yield

    def snapshot(self) -> BoardSnapshot:
        with self._lock:
            return BoardSnapshot(
                position=MappingProxyType(dict(self._position)),
                removed=MappingProxyType(dict(self._removed)),
            )

    # --- CHECKED MUTATIONS (live traffic) ---
    def try_insert(self, position: Position, piece: Piece) -> None:
        with self._lock:
            if position in self._position:
                raise PositionOccupiedError(position)
            if piece.id in self._removed:
                raise RemovedIdentifierReusedError(piece.id, piece.type)
            if self._find(piece.id) is not None:
                raise DuplicateIdentifierError(piece.id, piece.type)
            self._position[position] = piece

    def try_relocate(self, from_position: Position, to_position: Position, piece: Piece) -> None:
        with self._lock:
            if self._position.get(from_position) != piece:
                raise BoardInconsistencyError(
                    f"Expected piece {piece.id} at {from_position}, found {self._position.get(from_position)}"
                )
            if to_position in self._position:
                raise PositionOccupiedError(to_position)
            del self._position[from_position]
            self._position[to_position] = piece

    def try_remove(self, piece_id: str) -> tuple[Position, Piece]:
        """Take the piece off the board and retire its identifier. Returns the vacated position and the piece."""
        with self._lock:
            found = self._find(piece_id)
            if found is None:
                raise PieceNotFoundError(piece_id)
            position, piece = found
            del self._position[position]
            self._removed[piece_id] = position
            return position, piece

    # --- TRUSTED MUTATION (replay) ---
    def replay_apply(self, event: ChessEvent) -> None:
        """
        Apply the effect of an already committed event, without any of the checks above.
        ---
        NOTE: PieceRemoved only clears the square. The identifier is not written into the removed registry,
        so an instance rebuilt from the log alone accepts that identifier again.
        """
        with self._lock:
            match event:
                case PieceAdded(piece=piece, position=position):
                    self._position[position] = piece
                case PieceMoved(piece=piece, from_position=from_position, to_position=to_position):
                    self._position.pop(from_position, None)
                    self._position[to_position] = piece
                case PieceRemoved(position=position):
                    self._position.pop(position, None)
                case _:
                    assert_never(event)
            logger.debug("Replayed %s", event)

    def _find(self, piece_id: str) -> tuple[Position, Piece] | None:
        return next(
            ((square, piece) for square, piece in self._position.items() if piece.id == piece_id),
            None,
        )
