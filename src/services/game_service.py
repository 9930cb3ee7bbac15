"""Orchestration of validation, board mutation and event emission for the piece operations."""

import logging
from concurrent.futures import Future
from typing import Callable, Optional

from src.chess.board import Board, BoardSnapshot
from src.chess.events import ChessEvent, PieceAdded, PieceMoved, PieceRemoved
from src.chess.moves import is_legal_move
from src.chess.pieces import Piece, generate_piece_id, parse_piece_type
from src.chess.position import Position
from src.core.config import EVENTS_TOPIC
from src.core.exceptions import (
    DuplicateIdentifierError,
    InvalidMoveError,
    InvalidPositionError,
    InvalidRequestError,
    PieceNotFoundError,
    PositionOccupiedError,
    RemovedIdentifierReusedError,
    StandbyError,
)
from src.core.shared_types import PieceType
from src.events.log import EventPublisher
from src.events.serde import encode_event

logger = logging.getLogger(__name__)


class GameService:
    """
    Orchestration of the board and the event log.
    ---
    Every operation validates and mutates inside one board transaction. The resulting event is published
    afterwards, without waiting for the log: a failed publish gets logged, the mutation stays committed.
    """

    def __init__(
        self,
        board: Board,
        publisher: EventPublisher,
        topic: str = EVENTS_TOPIC,
        id_factory: Callable[[], str] = generate_piece_id,
        standby: bool = False,
    ) -> None:
        self.board = board
        self.standby = standby
        self.publisher = publisher
        self.topic = topic
        self._id_factory = id_factory

    # -- Operations --
    def add_piece(
        self,
        piece_type: PieceType | str,
        position: Position,
        piece_id: Optional[str] = None,
    ) -> Piece:
        """Place a new piece on an empty square."""
        self._check_writable()
        self._check_within_bounds(position)
        if piece_id is not None and not piece_id.strip():
            raise InvalidRequestError("Piece id cannot be blank.")

        with self.board.transaction():
            snapshot = self.board.snapshot()
            if snapshot.is_occupied(position):
                raise PositionOccupiedError(position)

            piece_id = piece_id if piece_id is not None else self._id_factory()
            piece = Piece(piece_id, parse_piece_type(piece_type))
            if snapshot.is_removed(piece.id):
                raise RemovedIdentifierReusedError(piece.id, piece.type)
            if snapshot.locate(piece.id) is not None:
                raise DuplicateIdentifierError(piece.id, piece.type)

            self.board.try_insert(position, piece)
        logger.debug("Added %s %s at %s", piece.type, piece.id, position)

        self._publish(PieceAdded(piece, position))
        return piece

    def move_piece(self, from_position: Position, to_position: Position) -> None:
        """Move whatever piece stands on `from_position`."""
        self._check_writable()
        with self.board.transaction():
            snapshot = self.board.snapshot()
            piece = snapshot.piece_at(from_position)
            if piece is None:
                raise PieceNotFoundError(position=from_position)
            self._relocate(snapshot, piece, from_position, to_position)

        self._publish(PieceMoved(piece, from_position, to_position))

    def move_piece_by_id(self, piece_id: str, to_position: Position) -> None:
        self._check_writable()
        self._check_within_bounds(to_position)

        with self.board.transaction():
            snapshot = self.board.snapshot()
            found = snapshot.locate(piece_id)
            if found is None:
                raise PieceNotFoundError(piece_id)
            from_position, piece = found
            self._relocate(snapshot, piece, from_position, to_position)

        self._publish(PieceMoved(piece, from_position, to_position))

    def remove_piece_by_id(self, piece_id: str) -> Position:
        """Take a piece off the board for good. Returns the square it was standing on."""
        self._check_writable()
        position, piece = self.board.try_remove(piece_id)
        logger.debug("Removed %s %s from %s", piece.type, piece.id, position)

        self._publish(PieceRemoved(piece, position))
        return position

    def get_board(self) -> dict[Position, Piece]:
        return dict(self.board.snapshot().position)

    def get_last_position_of_removed_piece(self, piece_id: str) -> Position:
        position = self.board.snapshot().last_position_of(piece_id)
        if position is None:
            raise PieceNotFoundError(piece_id)
        return position

    # -- Internal helpers --
    def _relocate(
        self,
        snapshot: BoardSnapshot,
        piece: Piece,
        from_position: Position,
        to_position: Position,
    ) -> None:
        """Validate the move against the snapshot and apply it. Caller holds the board transaction."""
        if snapshot.is_occupied(to_position):
            raise PositionOccupiedError(to_position)

        occupied = snapshot.position.keys()
        if not is_legal_move(piece.type, from_position, to_position, occupied):
            raise InvalidMoveError(
                from_position,
                to_position,
                f"{piece.type} cannot move there (wrong direction or path blocked)",
            )

        self.board.try_relocate(from_position, to_position, piece)
        logger.debug("Moved %s %s from %s to %s", piece.type, piece.id, from_position, to_position)

    def _check_writable(self) -> None:
        if self.standby:
            raise StandbyError("Instance is following the event log and does not accept writes yet.")

    def _check_within_bounds(self, position: Position) -> None:
        if not position.is_within_bounds():
            raise InvalidPositionError(position)

    def _publish(self, event: ChessEvent) -> None:
        """Fire and forget. Failures are only logged: the board has already changed."""
        try:
            future = self.publisher.publish(self.topic, event.key, encode_event(event))
        except Exception:
            logger.warning(
                "Failed to publish %s for piece %s", type(event).__name__, event.key, exc_info=True
            )
            return
        future.add_done_callback(lambda done: self._log_publish_result(event, done))

    def _log_publish_result(self, event: ChessEvent, future: Future[None]) -> None:
        if future.cancelled():
            logger.warning("Publishing %s for piece %s was cancelled", type(event).__name__, event.key)
            return
        exc = future.exception()
        if exc is not None:
            logger.warning(
                "Failed to publish %s for piece %s: %s", type(event).__name__, event.key, exc
            )
