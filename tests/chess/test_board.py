"""Unit tests for /src/chess/board.py"""

import threading

import pytest

from src.chess.board import Board
from src.chess.events import PieceAdded, PieceMoved, PieceRemoved
from src.chess.pieces import Piece
from src.chess.position import Position
from src.core.exceptions import (
    BoardInconsistencyError,
    DuplicateIdentifierError,
    InvalidPieceTypeError,
    PieceNotFoundError,
    PositionOccupiedError,
    RemovedIdentifierReusedError,
)

ROOK = Piece.rook("rook-1")
BISHOP = Piece.bishop("bishop-1")


# --- SNAPSHOT ---
def test_snapshot_is_a_copy(board: Board) -> None:
    """Mutations after taking the snapshot do not show up in it"""
    board.try_insert(Position(1, 1), ROOK)
    snapshot = board.snapshot()
    board.try_insert(Position(2, 2), BISHOP)

    assert dict(snapshot.position) == {Position(1, 1): ROOK}
    assert snapshot.piece_at(Position(2, 2)) is None


def test_snapshot_is_read_only(board: Board) -> None:
    snapshot = board.snapshot()
    with pytest.raises(TypeError):
        snapshot.position[Position(1, 1)] = ROOK  # type: ignore[index]


def test_snapshot_lookups(board: Board) -> None:
    board.try_insert(Position(3, 4), ROOK)
    board.try_remove(ROOK.id)
    board.try_insert(Position(5, 5), BISHOP)
    snapshot = board.snapshot()

    assert snapshot.locate(BISHOP.id) == (Position(5, 5), BISHOP)
    assert snapshot.locate(ROOK.id) is None
    assert snapshot.is_occupied(Position(5, 5))
    assert snapshot.is_removed(ROOK.id)
    assert not snapshot.is_removed(BISHOP.id)
    assert snapshot.last_position_of(ROOK.id) == Position(3, 4)
    assert snapshot.last_position_of(BISHOP.id) is None


# --- INSERT ---
def test_insert(board: Board) -> None:
    board.try_insert(Position(4, 4), ROOK)
    assert dict(board.snapshot().position) == {Position(4, 4): ROOK}


def test_insert_on_occupied_square(board: Board) -> None:
    board.try_insert(Position(4, 4), ROOK)
    with pytest.raises(PositionOccupiedError):
        board.try_insert(Position(4, 4), BISHOP)
    assert dict(board.snapshot().position) == {Position(4, 4): ROOK}


def test_insert_removed_identifier(board: Board) -> None:
    board.try_insert(Position(4, 4), ROOK)
    board.try_remove(ROOK.id)
    with pytest.raises(RemovedIdentifierReusedError) as exc_info:
        board.try_insert(Position(6, 6), ROOK)

    # reuse of an identifier is reported as an invalid piece type to callers
    assert isinstance(exc_info.value, InvalidPieceTypeError)
    assert dict(board.snapshot().position) == {}


def test_insert_identifier_already_on_board(board: Board) -> None:
    board.try_insert(Position(4, 4), ROOK)
    with pytest.raises(DuplicateIdentifierError) as exc_info:
        board.try_insert(Position(6, 6), Piece.bishop(ROOK.id))

    assert isinstance(exc_info.value, InvalidPieceTypeError)
    assert dict(board.snapshot().position) == {Position(4, 4): ROOK}


# --- RELOCATE ---
def test_relocate(board: Board) -> None:
    board.try_insert(Position(7, 1), ROOK)
    board.try_relocate(Position(7, 1), Position(7, 7), ROOK)
    assert dict(board.snapshot().position) == {Position(7, 7): ROOK}


def test_relocate_onto_occupied_square(board: Board) -> None:
    board.try_insert(Position(7, 1), ROOK)
    board.try_insert(Position(7, 7), BISHOP)
    with pytest.raises(PositionOccupiedError):
        board.try_relocate(Position(7, 1), Position(7, 7), ROOK)


def test_relocate_wrong_piece(board: Board) -> None:
    """The piece is no longer where the caller saw it"""
    board.try_insert(Position(7, 1), BISHOP)
    with pytest.raises(BoardInconsistencyError):
        board.try_relocate(Position(7, 1), Position(7, 7), ROOK)
    with pytest.raises(BoardInconsistencyError):
        board.try_relocate(Position(2, 2), Position(3, 3), BISHOP)


# --- REMOVE ---
def test_remove(board: Board) -> None:
    board.try_insert(Position(7, 8), ROOK)
    assert board.try_remove(ROOK.id) == (Position(7, 8), ROOK)
    assert dict(board.snapshot().position) == {}
    assert dict(board.snapshot().removed) == {ROOK.id: Position(7, 8)}


def test_remove_unknown_identifier(board: Board) -> None:
    with pytest.raises(PieceNotFoundError):
        board.try_remove("does-not-exist")


def test_remove_twice(board: Board) -> None:
    board.try_insert(Position(7, 8), ROOK)
    board.try_remove(ROOK.id)
    with pytest.raises(PieceNotFoundError):
        board.try_remove(ROOK.id)


# --- REPLAY ---
def test_replay_apply_skips_checks(board: Board) -> None:
    """Replay trusts the log: even an occupied square gets overwritten"""
    board.try_insert(Position(1, 1), ROOK)
    board.replay_apply(PieceAdded(BISHOP, Position(1, 1)))
    assert dict(board.snapshot().position) == {Position(1, 1): BISHOP}


def test_replay_sequence(board: Board) -> None:
    board.replay_apply(PieceAdded(ROOK, Position(1, 1)))
    board.replay_apply(PieceAdded(BISHOP, Position(3, 1)))
    board.replay_apply(PieceMoved(ROOK, Position(1, 1), Position(1, 8)))
    board.replay_apply(PieceRemoved(BISHOP, Position(3, 1)))

    assert dict(board.snapshot().position) == {Position(1, 8): ROOK}


def test_replayed_removal_leaves_no_tombstone(board: Board) -> None:
    """Removed registry is not rebuilt from the log: the identifier can be added again afterwards."""
    board.replay_apply(PieceAdded(ROOK, Position(1, 1)))
    board.replay_apply(PieceRemoved(ROOK, Position(1, 1)))

    assert dict(board.snapshot().removed) == {}
    board.try_insert(Position(2, 2), ROOK)
    assert dict(board.snapshot().position) == {Position(2, 2): ROOK}


# --- CONCURRENCY ---
def test_concurrent_inserts_on_same_square(board: Board) -> None:
    """Only one of many concurrent inserts on the same square can win."""
    results: list[bool] = []
    results_lock = threading.Lock()
    start = threading.Barrier(16)

    def _insert(index: int) -> None:
        start.wait()
        try:
            board.try_insert(Position(5, 5), Piece.rook(f"rook-{index}"))
            outcome = True
        except PositionOccupiedError:
            outcome = False
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=_insert, args=(i,)) for i in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert len(board.snapshot().position) == 1
