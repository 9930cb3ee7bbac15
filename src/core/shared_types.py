"""
Type definitions used across layers
"""

from enum import StrEnum


# --- NOTE The values double as the names used on the wire (event payloads and API requests)
class PieceType(StrEnum):
    ROOK = "Rook"
    BISHOP = "Bishop"


AVAILABLE_PIECE_TYPES: tuple[str, ...] = tuple(piece_type.value for piece_type in PieceType)
