"""Core domain layer — immutable positions and move generation.

Quick start::

    from chessdfs.core import position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in pos.valid_moves():
        print(move, pos.apply_move(move).in_check())
"""

from chessdfs.core.board import Board
from chessdfs.core.enums import CastlingStatus, Color, GameResult, PieceType
from chessdfs.core.move import Move, format_line
from chessdfs.core.move_generator import (
    UNSUPPORTED_RULES,
    CorruptPositionError,
    MoveGenerator,
)
from chessdfs.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessdfs.core.piece import Piece
from chessdfs.core.position import IllegalMoveError, Position
from chessdfs.core.rules import Rules
from chessdfs.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums
    "CastlingStatus",
    "Color",
    "GameResult",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "format_line",
    # Errors
    "CorruptPositionError",
    "IllegalMoveError",
    "UNSUPPORTED_RULES",
    # Notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
]
