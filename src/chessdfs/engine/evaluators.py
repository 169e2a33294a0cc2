"""Bundled heuristic evaluators (White's perspective, in pawns)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessdfs.core.enums import Color, PieceType
from chessdfs.core.move_generator import MoveGenerator
from chessdfs.core.types import rank_of

if TYPE_CHECKING:
    from chessdfs.core.position import Position

PIECE_VALUES: dict[PieceType, float] = {
    PieceType.PAWN: 1.0,
    PieceType.KNIGHT: 3.0,
    PieceType.BISHOP: 3.0,
    PieceType.ROOK: 5.0,
    PieceType.QUEEN: 9.0,
    PieceType.KING: 0.0,
}

_MOBILITY_WEIGHT = 0.1
_ADVANCE_WEIGHT = 0.01


def material_evaluator(position: Position) -> float:
    """Material balance."""
    board = position.board
    score = 0.0
    for piece_type, value in PIECE_VALUES.items():
        score += value * len(board.pieces(Color.WHITE, piece_type))
        score -= value * len(board.pieces(Color.BLACK, piece_type))
    return score


def _mobility(gen: MoveGenerator, color: Color) -> int:
    return len(gen.captures(color)) + len(gen.quiet_moves(color))


def _pawn_advance(position: Position, color: Color) -> int:
    squares = position.board.pieces(color, PieceType.PAWN)
    if color == Color.WHITE:
        return sum(rank_of(sq) - 1 for sq in squares)
    return sum(6 - rank_of(sq) for sq in squares)


def space_evaluator(position: Position) -> float:
    """Mobility difference plus a small bonus for advanced pawns.

    Mobility counts every generated capture and quiet move for each side,
    regardless of whose turn it is or whether that side is in check.
    """
    gen = MoveGenerator(position)
    mobility = _mobility(gen, Color.WHITE) - _mobility(gen, Color.BLACK)
    advance = _pawn_advance(position, Color.WHITE) - _pawn_advance(position, Color.BLACK)
    return _MOBILITY_WEIGHT * mobility + _ADVANCE_WEIGHT * advance
