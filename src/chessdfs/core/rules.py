"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessdfs.core.enums import Color, GameResult, PieceType

if TYPE_CHECKING:
    from chessdfs.core.position import Position

_MINORS = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Draws are stalemate and insufficient material only. The halfmove
    # clock counts every ply, so clock-based draws are not applied.

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return position.is_checkmate()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return position.is_stalemate()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, or K + single minor piece vs K."""
        board = position.board
        total = board.count()

        if total == 2:
            return True

        if total == 3:
            return any(
                board.has_piece(color, piece_type)
                for color in Color
                for piece_type in _MINORS
            )

        return False

    @staticmethod
    def is_draw(position: Position) -> bool:
        return position.is_draw()

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Determine the current game result."""
        if position.is_checkmate():
            return (
                GameResult.BLACK_WINS
                if position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if position.is_draw():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS
