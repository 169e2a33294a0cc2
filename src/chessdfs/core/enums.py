"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class CastlingStatus(IntFlag):
    """Castling rights still available to one side."""

    NONE = 0
    KINGSIDE = 1
    QUEENSIDE = 2
    BOTH = KINGSIDE | QUEENSIDE

    def fen(self, color: Color) -> str:
        """FEN fragment for this side, e.g. ``"KQ"`` or ``"q"`` (empty if none)."""
        text = ""
        if self & CastlingStatus.KINGSIDE:
            text += "K"
        if self & CastlingStatus.QUEENSIDE:
            text += "Q"
        return text if color == Color.WHITE else text.lower()


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3
