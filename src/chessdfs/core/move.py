"""Move value object (origin, destination, optional promotion)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from chessdfs.core.enums import PieceType
from chessdfs.core.types import Square, parse_square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    The promotion is stored as a piece kind; the colour is implied by the
    side making the move.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base

    @property
    def uci(self) -> str:
        """Long-algebraic text, e.g. ``e2e4`` or ``e7e8q``."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse ``<origin><destination>[promotion]`` text."""
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid move text: {text!r}")
        promotion: PieceType | None = None
        if len(text) == 5:
            try:
                promotion = _PROMO_TYPES[text[4].lower()]
            except KeyError:
                raise ValueError(f"Invalid promotion piece in {text!r}") from None
        return cls(parse_square(text[0:2]), parse_square(text[2:4]), promotion)


def format_line(moves: Iterable[Move]) -> str:
    """Space-separated move text for a line, e.g. ``"e2e4 e7e5"``."""
    return " ".join(str(m) for m in moves)
