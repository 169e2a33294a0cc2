"""Board - immutable piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from chessdfs.core.enums import Color, PieceType
from chessdfs.core.piece import Piece
from chessdfs.core.types import Square, make_square

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2
_EMPTY: frozenset[Square] = frozenset()


def _index_slot(color: Color, piece_type: PieceType) -> int:
    return int(color) * _PIECE_TYPE_COUNT + int(piece_type) - 1


class Board:
    """Immutable 64-square board with a (color, piece kind) location index.

    The index is derived from the squares on construction and updated
    incrementally by :meth:`move_piece`; both always describe the same
    placement.
    """

    __slots__ = ("_squares", "_index")

    def __init__(
        self,
        squares: Sequence[Piece | None] | None = None,
        _index: tuple[frozenset[Square], ...] | None = None,
    ) -> None:
        if squares is None:
            squares = (None,) * 64
        if len(squares) != 64:
            raise ValueError(f"Board needs 64 squares, got {len(squares)}")
        self._squares: tuple[Piece | None, ...] = tuple(squares)
        if _index is None:
            _index = self._build_index(self._squares)
        self._index = _index

    @staticmethod
    def _build_index(
        squares: tuple[Piece | None, ...],
    ) -> tuple[frozenset[Square], ...]:
        slots: list[set[Square]] = [set() for _ in range(_COLOR_COUNT * _PIECE_TYPE_COUNT)]
        for sq, piece in enumerate(squares):
            if piece is not None:
                slots[_index_slot(piece.color, piece.piece_type)].add(sq)
        return tuple(frozenset(s) for s in slots)

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __iter__(self) -> Iterator[Piece | None]:
        return iter(self._squares)

    @property
    def squares(self) -> tuple[Piece | None, ...]:
        return self._squares

    def is_opponent(self, sq: Square, color: Color) -> bool:
        """Whether *sq* holds a piece of the side opposing *color*."""
        piece = self._squares[sq]
        return piece is not None and piece.color != color

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> frozenset[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return self._index[_index_slot(color, piece_type)]

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return bool(self.pieces(color, piece_type))

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*, in ascending order."""
        start = int(color) * _PIECE_TYPE_COUNT
        occupied: set[Square] = set()
        for squares in self._index[start : start + _PIECE_TYPE_COUNT]:
            occupied |= squares
        return sorted(occupied)

    def count(self) -> int:
        """Total number of pieces on the board."""
        return sum(len(s) for s in self._index)

    def king_square(self, color: Color) -> Square:
        """Return the king square for *color*."""
        kings = self.pieces(color, PieceType.KING)
        if not kings:
            raise ValueError(f"No {color.name} king on board")
        return min(kings)

    # -- Transitions --------------------------------------------------------

    def move_piece(
        self,
        from_sq: Square,
        to_sq: Square,
        placed: Piece | None = None,
    ) -> tuple[Board, Piece | None]:
        """Return a new board with the piece on *from_sq* moved to *to_sq*.

        *placed* replaces the moving piece at the destination (promotion).
        Also returns the piece that stood on *to_sq*, if any.
        """
        moving = self._squares[from_sq]
        if moving is None:
            raise ValueError(f"No piece on square {from_sq}")
        if placed is None:
            placed = moving
        captured = self._squares[to_sq]

        squares = list(self._squares)
        squares[from_sq] = None
        squares[to_sq] = placed

        index = list(self._index)
        slot = _index_slot(moving.color, moving.piece_type)
        index[slot] = index[slot] - {from_sq}
        if captured is not None:
            slot = _index_slot(captured.color, captured.piece_type)
            index[slot] = index[slot] - {to_sq}
        slot = _index_slot(placed.color, placed.piece_type)
        index[slot] = index[slot] | {to_sq}

        return Board(squares, tuple(index)), captured

    def without(self, sq: Square) -> Board:
        """Return a new board with *sq* emptied."""
        piece = self._squares[sq]
        if piece is None:
            return self
        squares = list(self._squares)
        squares[sq] = None
        index = list(self._index)
        slot = _index_slot(piece.color, piece.piece_type)
        index[slot] = index[slot] - {sq}
        return Board(squares, tuple(index))

    # -- Factory ------------------------------------------------------------

    @classmethod
    def from_pieces(cls, placement: Iterable[tuple[Square, Piece]]) -> Board:
        """Build a board from ``(square, piece)`` pairs."""
        squares: list[Piece | None] = [None] * 64
        for sq, piece in placement:
            squares[sq] = piece
        return cls(squares)

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        back_rank = [
            PieceType.ROOK,
            PieceType.KNIGHT,
            PieceType.BISHOP,
            PieceType.QUEEN,
            PieceType.KING,
            PieceType.BISHOP,
            PieceType.KNIGHT,
            PieceType.ROOK,
        ]
        placement: list[tuple[Square, Piece]] = []
        for f in range(8):
            placement.append((make_square(f, 1), Piece(Color.WHITE, PieceType.PAWN)))
            placement.append((make_square(f, 6), Piece(Color.BLACK, PieceType.PAWN)))
        for f, pt in enumerate(back_rank):
            placement.append((make_square(f, 0), Piece(Color.WHITE, pt)))
            placement.append((make_square(f, 7), Piece(Color.BLACK, pt)))
        return cls.from_pieces(placement)

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __hash__(self) -> int:
        return hash(self._squares)

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
