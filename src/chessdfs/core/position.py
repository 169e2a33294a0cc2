"""Position — immutable game state (board + metadata + line from the root)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chessdfs.core.board import Board
from chessdfs.core.enums import CastlingStatus, Color, PieceType
from chessdfs.core.move import Move
from chessdfs.core.move_generator import MoveGenerator
from chessdfs.core.piece import Piece
from chessdfs.core.rules import Rules
from chessdfs.core.types import (
    A1,
    A8,
    C1,
    C8,
    D1,
    D8,
    E1,
    E8,
    F1,
    F8,
    G1,
    G8,
    H1,
    H8,
    Square,
)
from chessdfs.core.zobrist import (
    castling_key,
    compute_key,
    en_passant_key,
    piece_key,
    side_to_move_key,
)

Fingerprint = tuple[Any, ...]

_HOME_KING: tuple[Square, Square] = (E1, E8)

# (king destination) -> (right required, rook origin, rook destination)
_CASTLES: dict[Square, tuple[CastlingStatus, Square, Square]] = {
    G1: (CastlingStatus.KINGSIDE, H1, F1),
    C1: (CastlingStatus.QUEENSIDE, A1, D1),
    G8: (CastlingStatus.KINGSIDE, H8, F8),
    C8: (CastlingStatus.QUEENSIDE, A8, D8),
}

_ROOK_CORNERS: dict[Square, tuple[Color, CastlingStatus]] = {
    A1: (Color.WHITE, CastlingStatus.QUEENSIDE),
    H1: (Color.WHITE, CastlingStatus.KINGSIDE),
    A8: (Color.BLACK, CastlingStatus.QUEENSIDE),
    H8: (Color.BLACK, CastlingStatus.KINGSIDE),
}


class IllegalMoveError(ValueError):
    """Raised when a move cannot be applied to a position."""


@dataclass(frozen=True, slots=True, eq=False)
class Position:
    """Full chess position: board, side to move, castling, en passant, clocks.

    Instances are never mutated. :meth:`apply_move` returns a successor
    whose :attr:`line` extends this one's by the applied move, so a position
    reached during search also records how it was reached.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    white_castling: CastlingStatus = CastlingStatus.BOTH
    black_castling: CastlingStatus = CastlingStatus.BOTH
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    line: tuple[Move, ...] = ()
    _key: int = field(default=0, repr=False)
    _valid_moves: tuple[Move, ...] | None = field(default=None, init=False, repr=False)
    _checkers: tuple[Square, ...] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self._key:
            key = compute_key(
                self.board,
                self.side_to_move,
                self.white_castling,
                self.black_castling,
                self.en_passant,
            )
            object.__setattr__(self, "_key", key)

    # ── Identity ─────────────────────────────────────────────────────────

    @property
    def fingerprint(self) -> Fingerprint:
        """Key identifying the position regardless of how it was reached."""
        return (
            self.board.squares,
            self.side_to_move,
            self.white_castling,
            self.black_castling,
            self.en_passant,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._key == other._key and self.fingerprint == other.fingerprint

    def __hash__(self) -> int:
        return self._key

    def castling(self, color: Color) -> CastlingStatus:
        return self.white_castling if color == Color.WHITE else self.black_castling

    # ── Move generation ──────────────────────────────────────────────────

    def has_king(self) -> bool:
        """False once the side to move's king has been captured."""
        return self.board.has_piece(self.side_to_move, PieceType.KING)

    def valid_moves(self) -> tuple[Move, ...]:
        """Moves available to the side to move (computed once per position).

        A side whose king has been captured has no moves.
        """
        moves = self._valid_moves
        if moves is None:
            if self.has_king():
                moves = tuple(MoveGenerator(self).valid_moves(list(self.checkers())))
            else:
                moves = ()
            object.__setattr__(self, "_valid_moves", moves)
        return moves

    def next_positions(self) -> list[Position]:
        """Successor positions, one per valid move."""
        return [self.apply_move(move) for move in self.valid_moves()]

    def checkers(self) -> tuple[Square, ...]:
        """Squares of opponent pieces giving check to the side to move."""
        checkers = self._checkers
        if checkers is None:
            checkers = ()
            if self.has_king():
                checkers = tuple(MoveGenerator(self).checkers(self.side_to_move))
            object.__setattr__(self, "_checkers", checkers)
        return checkers

    def in_check(self) -> bool:
        return bool(self.checkers())

    def is_checkmate(self) -> bool:
        """Mated, or the king was already captured (the game is lost either way)."""
        if not self.has_king():
            return True
        return self.in_check() and not self.valid_moves()

    def is_stalemate(self) -> bool:
        return self.has_king() and not self.in_check() and not self.valid_moves()

    def is_draw(self) -> bool:
        """Stalemate or a material configuration where no mate is possible."""
        if not self.has_king():
            return False
        return Rules.is_insufficient_material(self) or self.is_stalemate()

    # ── Transitions ──────────────────────────────────────────────────────

    def apply_move(self, move: Move) -> Position:
        """Return the position after *move*; this position is left untouched."""
        color = self.side_to_move
        piece = self.board[move.from_sq]
        if piece is None:
            raise IllegalMoveError(f"No piece to move for {move}")
        if piece.color != color:
            raise IllegalMoveError(f"{move} moves a {piece.color} piece on {color}'s turn")

        placed = piece
        if move.promotion is not None:
            placed = Piece(color, move.promotion)

        board, captured = self.board.move_piece(move.from_sq, move.to_sq, placed)
        key = self._key ^ piece_key(piece, move.from_sq) ^ piece_key(placed, move.to_sq)
        if captured is not None:
            key ^= piece_key(captured, move.to_sq)

        white_castling = self.white_castling
        black_castling = self.black_castling

        if piece.piece_type == PieceType.KING:
            if move.from_sq == _HOME_KING[int(color)] and move.to_sq in _CASTLES:
                right, rook_from, rook_to = _CASTLES[move.to_sq]
                if not self.castling(color) & right:
                    raise IllegalMoveError(f"Castling {move} without the right to do so")
                rook = board[rook_from]
                if rook is None or rook != Piece(color, PieceType.ROOK):
                    raise IllegalMoveError(f"Castling {move} without a rook on its corner")
                board, _ = board.move_piece(rook_from, rook_to)
                key ^= piece_key(rook, rook_from) ^ piece_key(rook, rook_to)
            if color == Color.WHITE:
                white_castling = CastlingStatus.NONE
            else:
                black_castling = CastlingStatus.NONE

        for sq in (move.from_sq, move.to_sq):
            corner = _ROOK_CORNERS.get(sq)
            if corner is None:
                continue
            corner_color, right = corner
            if corner_color == Color.WHITE:
                white_castling &= ~right
            else:
                black_castling &= ~right

        key ^= castling_key(Color.WHITE, self.white_castling) ^ castling_key(
            Color.WHITE, white_castling
        )
        key ^= castling_key(Color.BLACK, self.black_castling) ^ castling_key(
            Color.BLACK, black_castling
        )
        if self.en_passant is not None:
            key ^= en_passant_key(self.en_passant)
        key ^= side_to_move_key()

        fullmove = self.fullmove_number
        if color == Color.BLACK:
            fullmove += 1

        return Position(
            board=board,
            side_to_move=color.opposite,
            white_castling=white_castling,
            black_castling=black_castling,
            en_passant=None,
            halfmove_clock=self.halfmove_clock + 1,
            fullmove_number=fullmove,
            line=self.line + (move,),
            _key=key,
        )

    def with_line(self, line: tuple[Move, ...] = ()) -> Position:
        """Same position with its move history replaced, e.g. to root a search."""
        return Position(
            board=self.board,
            side_to_move=self.side_to_move,
            white_castling=self.white_castling,
            black_castling=self.black_castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            line=line,
            _key=self._key,
        )
