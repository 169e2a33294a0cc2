"""Tests for FEN parsing and serialization."""

import pytest

from chessdfs.core.enums import CastlingStatus, Color, PieceType
from chessdfs.core.move import Move
from chessdfs.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessdfs.core.piece import Piece
from chessdfs.core.types import E1, E3, E8, parse_square


class TestParse:
    def test_starting_position(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.side_to_move == Color.WHITE
        assert pos.white_castling == CastlingStatus.BOTH
        assert pos.black_castling == CastlingStatus.BOTH
        assert pos.en_passant is None
        assert (pos.halfmove_clock, pos.fullmove_number) == (0, 1)
        assert pos.board[E1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[E8] == Piece(Color.BLACK, PieceType.KING)
        assert pos.line == ()

    def test_partial_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1")
        assert pos.white_castling == CastlingStatus.KINGSIDE
        assert pos.black_castling == CastlingStatus.QUEENSIDE

    def test_en_passant_square(self) -> None:
        pos = position_from_fen(
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )
        assert pos.en_passant == E3

    def test_fullmove_zero_accepted(self) -> None:
        pos = position_from_fen("8/8/8/qn6/kn6/1n6/1KP5/8 w - - 0 0")
        assert pos.fullmove_number == 0


class TestRoundTrip:
    @pytest.mark.parametrize(
        "fen",
        [
            STARTING_FEN,
            "r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1",
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
            "rn2k2r/1p3ppp/2p5/1p2p3/2P1n1bP/P5P1/4p2R/b1B1K1q1 w kq - 36 1",
            "8/8/8/qn6/kn6/1n6/1KP5/8 w - - 0 0",
        ],
    )
    def test_serialize_parsed(self, fen: str) -> None:
        assert position_to_fen(position_from_fen(fen)) == fen

    def test_castling_normalised(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w qkQK - 0 1")
        assert position_to_fen(pos).split()[2] == "KQkq"

    def test_played_line_round_trips(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        for text in ("e2e4", "d7d5", "e4d5", "d8d5", "b1c3"):
            pos = pos.apply_move(Move.from_uci(text))
        again = position_from_fen(position_to_fen(pos))
        assert again == pos
        assert again.halfmove_clock == pos.halfmove_clock
        assert again.fullmove_number == pos.fullmove_number


class TestInvalid:
    @pytest.mark.parametrize(
        "fen",
        [
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",
            "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/ppppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/pppppppp/7/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkX - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KK - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq z9 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - x 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 -1",
            "8/8/8/8/8/8/8/4K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/8 b - - 0 1",
            "4k3/8/8/8/8/8/8/3KK3 w - - 0 1",
        ],
    )
    def test_rejected(self, fen: str) -> None:
        with pytest.raises(ValueError):
            position_from_fen(fen)


class TestSquares:
    def test_parse_square(self) -> None:
        assert parse_square("e1") == E1
        assert parse_square("E8") == E8

    def test_bad_square(self) -> None:
        with pytest.raises(ValueError):
            parse_square("i9")

    def test_move_text(self) -> None:
        assert str(Move.from_uci("e7e8q")) == "e7e8q"
        with pytest.raises(ValueError):
            Move.from_uci("e7e8k")
