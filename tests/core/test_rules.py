"""Tests for checkmate and draw detection."""

import pytest

from chessdfs.core.enums import GameResult
from chessdfs.core.move import Move
from chessdfs.core.notation import STARTING_FEN, position_from_fen
from chessdfs.core.rules import Rules

WHITE_MATED = [
    "rn2k2r/1p3ppp/2p5/1p2p3/2P1n1bP/P5P1/4p2R/b1B1K1q1 w kq - 36 1",
    "1nb1k1nr/1p3ppp/2p5/3pp3/KpP1P1PP/q4P2/P1P5/5B1R w k - 36 1",
    "r3kb1r/pp3ppp/2n2n2/3p4/Pq3pbP/1P2pK2/1BPPP1P1/RN1Q1B2 w kq - 22 12",
]
BLACK_MATED = "r4b2/p3pB2/3N4/6Q1/6kp/P1N1B3/1PP2PPP/R3K2R b KQ - 45 1"


class TestCheckmate:
    @pytest.mark.parametrize("fen", WHITE_MATED)
    def test_white_is_mated(self, fen: str) -> None:
        pos = position_from_fen(fen)
        assert pos.in_check()
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.BLACK_WINS

    def test_black_is_mated(self) -> None:
        pos = position_from_fen(BLACK_MATED)
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.WHITE_WINS

    def test_start_in_progress(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert not Rules.is_checkmate(pos)
        assert not Rules.is_stalemate(pos)
        assert Rules.game_result(pos) == GameResult.IN_PROGRESS


class TestInsufficientMaterial:
    @pytest.mark.parametrize(
        "fen",
        [
            "4k3/8/8/8/8/8/8/4K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/4KN2 w - - 0 1",
            "4k3/8/8/8/8/8/8/2b1K3 b - - 0 1",
        ],
    )
    def test_draw(self, fen: str) -> None:
        pos = position_from_fen(fen)
        assert Rules.is_insufficient_material(pos)
        assert Rules.is_draw(pos)
        assert Rules.game_result(pos) == GameResult.DRAW

    @pytest.mark.parametrize(
        "fen",
        [
            "4k3/8/8/8/8/8/4P3/4K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/3RK3 w - - 0 1",
            "4k3/8/8/8/8/8/8/2NNK3 w - - 0 1",
        ],
    )
    def test_not_draw(self, fen: str) -> None:
        pos = position_from_fen(fen)
        assert not Rules.is_insufficient_material(pos)
        assert not Rules.is_draw(pos)


class TestCapturedKing:
    def test_side_without_king_has_lost(self) -> None:
        pos = position_from_fen("4r2k/8/8/8/8/8/4B3/4K3 w - - 0 1")
        for text in ("e2d1", "e8e1"):
            pos = pos.apply_move(Move.from_uci(text))
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.BLACK_WINS
