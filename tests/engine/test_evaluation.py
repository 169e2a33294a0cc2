"""Tests for evaluator aggregation, mate scoring and one-ply lookahead."""

import pytest

from chessdfs.core.move import Move
from chessdfs.core.notation import STARTING_FEN, position_from_fen
from chessdfs.engine.evaluation import DRAW_SCORE, MATE_SCORE, Evaluators
from chessdfs.engine.evaluators import material_evaluator, space_evaluator

WHITE_MATED = [
    "rn2k2r/1p3ppp/2p5/1p2p3/2P1n1bP/P5P1/4p2R/b1B1K1q1 w kq - 36 1",
    "1nb1k1nr/1p3ppp/2p5/3pp3/KpP1P1PP/q4P2/P1P5/5B1R w k - 36 1",
    "r3kb1r/pp3ppp/2n2n2/3p4/Pq3pbP/1P2pK2/1BPPP1P1/RN1Q1B2 w kq - 22 12",
]
BLACK_MATED = "r4b2/p3pB2/3N4/6Q1/6kp/P1N1B3/1PP2PPP/R3K2R b KQ - 45 1"


class TestEval:
    @pytest.mark.parametrize("fen", WHITE_MATED + [BLACK_MATED])
    def test_mated_side_scores_mate(self, fen: str) -> None:
        pos = position_from_fen(fen)
        assert Evaluators().eval(pos) == MATE_SCORE
        assert Evaluators([material_evaluator]).mover_score(pos) == MATE_SCORE

    def test_draw_scores_zero(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4KN2 b - - 0 1")
        evaluators = Evaluators([material_evaluator])
        assert evaluators.eval(pos) == DRAW_SCORE
        assert evaluators.mover_score(pos) == DRAW_SCORE

    def test_heuristic_from_side_to_move(self) -> None:
        white = position_from_fen("4k3/8/8/8/8/8/4P3/3QK3 w - - 0 1")
        black = position_from_fen("4k3/8/8/8/8/8/4P3/3QK3 b - - 0 1")
        evaluators = Evaluators([material_evaluator])
        assert evaluators.heuristic(white) == 10.0
        assert evaluators.heuristic(black) == -10.0
        assert evaluators.mover_score(black) == 10.0

    def test_evaluators_are_summed(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
        evaluators = Evaluators([material_evaluator])
        evaluators.add(lambda _pos: 0.5)
        assert len(evaluators) == 2
        assert evaluators.heuristic(pos) == 1.5

    def test_no_evaluators_scores_zero(self) -> None:
        assert Evaluators().eval(position_from_fen(STARTING_FEN)) == 0.0


class TestBestMove:
    def test_white_finds_mate(self) -> None:
        pos = position_from_fen("8/8/8/qn6/kn6/1n6/1KP5/8 w - - 0 0")
        found = Evaluators().best_move(pos)
        assert found is not None
        successor, score = found
        assert score == MATE_SCORE
        assert successor.line == (Move.from_uci("c2b3"),)
        assert successor.is_checkmate()

    def test_white_finds_mate_among_heavy_pieces(self) -> None:
        pos = position_from_fen("8/8/8/qn6/kn6/1n6/1KP5/1QQQQQQR w - - 0 0")
        found = Evaluators([material_evaluator]).best_move(pos)
        assert found is not None
        assert found[1] == MATE_SCORE
        assert found[0].is_checkmate()

    def test_black_finds_mate(self) -> None:
        pos = position_from_fen("8/1kp5/1N6/KN6/QN6/8/8/8 b - - 0 0")
        found = Evaluators().best_move(pos)
        assert found is not None
        assert found[0].line == (Move.from_uci("c7b6"),)
        assert found[1] == MATE_SCORE

    def test_material_prefers_capture(self) -> None:
        pos = position_from_fen("4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1")
        found = Evaluators([material_evaluator]).best_move(pos)
        assert found is not None
        assert found[0].line == (Move.from_uci("d1d5"),)

    def test_space_opens_with_king_pawn(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        found = Evaluators([space_evaluator]).best_move(pos)
        assert found is not None
        assert found[0].line == (Move.from_uci("e2e4"),)

    def test_exposed_king_is_captured(self) -> None:
        pos = position_from_fen("4r2k/8/8/8/8/8/4B3/4K3 w - - 0 1")
        pos = pos.apply_move(Move.from_uci("e2d1"))
        found = Evaluators([material_evaluator]).best_move(pos)
        assert found is not None
        assert found[0].line[-1] == Move.from_uci("e8e1")
        assert found[1] == MATE_SCORE

    def test_no_moves_returns_none(self) -> None:
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert Evaluators().best_move(pos) is None


class TestBestLine:
    def test_length_and_order(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        line = Evaluators([space_evaluator]).best_line(pos, 2)
        assert len(line) == 3
        assert line[0] is pos
        assert line[1].line == (Move.from_uci("e2e4"),)
        assert line[2].line[:1] == (Move.from_uci("e2e4"),)

    def test_stops_at_mate(self) -> None:
        pos = position_from_fen("8/8/8/qn6/kn6/1n6/1KP5/8 w - - 0 0")
        line = Evaluators().best_line(pos, 5)
        assert len(line) == 2
        assert line[-1].is_checkmate()
