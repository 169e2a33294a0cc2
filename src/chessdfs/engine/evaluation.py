"""Evaluator contract and the scoring rules shared by search components.

An evaluator is any callable mapping a :class:`Position` to a float from
White's point of view (positive favours White). :class:`Evaluators` sums a
set of them and converts the total to the perspective the search needs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Final

from chessdfs.core.enums import Color

if TYPE_CHECKING:
    from chessdfs.core.position import Position

Evaluator = Callable[["Position"], float]

MATE_SCORE: Final = 58008.0
DRAW_SCORE: Final = 0.0


class Evaluators:
    """An ordered collection of evaluators scored as their sum."""

    __slots__ = ("_evaluators",)

    def __init__(self, evaluators: Iterable[Evaluator] = ()) -> None:
        self._evaluators: list[Evaluator] = list(evaluators)

    def add(self, evaluator: Evaluator) -> None:
        self._evaluators.append(evaluator)

    def __iter__(self) -> Iterator[Evaluator]:
        return iter(self._evaluators)

    def __len__(self) -> int:
        return len(self._evaluators)

    # ── Scoring ──────────────────────────────────────────────────────────

    def heuristic(self, position: Position) -> float:
        """Summed evaluator output from the side to move's perspective."""
        score = 0.0
        for evaluator in self._evaluators:
            score += evaluator(position)
        if position.side_to_move == Color.BLACK:
            return -score
        return score

    def eval(self, position: Position) -> float:
        """:data:`MATE_SCORE` for a mated side to move, 0 for a draw, else heuristic."""
        if position.is_checkmate():
            return MATE_SCORE
        if position.is_draw():
            return DRAW_SCORE
        return self.heuristic(position)

    def mover_score(self, position: Position) -> float:
        """Score for the side that just moved into *position*.

        Delivering mate is worth :data:`MATE_SCORE`; otherwise the side to
        move's heuristic is negated.
        """
        if position.is_checkmate():
            return MATE_SCORE
        if position.is_draw():
            return DRAW_SCORE
        return -self.heuristic(position)

    # ── One-ply lookahead ────────────────────────────────────────────────

    def best_move(self, position: Position) -> tuple[Position, float] | None:
        """Best successor by :meth:`mover_score`; first maximum wins.

        Returns ``None`` when the side to move has no moves.
        """
        best: Position | None = None
        best_score = float("-inf")
        for successor in position.next_positions():
            score = self.mover_score(successor)
            if score > best_score:
                best = successor
                best_score = score
        if best is None:
            return None
        return best, best_score

    def best_line(self, position: Position, depth: int) -> list[Position]:
        """Greedy line of at most *depth* plies, starting with *position*.

        Extension stops early once a mate or draw is reached.
        """
        line = [position]
        current = position
        for _ in range(depth):
            found = self.best_move(current)
            if found is None:
                break
            current = found[0]
            line.append(current)
            if current.is_checkmate() or current.is_draw():
                break
        return line
