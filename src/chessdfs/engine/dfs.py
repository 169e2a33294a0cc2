"""Depth-first forced-line search driven by a single cooperative loop.

The loop owns a double-ended frontier of positions, the set of fingerprints
already queued or expanded, and an :class:`EvalTree`. Each iteration polls,
in priority order, for cancellation (including the time budget), for the
periodic report timer and for queued work, and acts on the first one that
is ready.

A successor is expanded only when its parent had a single reply, when it is
in check, or when it leaves at most one reply. Forcing sequences therefore
reach the selective depth while quiet branches stop after one ply.

Progress is written to an output sink as text lines::

    info ns <nodes since last report> nodes <total> depth <depth> queue <size>
    info depth <pv length> score cp <centipawns> pv <moves>
    bestmove <move>
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Iterable
from time import perf_counter

from chessdfs.core.move import format_line
from chessdfs.core.move_generator import UNSUPPORTED_RULES
from chessdfs.core.position import Fingerprint, Position
from chessdfs.engine.eval_tree import BestLine, EvalTree
from chessdfs.engine.evaluation import Evaluator, Evaluators
from chessdfs.engine.search import (
    CancelCheck,
    IEngine,
    OutputSink,
    SearchLimits,
    SearchResult,
)

_LOGGER = logging.getLogger(__name__)

NULL_MOVE_TEXT = "0000"


def _never_cancelled() -> bool:
    return False


def _discard(_line: str) -> None:
    return None


def should_check_position(position: Position) -> bool:
    """Whether a successor is forcing enough to expand without a forced parent."""
    return position.in_check() or len(position.valid_moves()) <= 1


class _SearchRun:
    """State and steps of one search invocation."""

    __slots__ = (
        "_evaluators",
        "_limits",
        "_output",
        "_is_cancelled",
        "_deadline",
        "_next_report",
        "tree",
        "queue",
        "seen",
        "depth",
        "nodes",
        "total_nodes",
    )

    def __init__(
        self,
        evaluators: Evaluators,
        limits: SearchLimits,
        output: OutputSink,
        is_cancelled: CancelCheck,
    ) -> None:
        self._evaluators = evaluators
        self._limits = limits
        self._output = output
        self._is_cancelled = is_cancelled
        now = perf_counter()
        self._deadline: float | None = None
        if limits.time_limit_ms is not None:
            self._deadline = now + max(limits.time_limit_ms, 1) / 1000.0
        self._next_report = now + limits.report_interval_s
        self.tree = EvalTree()
        self.queue: deque[Position] = deque()
        self.seen: set[Fingerprint] = set()
        self.depth = limits.sel_depth + 1
        self.nodes = 0
        self.total_nodes = 0

    # ── Seeding ──────────────────────────────────────────────────────────

    def initial_best_line(self, root: Position) -> list[Position]:
        """Greedy one-ply-lookahead line from *root*, each step recorded in the tree."""
        evaluators = self._evaluators
        line = evaluators.best_line(root, self._limits.sel_depth)[1:]
        for position in line:
            self.tree.insert(position.line, evaluators.mover_score(position))
        return line

    def seed(self, root: Position) -> None:
        first_line = self.initial_best_line(root)
        for position in first_line:
            self.seen.add(position.fingerprint)
            self.queue.appendleft(position)

        first_move = first_line[0].line[0] if first_line else None
        for child in root.next_positions():
            if child.line[0] == first_move:
                continue
            self._enqueue(child, front=False)

    def _enqueue(self, position: Position, *, front: bool) -> None:
        fingerprint = position.fingerprint
        if fingerprint in self.seen:
            return
        self.seen.add(fingerprint)
        if front:
            self.queue.appendleft(position)
        else:
            self.queue.append(position)

    # ── Loop events ──────────────────────────────────────────────────────

    def cancelled(self, now: float) -> bool:
        if self._is_cancelled():
            return True
        return self._deadline is not None and now >= self._deadline

    def report_due(self, now: float) -> bool:
        return now >= self._next_report

    def report(self, now: float) -> None:
        self.total_nodes += self.nodes
        self._output(
            f"info ns {self.nodes} nodes {self.total_nodes} "
            f"depth {self.depth} queue {len(self.queue)}"
        )
        self.nodes = 0
        self._next_report = now + self._limits.report_interval_s
        self._emit_pv(self.tree.get_best_line())

    def expand_next(self) -> None:
        """Pop the front position, score and record it, queue its forcing successors."""
        self.nodes += 1
        game = self.queue.popleft()
        ply = len(game.line)

        if ply < self.depth:
            self.tree.update_best_line()
        self.depth = ply
        self.seen.add(game.fingerprint)

        self.tree.insert(game.line, self._evaluators.mover_score(game))

        if ply < self._limits.sel_depth:
            successors = game.next_positions()
            forced = len(successors) <= 1
            for successor in successors:
                if not forced and not should_check_position(successor):
                    continue
                self._enqueue(successor, front=True)

    def node_budget_spent(self) -> bool:
        max_nodes = self._limits.max_nodes
        return bool(max_nodes) and self.total_nodes + self.nodes >= max_nodes

    # ── Terminal output ──────────────────────────────────────────────────

    def _emit_pv(self, best: BestLine) -> None:
        cp = round(best.score * 100)
        self._output(
            f"info depth {len(best.moves)} score cp {cp} pv {format_line(best.moves)}".rstrip()
        )

    def _emit_totals(self) -> None:
        self._output(
            f"info ns {self.nodes} nodes {self.total_nodes + self.nodes} depth {self.depth}"
        )

    def finish(self, *, pv: bool, totals: bool) -> SearchResult:
        """Back up the tree once more and emit the single ``bestmove`` line."""
        self.tree.update_best_line()
        best = self.tree.get_best_line()
        if pv:
            self._emit_pv(best)
        if totals:
            self._emit_totals()
        move = best.move
        self._output(f"bestmove {move if move is not None else NULL_MOVE_TEXT}")
        return SearchResult(
            best_move=move,
            score_cp=round(best.score * 100),
            depth=len(best.moves),
            nodes=self.total_nodes + self.nodes,
            pv=best.moves,
        )


class DFSEngine(IEngine):
    """Forced-line depth-first searcher over immutable positions."""

    __slots__ = ("_evaluators", "_stop_event", "_thread", "_result", "eval_tree")

    def __init__(self, evaluators: Iterable[Evaluator] = ()) -> None:
        self._evaluators = Evaluators(evaluators)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._result: SearchResult | None = None
        self.eval_tree: EvalTree | None = None

    @property
    def evaluators(self) -> Evaluators:
        return self._evaluators

    def add_evaluator(self, evaluator: Evaluator) -> None:
        self._evaluators.add(evaluator)

    # ── Synchronous search ───────────────────────────────────────────────

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
        output: OutputSink | None = None,
    ) -> SearchResult:
        if limits.sel_depth <= 0:
            raise ValueError("Selective depth must be >= 1")
        if limits.report_interval_s <= 0:
            raise ValueError("Report interval must be positive")

        root = position.with_line(())
        self._warn_unsupported(root)
        run = _SearchRun(
            self._evaluators,
            limits,
            output or _discard,
            is_cancelled or _never_cancelled,
        )
        self.eval_tree = run.tree
        _LOGGER.debug(
            "Search started: sel_depth=%d max_nodes=%s time_limit_ms=%s",
            limits.sel_depth,
            limits.max_nodes,
            limits.time_limit_ms,
        )
        run.seed(root)

        while True:
            now = perf_counter()
            if run.cancelled(now):
                result = run.finish(pv=False, totals=False)
                reason = "cancelled"
                break
            if run.report_due(now):
                run.report(now)
                continue
            if not run.queue:
                result = run.finish(pv=True, totals=True)
                reason = "exhausted"
                break
            run.expand_next()
            if run.node_budget_spent():
                result = run.finish(pv=False, totals=True)
                reason = "node budget"
                break

        _LOGGER.debug(
            "Search finished (%s): %d nodes, best %s",
            reason,
            result.nodes,
            result.best_move,
        )
        return result

    @staticmethod
    def _warn_unsupported(root: Position) -> None:
        if root.white_castling or root.black_castling or root.en_passant is not None:
            _LOGGER.warning(
                "Root position has castling or en passant rights; "
                "moves using them are not generated (unsupported: %s)",
                ", ".join(sorted(UNSUPPORTED_RULES)),
            )

    # ── Background search ────────────────────────────────────────────────

    def start(
        self,
        position: Position,
        limits: SearchLimits,
        output: OutputSink,
    ) -> None:
        """Run :meth:`search` on a background thread until done or stopped."""
        if self.is_running:
            raise RuntimeError("A search is already running")
        self._stop_event = threading.Event()
        self._result = None

        def _run() -> None:
            self._result = self.search(
                position,
                limits,
                is_cancelled=self._stop_event.is_set,
                output=output,
            )

        self._thread = threading.Thread(target=_run, name="dfs-search", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Request cancellation; the loop notices it on its next iteration."""
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: float | None = None) -> SearchResult | None:
        """Join the background search; ``None`` if it is still running."""
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                return None
        return self._result
