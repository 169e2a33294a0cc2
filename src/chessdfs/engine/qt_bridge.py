"""Qt bridge to run the forced-line search in a worker thread."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessdfs.core.move_generator import CorruptPositionError
from chessdfs.core.position import Position
from chessdfs.engine.dfs import DFSEngine
from chessdfs.engine.evaluation import Evaluator
from chessdfs.engine.evaluators import material_evaluator
from chessdfs.engine.search import SearchLimits


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand.

    Every output line of the search is re-emitted through ``info_line``
    as it is produced, including the terminal ``bestmove`` line.
    """

    info_line = pyqtSignal(int, str)
    best_move_ready = pyqtSignal(int, object, int, int)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int, int, int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine", "_limits")

    def __init__(
        self,
        *,
        evaluators: Iterable[Evaluator] = (material_evaluator,),
        sel_depth: int = 4,
        max_nodes: int | None = None,
        time_limit_ms: int | None = None,
    ) -> None:
        super().__init__()
        self._engine = DFSEngine(evaluators)
        self._limits = SearchLimits(
            sel_depth=sel_depth,
            max_nodes=max_nodes,
            time_limit_ms=time_limit_ms,
        )
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int)
    def request_move(self, position_obj: object, request_id: int) -> None:
        """Search for the best move in *position_obj* and emit result."""
        if not isinstance(position_obj, Position):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        try:
            result = self._engine.search(
                position_obj,
                self._limits,
                is_cancelled=self._cancel_event.is_set,
                output=lambda line: self.info_line.emit(request_id, line),
            )
        except CorruptPositionError:
            raise
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if result.best_move is None:
            self.search_no_move.emit(request_id, result.score_cp, result.nodes)
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.score_cp,
            result.nodes,
        )

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(int, int, int)
    def set_limits(self, sel_depth: int, max_nodes: int, time_limit_ms: int) -> None:
        """Update search limits (takes effect on the next search); 0 disables a budget."""
        self._limits = SearchLimits(
            sel_depth=sel_depth,
            max_nodes=max_nodes or None,
            time_limit_ms=time_limit_ms or None,
        )
