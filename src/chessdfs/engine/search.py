"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chessdfs.core.move import Move
    from chessdfs.core.position import Position

CancelCheck = Callable[[], bool]
OutputSink = Callable[[str], None]


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation.

    ``sel_depth`` bounds line length in plies. ``max_nodes`` and
    ``time_limit_ms`` are soft budgets checked once per loop iteration;
    ``None`` disables them.
    """

    sel_depth: int = 4
    max_nodes: int | None = None
    time_limit_ms: int | None = None
    report_interval_s: float = 1.0


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_move: Move | None
    score_cp: int
    depth: int
    nodes: int
    pv: tuple[Move, ...] = ()


class IEngine(Protocol):
    """Protocol for engines driven by the Qt worker or a front end."""

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
        output: OutputSink | None = None,
    ) -> SearchResult: ...
