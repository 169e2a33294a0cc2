"""Chess engine package: evaluation, evaluation tree, search and Qt worker bridge."""

from chessdfs.engine.dfs import DFSEngine, should_check_position
from chessdfs.engine.eval_tree import BestLine, EvalNode, EvalTree
from chessdfs.engine.evaluation import DRAW_SCORE, MATE_SCORE, Evaluator, Evaluators
from chessdfs.engine.evaluators import material_evaluator, space_evaluator
from chessdfs.engine.qt_bridge import EngineWorker
from chessdfs.engine.search import (
    CancelCheck,
    IEngine,
    OutputSink,
    SearchLimits,
    SearchResult,
)

__all__ = [
    "BestLine",
    "CancelCheck",
    "DFSEngine",
    "DRAW_SCORE",
    "EngineWorker",
    "EvalNode",
    "EvalTree",
    "Evaluator",
    "Evaluators",
    "IEngine",
    "MATE_SCORE",
    "OutputSink",
    "SearchLimits",
    "SearchResult",
    "material_evaluator",
    "space_evaluator",
    "should_check_position",
]
