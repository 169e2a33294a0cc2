"""Evaluation tree: every scored line of a search, and the best one so far.

Each node stands for a line from the search root. Recorded scores follow the
negamax convention: a node's score is from the point of view of the side
that played the node's move. A node with children is worth minus the value
of its best child, and the best child is the one with the highest value
(the first inserted wins ties).

Values are refreshed lazily. :meth:`EvalTree.insert` only compares the new
node against its parent's current best; :meth:`EvalTree.update_best_line`
recomputes values over the subtrees touched since the previous call. Between
calls the best line read by reporting code may be stale.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from chessdfs.core.move import Move


@dataclass(slots=True, frozen=True)
class BestLine:
    """Principal variation and its score for the side to move at the root."""

    moves: tuple[Move, ...]
    score: float

    @property
    def move(self) -> Move | None:
        return self.moves[0] if self.moves else None


class EvalNode:
    """One line of the tree; the root node has no move."""

    __slots__ = ("move", "line", "score", "value", "children", "best", "_by_move", "_dirty")

    def __init__(self, move: Move | None, line: tuple[Move, ...]) -> None:
        self.move = move
        self.line = line
        self.score: float | None = None
        self.value: float | None = None
        self.children: list[EvalNode] = []
        self.best: EvalNode | None = None
        self._by_move: dict[Move, EvalNode] = {}
        self._dirty = False

    def child(self, move: Move) -> EvalNode | None:
        return self._by_move.get(move)

    def _add_child(self, move: Move) -> EvalNode:
        node = EvalNode(move, self.line + (move,))
        self.children.append(node)
        self._by_move[move] = node
        return node

    def __repr__(self) -> str:
        return f"EvalNode({' '.join(map(str, self.line)) or '<root>'}, value={self.value})"


def _better(candidate: EvalNode, incumbent: EvalNode | None) -> bool:
    if candidate.value is None:
        return False
    if incumbent is None or incumbent.value is None:
        return True
    return candidate.value > incumbent.value


class EvalTree:
    """Accumulates ``(line, score)`` observations and exposes the best line."""

    __slots__ = ("root", "_size")

    def __init__(self) -> None:
        self.root = EvalNode(None, ())
        self._size = 0

    def __len__(self) -> int:
        """Number of non-root nodes."""
        return self._size

    def insert(self, line: Sequence[Move], score: float) -> EvalNode:
        """Record *score* for *line*, creating missing nodes along the way."""
        if not line:
            raise ValueError("Cannot score the root line")
        parent = self.root
        parent._dirty = True
        node = parent
        for move in line:
            parent = node
            child = node.child(move)
            if child is None:
                child = node._add_child(move)
                self._size += 1
            child._dirty = True
            node = child

        node.score = score
        if not node.children:
            node.value = score
        if _better(node, parent.best):
            parent.best = node
        return node

    def find(self, line: Sequence[Move]) -> EvalNode | None:
        node: EvalNode | None = self.root
        for move in line:
            if node is None:
                return None
            node = node.child(move)
        return node

    def update_best_line(self) -> None:
        """Back up values and best-child pointers over every touched subtree."""
        self._backup(self.root)

    def _backup(self, node: EvalNode) -> None:
        if not node._dirty:
            return
        node._dirty = False
        if not node.children:
            node.value = node.score
            return

        best: EvalNode | None = None
        for child in node.children:
            self._backup(child)
            if _better(child, best):
                best = child
        node.best = best
        if best is not None and best.value is not None:
            node.value = -best.value
        else:
            node.value = node.score

    def get_best_line(self) -> BestLine:
        """Follow best-child pointers from the root to a leaf."""
        moves: list[Move] = []
        node = self.root
        while node.best is not None:
            node = node.best
            if node.move is not None:
                moves.append(node.move)
        first = self.root.best
        score = first.value if first is not None and first.value is not None else 0.0
        return BestLine(tuple(moves), score)

    @property
    def best_move(self) -> Move | None:
        best = self.root.best
        return best.move if best is not None else None

    def __iter__(self) -> Iterator[EvalNode]:
        """Depth-first walk over non-root nodes in insertion order."""
        stack = list(reversed(self.root.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
