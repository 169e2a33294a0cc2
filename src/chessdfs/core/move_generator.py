"""Move generation and attack detection over precomputed move vectors.

Every piece's reach is described by tables built once at import time:
fixed target sets for knights, kings and pawn captures, and rays (ordered
square sequences walking away from the origin) for pawn pushes and sliding
pieces. A single attack primitive, :meth:`MoveGenerator.iter_attacks`, walks
these tables against a target-square predicate and backs capture generation,
square-attack tests and check detection.

Not generated: en passant captures, castling, and pin legality (a move may
leave its own king attacked). See :data:`UNSUPPORTED_RULES`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Final

from chessdfs.core.enums import Color, PieceType
from chessdfs.core.move import Move
from chessdfs.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessdfs.core.board import Board
    from chessdfs.core.position import Position

SquarePredicate = Callable[[Square], bool]

UNSUPPORTED_RULES: Final = frozenset({"en-passant", "castling", "pin-legality"})

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# A check line spans at most 7 steps on an 8x8 board.
_MAX_BLOCK_STEPS: Final = 7


class CorruptPositionError(RuntimeError):
    """Raised when board contents violate a move-generation invariant."""


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            if ray:
                square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_attacks() -> tuple[tuple[tuple[Square, ...], ...], ...]:
    per_color: list[tuple[tuple[Square, ...], ...]] = []
    for forward in (1, -1):
        per_color.append(_build_targets(((-1, forward), (1, forward))))
    return tuple(per_color)


def _build_pawn_pushes() -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """Push ray per colour and square: one step, two from the start rank."""
    per_color: list[tuple[tuple[Square, ...], ...]] = []
    for forward, start_rank in ((1, 1), (-1, 6)):
        pushes: list[tuple[Square, ...]] = []
        for sq in range(64):
            rank_idx = sq >> 3
            one = rank_idx + forward
            if rank_idx in (0, 7) or not 0 <= one < 8:
                pushes.append(())
                continue
            ray = [make_square(sq & 7, one)]
            if rank_idx == start_rank:
                ray.append(make_square(sq & 7, one + forward))
            pushes.append(tuple(ray))
        per_color.append(tuple(pushes))
    return tuple(per_color)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_PAWN_ATTACKS = _build_pawn_attacks()
_PAWN_PUSHES = _build_pawn_pushes()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS: tuple[tuple[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]], ...] = (
    (PieceType.BISHOP, _BISHOP_RAYS),
    (PieceType.ROOK, _ROOK_RAYS),
    (PieceType.QUEEN, _QUEEN_RAYS),
)
_PROMOTION_RANK: tuple[int, int] = (7, 0)


def _with_promotions(
    from_sq: Square, to_sq: Square, color: Color
) -> Iterator[Move]:
    if rank_of(to_sq) == _PROMOTION_RANK[int(color)]:
        for pt in PROMOTION_TYPES:
            yield Move(from_sq, to_sq, pt)
    else:
        yield Move(from_sq, to_sq)


class MoveGenerator:
    """Generates moves for a given :class:`Position`.

    The position is never modified; all queries read its board only.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board: Board = position.board

    # -- Attack primitive ---------------------------------------------------

    def iter_attacks(
        self,
        condition: SquarePredicate,
        color: Color,
        *,
        include_king: bool = True,
    ) -> Iterator[Move]:
        """Yield every move of *color* whose attacked square satisfies *condition*.

        Pawns test their two diagonal targets, knights and kings their fixed
        targets. Sliding pieces walk each ray and stop at the first occupied
        square, which is yielded only when it satisfies *condition*.
        """
        board = self._board
        pawn_attacks = _PAWN_ATTACKS[int(color)]

        for from_sq in sorted(board.pieces(color, PieceType.PAWN)):
            for to_sq in pawn_attacks[from_sq]:
                if condition(to_sq):
                    yield from _with_promotions(from_sq, to_sq, color)

        for from_sq in sorted(board.pieces(color, PieceType.KNIGHT)):
            for to_sq in _KNIGHT_TARGETS[from_sq]:
                if condition(to_sq):
                    yield Move(from_sq, to_sq)

        for piece_type, rays in _SLIDER_RAYS:
            for from_sq in sorted(board.pieces(color, piece_type)):
                for ray in rays[from_sq]:
                    for to_sq in ray:
                        if condition(to_sq):
                            yield Move(from_sq, to_sq)
                        if board[to_sq] is not None:
                            break

        if include_king:
            for from_sq in sorted(board.pieces(color, PieceType.KING)):
                for to_sq in _KING_TARGETS[from_sq]:
                    if condition(to_sq):
                        yield Move(from_sq, to_sq)

    def attacks_on_condition(
        self,
        condition: SquarePredicate,
        color: Color,
        *,
        include_king: bool = True,
    ) -> list[Move]:
        return list(self.iter_attacks(condition, color, include_king=include_king))

    def captures(self, color: Color) -> list[Move]:
        """All moves by *color* onto a square occupied by the opponent."""
        board = self._board
        return self.attacks_on_condition(lambda sq: board.is_opponent(sq, color), color)

    def attacks_square(self, color: Color, square: Square) -> bool:
        """Does *color* attack *square*?"""
        for _ in self.iter_attacks(lambda sq: sq == square, color):
            return True
        return False

    def checkers(self, color: Color) -> list[Square]:
        """Squares of opponent pieces attacking *color*'s king."""
        king_sq = self._board.king_square(color)
        attacks = self.iter_attacks(lambda sq: sq == king_sq, color.opposite)
        return sorted({move.from_sq for move in attacks})

    # -- Legal move sets ----------------------------------------------------

    def valid_moves(self, checkers: list[Square] | None = None) -> list[Move]:
        """Moves available to the side to move.

        When the king is attacked the set is restricted to
        :meth:`valid_moves_in_check`. *checkers* may be passed when the
        caller already knows them.
        """
        color = self._pos.side_to_move
        if checkers is None:
            checkers = self.checkers(color)
        if checkers:
            return self.valid_moves_in_check(checkers)

        moves = self.captures(color)
        moves.extend(self.quiet_moves(color))
        return moves

    def quiet_moves(
        self,
        color: Color,
        *,
        include_king: bool = True,
        targets: frozenset[Square] | None = None,
    ) -> list[Move]:
        """Non-capturing moves, optionally limited to destinations in *targets*."""
        board = self._board
        moves: list[Move] = []
        append = moves.append

        def wanted(sq: Square) -> bool:
            return targets is None or sq in targets

        pushes = _PAWN_PUSHES[int(color)]
        for from_sq in sorted(board.pieces(color, PieceType.PAWN)):
            for to_sq in pushes[from_sq]:
                if board[to_sq] is not None:
                    break
                if wanted(to_sq):
                    moves.extend(_with_promotions(from_sq, to_sq, color))

        for from_sq in sorted(board.pieces(color, PieceType.KNIGHT)):
            for to_sq in _KNIGHT_TARGETS[from_sq]:
                if board[to_sq] is None and wanted(to_sq):
                    append(Move(from_sq, to_sq))

        for piece_type, rays in _SLIDER_RAYS:
            for from_sq in sorted(board.pieces(color, piece_type)):
                for ray in rays[from_sq]:
                    for to_sq in ray:
                        if board[to_sq] is not None:
                            break
                        if wanted(to_sq):
                            append(Move(from_sq, to_sq))

        if include_king:
            for from_sq in sorted(board.pieces(color, PieceType.KING)):
                for to_sq in _KING_TARGETS[from_sq]:
                    if board[to_sq] is None and wanted(to_sq):
                        append(Move(from_sq, to_sq))
        return moves

    def valid_moves_in_check(self, checkers: list[Square]) -> list[Move]:
        """Moves that resolve a check delivered from *checkers*.

        King steps to squares that are neither friendly-occupied nor attacked
        are always candidates. With a single non-knight checker, moves onto
        the squares between checker and king, or capturing the checker, are
        added. A knight check can only be answered by capturing the knight,
        and a double check only by a king move.
        """
        board = self._board
        color = self._pos.side_to_move
        opponent = color.opposite
        king_sq = board.king_square(color)

        # Attacks are evaluated with the king lifted so it cannot shelter
        # behind itself on the checking line.
        without_king = _KinglessView(self._pos, king_sq)
        moves: list[Move] = []
        for to_sq in _KING_TARGETS[king_sq]:
            target = board[to_sq]
            if target is not None and target.color == color:
                continue
            if not without_king.attacks_square(opponent, to_sq):
                moves.append(Move(king_sq, to_sq))

        if len(checkers) != 1:
            return moves

        checker_sq = checkers[0]
        checker = board[checker_sq]
        if checker is None:
            raise CorruptPositionError(f"Checking square {checker_sq} is empty")

        moves.extend(
            self.attacks_on_condition(
                lambda sq: sq == checker_sq, color, include_king=False
            )
        )
        if checker.piece_type == PieceType.KNIGHT:
            return moves

        between = self.block_squares(king_sq, checker_sq)
        if between:
            moves.extend(self.quiet_moves(color, include_king=False, targets=between))
        return moves

    @staticmethod
    def block_squares(king_sq: Square, checker_sq: Square) -> frozenset[Square]:
        """Squares strictly between *king_sq* and *checker_sq*.

        Walks from the king toward the checker by a unit step derived from
        the coordinate deltas. More than seven steps means the two squares
        do not share a line, which no legal check can produce.
        """
        diff_file = file_of(checker_sq) - file_of(king_sq)
        diff_rank = rank_of(checker_sq) - rank_of(king_sq)
        max_diff = max(abs(diff_file), abs(diff_rank))
        if max_diff == 0:
            raise CorruptPositionError(f"King and checker share square {king_sq}")
        step = int(diff_file / max_diff) + int(diff_rank / max_diff) * 8

        squares: set[Square] = set()
        sq = king_sq
        steps = 0
        while True:
            sq += step
            steps += 1
            if steps > _MAX_BLOCK_STEPS or not 0 <= sq < 64:
                raise CorruptPositionError(
                    f"Check line from {king_sq} never reaches {checker_sq}"
                )
            if sq == checker_sq:
                return frozenset(squares)
            squares.add(sq)


class _KinglessView(MoveGenerator):
    """Generator over the same position with one king removed."""

    __slots__ = ()

    def __init__(self, position: Position, king_sq: Square) -> None:
        super().__init__(position)
        self._board = position.board.without(king_sq)
