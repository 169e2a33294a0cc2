"""FEN parsing and serialization."""

from __future__ import annotations

from chessdfs.core.board import Board
from chessdfs.core.enums import CastlingStatus, Color, PieceType
from chessdfs.core.piece import Piece
from chessdfs.core.position import Position
from chessdfs.core.types import Square, make_square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, tuple[Color, CastlingStatus]] = {
    "K": (Color.WHITE, CastlingStatus.KINGSIDE),
    "Q": (Color.WHITE, CastlingStatus.QUEENSIDE),
    "k": (Color.BLACK, CastlingStatus.KINGSIDE),
    "q": (Color.BLACK, CastlingStatus.QUEENSIDE),
}


def _parse_clock(text: str, name: str, fen: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Invalid FEN {name}: {text!r} in {fen!r}") from None
    if value < 0:
        raise ValueError(f"Invalid FEN {name}: {text!r} in {fen!r}")
    return value


def position_from_fen(fen: str) -> Position:
    """Parse a six-field FEN string into a :class:`Position`.

    Raises :class:`ValueError` on any malformed field; nothing is built
    until every field has been validated.
    """
    parts = fen.split()
    if len(parts) != 6:
        raise ValueError(f"Invalid FEN (need 6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part, half_part, full_part = parts

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    pieces: list[tuple[Square, Piece]] = []
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                pieces.append((make_square(file, rank), Piece.from_char(ch)))
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")
    for color in Color:
        kings = sum(
            1
            for _, piece in pieces
            if piece.color == color and piece.piece_type == PieceType.KING
        )
        if kings != 1:
            raise ValueError(f"Invalid FEN: {kings} {color} kings in {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    rights = [CastlingStatus.NONE, CastlingStatus.NONE]
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            entry = _CASTLING_CHARS.get(ch)
            if entry is None or ch in seen:
                raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            color, right = entry
            rights[int(color)] |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)

    # 5–6. Clocks
    halfmove = _parse_clock(half_part, "halfmove clock", fen)
    fullmove = _parse_clock(full_part, "fullmove number", fen)

    return Position(
        board=Board.from_pieces(pieces),
        side_to_move=side,
        white_castling=rights[int(Color.WHITE)],
        black_castling=rights[int(Color.BLACK)],
        en_passant=ep,
        halfmove_clock=halfmove,
        fullmove_number=fullmove,
    )


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling, normalised to KQkq order
    castling_str = pos.white_castling.fen(Color.WHITE) + pos.black_castling.fen(
        Color.BLACK
    )
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
