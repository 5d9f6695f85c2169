"""FEN parsing and serialisation, plus canonical position keys."""

from __future__ import annotations

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color
from rookie.core.piece import Piece
from rookie.core.position import Position
from rookie.core.types import Square, make_square, parse_square, rank_of

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_RIGHTS = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def parse_castling(text: str) -> CastlingRights:
    """Parse a FEN castling field such as ``KQk`` or ``-``."""
    castling = CastlingRights.NONE
    if text == "-":
        return castling
    seen: set[str] = set()
    for ch in text:
        right = _CASTLING_RIGHTS.get(ch)
        if right is None or ch in seen:
            raise ValueError(f"Invalid FEN castling field: {text!r}")
        seen.add(ch)
        castling |= right
    return castling


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    The two clock fields are optional, so a :func:`position_key` string
    parses as well.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
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
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = parse_castling(castling_part)

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise ValueError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # 5–6. Clocks (optional)
    halfmove = int(parts[4]) if len(parts) > 4 else 0
    if halfmove < 0:
        raise ValueError(f"Invalid FEN halfmove clock: {parts[4]!r}")
    fullmove = int(parts[5]) if len(parts) > 5 else 1
    if fullmove < 1:
        raise ValueError(f"Invalid FEN fullmove number: {parts[5]!r}")

    return Position(board, side, castling, ep, halfmove, fullmove)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    return f"{pos.key()} {pos.halfmove_clock} {pos.fullmove_number}"


def position_key(pos: Position) -> str:
    """Canonical repetition / cache key (FEN without clocks)."""
    return pos.key()
