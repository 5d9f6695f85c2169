"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookie.core.enums import CastlingRights, Color, PieceType
from rookie.core.move import Move
from rookie.core.piece import Piece
from rookie.core.types import Square, make_square

if TYPE_CHECKING:
    from rookie.core.position import Position


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


def _to_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = []
    for squares in targets:
        mask = 0
        for to_sq in squares:
            mask |= 1 << to_sq
        masks.append(mask)
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """[color][sq] -> squares from which a *color* pawn attacks *sq*."""
    white_from = _build_targets(((-1, -1), (1, -1)))
    black_from = _build_targets(((-1, 1), (1, 1)))
    return (_to_masks(white_from), _to_masks(black_from))


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
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _to_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _to_masks(_KING_TARGETS)
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)

# (right, king from, rook square, cells that must be empty, cells that must be
# safe); the last safe cell is the king destination.
_CastlingPath = tuple[
    CastlingRights, Square, Square, tuple[Square, ...], tuple[Square, ...]
]
_CASTLING_PATHS: dict[Color, tuple[_CastlingPath, ...]] = {
    Color.WHITE: (
        (CastlingRights.WHITE_KINGSIDE, 4, 7, (5, 6), (4, 5, 6)),
        (CastlingRights.WHITE_QUEENSIDE, 4, 0, (1, 2, 3), (4, 3, 2)),
    ),
    Color.BLACK: (
        (CastlingRights.BLACK_KINGSIDE, 60, 63, (61, 62), (60, 61, 62)),
        (CastlingRights.BLACK_QUEENSIDE, 60, 56, (57, 58, 59), (60, 59, 58)),
    ),
}


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, color: Color | None = None) -> list[Move]:
        """All strictly legal moves for *color* (default: side to move)."""
        if color is None:
            color = self._pos.side_to_move
        legal: list[Move] = []
        append_legal = legal.append
        pos = self._pos

        for move in self.generate_pseudo_legal_moves(color):
            undo = pos.make_move(move)
            try:
                if not self.is_in_check(color):
                    append_legal(move)
            finally:
                pos.unmake_move(undo)
        return legal

    def generate_pseudo_legal_moves(self, color: Color | None = None) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        if color is None:
            color = self._pos.side_to_move
        moves: list[Move] = []
        board = self._board

        for sq in board.pieces(color, PieceType.PAWN):
            self._gen_pawn(sq, color, moves)
        for sq in board.pieces(color, PieceType.KNIGHT):
            self._gen_steps(sq, color, _KNIGHT_TARGETS[sq], moves)
        for sq in board.pieces(color, PieceType.BISHOP):
            self._gen_sliding(sq, color, _BISHOP_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.ROOK):
            self._gen_sliding(sq, color, _ROOK_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.QUEEN):
            self._gen_sliding(sq, color, _QUEEN_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.KING):
            self._gen_steps(sq, color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, color, moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[int(by_color)][sq]
        ):
            return True
        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
        if queens or board.pieces_bitboard(by_color, PieceType.BISHOP):
            if self._ray_hits(_BISHOP_RAYS[sq], by_color, _DIAGONAL_SLIDERS):
                return True
        if queens or board.pieces_bitboard(by_color, PieceType.ROOK):
            if self._ray_hits(_ROOK_RAYS[sq], by_color, _STRAIGHT_SLIDERS):
                return True
        return False

    def gives_check(self, move: Move) -> bool:
        """Whether *move* leaves the opponent's king in check."""
        mover = self._pos.side_to_move
        undo = self._pos.make_move(move)
        try:
            return self.is_in_check(mover.opposite)
        finally:
            self._pos.unmake_move(undo)

    # -- Piece-specific generators (private) -------------------------------

    def _ray_hits(
        self,
        rays: tuple[tuple[Square, ...], ...],
        by_color: Color,
        sliders: tuple[PieceType, PieceType],
    ) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in sliders:
                    return True
                break
        return False

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        file_idx = sq & 7
        rank_idx = sq >> 3
        if color == Color.WHITE:
            step, start_rank = 8, 1
        else:
            step, start_rank = -8, 6

        # Promotion needs no special handling here: reaching the last rank
        # is enough for Position.make_move to crown a queen.
        one_step = sq + step
        if not 0 <= one_step < 64:
            return
        if board.is_empty(one_step):
            moves.append(Move(sq, one_step))
            if rank_idx == start_rank and board.is_empty(one_step + step):
                moves.append(Move(sq, one_step + step))

        # Only the side to move may capture en passant.
        ep = self._pos.en_passant if color == self._pos.side_to_move else None
        for file_delta in (-1, 1):
            if not 0 <= file_idx + file_delta < 8:
                continue
            cap_sq = one_step + file_delta
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    moves.append(Move(sq, cap_sq))
            elif cap_sq == ep:
                moves.append(Move(sq, cap_sq))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        castling = self._pos.castling
        if not castling:
            return

        board = self._board
        opponent = color.opposite
        rook = Piece(color, PieceType.ROOK)
        for right, king_from, rook_sq, empty, safe in _CASTLING_PATHS[color]:
            if not castling & right or king_sq != king_from:
                continue
            if board[rook_sq] != rook:
                continue
            if not all(board.is_empty(cell) for cell in empty):
                continue
            if any(self.is_square_attacked(cell, opponent) for cell in safe):
                continue
            moves.append(Move(king_from, safe[-1]))
